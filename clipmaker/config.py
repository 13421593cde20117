"""Runtime settings for the upstream services."""

import os
from dataclasses import dataclass

ENV_PREFIX = "CLIPMAKER_"


@dataclass
class Settings:
    """Upstream endpoints and timing."""

    trim_url: str = "http://91.108.111.214/api/trim"
    download_url: str = "https://api.downloadbazar.com/download/"
    merge_url: str = "http://91.108.111.214/api/merge"
    file_check_url: str = "http://91.108.111.214/api/file-check"
    merged_download_url: str = "http://91.108.111.214/api/download"
    timeout: float = 30.0
    poll_interval: float = 2.0

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """Build settings, letting ``CLIPMAKER_<FIELD>`` variables override defaults."""
        environ = os.environ if environ is None else environ
        defaults = cls()
        values = {}
        for name, current in vars(defaults).items():
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            values[name] = float(raw) if isinstance(current, float) else raw
        return cls(**values)
