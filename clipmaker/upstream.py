"""HTTP client for the remote trim, download and merge services."""

import logging
from dataclasses import dataclass
from typing import Any

import requests

from clipmaker.config import Settings

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """A required input is missing; no request was made."""
    pass


class UpstreamError(RuntimeError):
    """The upstream answered with an error status, error envelope or non-JSON body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkError(UpstreamError):
    """The upstream could not be reached."""
    pass


@dataclass
class UpstreamResponse:
    """Parsed JSON body plus the status it came with."""

    status_code: int
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def raise_for_status(self, default: str = "Upstream request failed") -> None:
        if self.ok:
            return
        message = default
        if isinstance(self.data, dict) and self.data.get("error"):
            message = str(self.data["error"])
        raise UpstreamError(message, self.status_code)


def _require(value: Any, message: str) -> None:
    if not value:
        raise ValidationError(message)


class UpstreamClient:
    """Thin wrapper that posts/gets JSON against the configured endpoints."""

    def __init__(self, settings: Settings | None = None, session: requests.Session | None = None):
        self.settings = settings or Settings()
        self.session = session or requests.Session()

    def _request(self, method: str, url: str, **kwargs) -> UpstreamResponse:
        try:
            resp = self.session.request(method, url, timeout=self.settings.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise NetworkError("Network error, please try again") from e
        try:
            data = resp.json()
        except ValueError as e:
            logger.warning("%s %s returned non-JSON body (status %s)", method, url, resp.status_code)
            raise UpstreamError("Upstream returned an invalid response", resp.status_code) from e
        logger.debug("%s %s -> %s", method, url, resp.status_code)
        return UpstreamResponse(status_code=resp.status_code, data=data)

    def trim_info(self, video_url: str) -> UpstreamResponse:
        """Fetch the available formats (or a processing envelope) for a video."""
        _require(video_url, "Video URL is required")
        return self._request("POST", self.settings.trim_url, json={"videoUrl": video_url})

    def download(self, payload: dict) -> UpstreamResponse:
        """Request a (possibly trimmed) downloadable file."""
        _require(payload.get("url"), "Video URL is required")
        body = {
            "audio_format_id": payload.get("audio_format_id"),
            "end_time": payload.get("end_time"),
            "format_id": payload.get("format_id"),
            "is_trim": payload.get("is_trim"),
            "start_time": payload.get("start_time"),
            "url": payload["url"],
        }
        return self._request("POST", self.settings.download_url, json=body)

    def start_merge(self, videos: list[dict]) -> UpstreamResponse:
        _require(videos, "At least one video is required")
        return self._request("POST", self.settings.merge_url, json={"videos": videos})

    def merge_status(self, job_id: str) -> UpstreamResponse:
        _require(job_id, "Job id is required")
        return self._request("GET", self.settings.merge_url, params={"id": job_id})

    def file_check(self, filename: str) -> UpstreamResponse:
        _require(filename, "File name is required")
        return self._request("GET", self.settings.file_check_url, params={"file": filename})

    def open_stream(self, url: str, params: dict | None = None) -> requests.Response:
        """Open a streaming GET. The caller closes the response.

        Raises NetworkError if the fetch fails or the upstream status is not 2xx.
        """
        try:
            resp = self.session.get(url, params=params, stream=True, timeout=self.settings.timeout)
        except requests.RequestException as e:
            logger.warning("GET %s failed: %s", url, e)
            raise NetworkError("Upstream fetch failed") from e
        if not resp.ok:
            resp.close()
            logger.warning("GET %s -> %s", url, resp.status_code)
            raise NetworkError("Upstream fetch failed", resp.status_code)
        return resp
