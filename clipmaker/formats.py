"""Format descriptors returned by the trim-info service."""

import re
from dataclasses import dataclass

VIDEO_ID_RE = re.compile(r"(?:v=|youtu\.be/)([A-Za-z0-9_-]{11})")

AUDIO_ONLY = "audio only"


@dataclass
class FormatDescriptor:
    format_id: str
    ext: str = ""
    container: str = ""
    resolution: str = ""
    note: str = ""


def extract_video_id(url: str) -> str | None:
    m = VIDEO_ID_RE.search(url)
    return m.group(1) if m else None


def parse_formats(payload: dict) -> list[FormatDescriptor]:
    """Read the ``formats`` list of a trim-info response, skipping malformed entries."""
    formats: list[FormatDescriptor] = []
    for f in payload.get("formats") or []:
        if not isinstance(f, dict) or f.get("format_id") is None:
            continue
        formats.append(
            FormatDescriptor(
                format_id=str(f["format_id"]),
                ext=f.get("ext") or "",
                container=f.get("container") or "",
                resolution=f.get("resolution") or "",
                note=f.get("note") or "",
            )
        )
    return formats


def resolution_choices(formats: list[FormatDescriptor]) -> list[str]:
    """Distinct notes of the mp4 formats, in the order the service listed them."""
    seen: list[str] = []
    for f in formats:
        if f.ext == "mp4" and f.note not in seen:
            seen.append(f.note)
    return seen


def audio_format(formats: list[FormatDescriptor]) -> FormatDescriptor | None:
    return next((f for f in formats if f.resolution == AUDIO_ONLY), None)


def build_download_payload(
    url: str,
    formats: list[FormatDescriptor],
    resolution: str,
    start: float,
    end: float,
    is_trim: bool = True,
) -> dict:
    """Build the body for the download service."""
    selected = next((f for f in formats if f.note == resolution), None)
    if selected is None:
        raise ValueError(f"Resolution {resolution!r} is not available")
    audio = audio_format(formats)
    return {
        "url": url,
        "audio_format_id": audio.format_id if audio else None,
        "end_time": end,
        "format_id": selected.format_id,
        "start_time": start,
        "is_trim": is_trim,
    }
