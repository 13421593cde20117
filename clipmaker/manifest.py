"""JSON merge manifest: the list of clips the CLI sends to the merge service."""

import json
from pathlib import Path

from clipmaker.formats import extract_video_id
from clipmaker.sequence import MAX_ITEMS, ClipItem, ClipSequence
from clipmaker.timecode import from_display


def load_manifest(path: str | Path) -> ClipSequence:
    """Load and validate a manifest file into a ClipSequence.

    Expected shape::

        {"clips": [{"url": "...", "start": "00:00:10", "end": "00:00:25"}]}
    """
    path = Path(path)
    data = json.loads(path.read_text())

    clips = data.get("clips") if isinstance(data, dict) else None
    if not clips:
        raise ValueError("Manifest must contain a non-empty 'clips' list")
    if len(clips) > MAX_ITEMS:
        raise ValueError(f"Manifest may contain at most {MAX_ITEMS} clips")

    items: list[ClipItem] = []
    for i, clip in enumerate(clips, 1):
        if not all(k in clip for k in ("url", "start", "end")):
            raise ValueError(f"Clip {i} must contain 'url', 'start' and 'end' fields")
        video_id = extract_video_id(clip["url"])
        if video_id is None:
            raise ValueError(f"Clip {i}: not a YouTube URL: {clip['url']}")

        item = ClipItem(url=clip["url"], video_id=video_id)
        start = from_display(clip["start"])
        end = from_display(clip["end"])
        if end < start + 1:
            raise ValueError(f"Clip {i}: end must be at least one second after start")
        # No player here, so the manifest end doubles as the known duration.
        item.range.initialize(end)
        item.range.commit_start(clip["start"])
        items.append(item)

    return ClipSequence(items)
