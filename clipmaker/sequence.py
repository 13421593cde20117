"""Ordered list of clips for multi-clip (merge) mode."""

import uuid
from dataclasses import dataclass, field, fields

from clipmaker.formats import extract_video_id
from clipmaker.ranges import ClipRange

MAX_ITEMS = 5


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class ClipItem:
    """One clip in the sequence. ``id`` never changes; position is derived."""

    id: str = field(default_factory=_new_id)
    url: str = ""
    video_id: str | None = None
    range: ClipRange = field(default_factory=ClipRange)
    clip_url: str | None = None

    def apply(self, patch: "ItemPatch") -> None:
        for f in fields(patch):
            value = getattr(patch, f.name)
            if value is UNSET:
                continue
            if f.name in ("raw_start", "raw_end"):
                setattr(self.range, f.name, value)
            else:
                setattr(self, f.name, value)


@dataclass
class ItemPatch:
    """Fields of a ClipItem that may be changed by ``ClipSequence.update``."""

    url: object = UNSET
    video_id: object = UNSET
    clip_url: object = UNSET
    raw_start: object = UNSET
    raw_end: object = UNSET


class ClipSequence:
    """Between one and five clips, in merge order."""

    def __init__(self, items: list[ClipItem] | None = None):
        self.items: list[ClipItem] = list(items or [])[:MAX_ITEMS]
        if not self.items:
            self.items.append(ClipItem())

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index: int) -> ClipItem:
        return self.items[index]

    @property
    def ids(self) -> list[str]:
        return [item.id for item in self.items]

    @property
    def is_full(self) -> bool:
        return len(self.items) >= MAX_ITEMS

    def index_of(self, item_id: str) -> int:
        for i, item in enumerate(self.items):
            if item.id == item_id:
                return i
        raise KeyError(item_id)

    def insert(self) -> ClipItem | None:
        """Append an empty clip. Returns None when the sequence is full."""
        if self.is_full:
            return None
        item = ClipItem()
        self.items.append(item)
        return item

    def remove(self, index: int) -> None:
        del self.items[index]
        if not self.items:
            self.items.append(ClipItem())

    def update(self, index: int, patch: ItemPatch) -> ClipItem:
        item = self.items[index]
        item.apply(patch)
        return item

    def set_url(self, index: int, url: str) -> ClipItem:
        """URL edit: re-extract the video id and drop any previous clip."""
        return self.update(
            index, ItemPatch(url=url, video_id=extract_video_id(url), clip_url=None)
        )

    def reorder(self, from_id: str, to_id: str) -> None:
        """Move ``from_id`` into the slot currently held by ``to_id``."""
        if from_id == to_id:
            return
        old_index = self.index_of(from_id)
        new_index = self.index_of(to_id)
        moved = self.items.pop(old_index)
        self.items.insert(new_index, moved)

    def merge_payload(self) -> list[dict]:
        """Clips with a video id, numbered in order, as the merge service expects."""
        ready = [item for item in self.items if item.video_id]
        return [
            {
                "position": i,
                "videoId": item.video_id,
                "startTime": item.range.raw_start,
                "endTime": item.range.raw_end,
            }
            for i, item in enumerate(ready, 1)
        ]
