"""Clip range model. Keeps slider, text fields and player position in sync."""

from typing import Protocol

from clipmaker.timecode import TimecodeError, from_display, to_display

MIN_GAP = 1


class PlayerAdapter(Protocol):
    """The embedded video player, as seen by a range."""

    def get_duration(self) -> float: ...

    def seek_to(self, seconds: float, allow_seek_ahead: bool) -> None: ...


class ClipRange:
    """A ``[start, end]`` selection in seconds over a video of known duration.

    ``raw_start`` and ``raw_end`` are the editable text fields. They are always
    rewritten from the range after a programmatic change and only read back
    on an explicit commit.
    """

    def __init__(self, player: PlayerAdapter | None = None) -> None:
        self.start: float = 0
        self.end: float = 0
        self.total_duration: float = 0
        self.raw_start = to_display(0)
        self.raw_end = to_display(0)
        self.player = player
        self.initialized = False

    def __repr__(self) -> str:
        return f"ClipRange(start={self.start}, end={self.end}, total={self.total_duration})"

    @property
    def selected_duration(self) -> float:
        return self.end - self.start

    @property
    def selected_display(self) -> str:
        return to_display(self.selected_duration)

    def _seek(self, seconds: float) -> None:
        if self.player is not None:
            self.player.seek_to(seconds, True)

    def _sync_raw(self) -> None:
        self.raw_start = to_display(self.start)
        self.raw_end = to_display(self.end)

    def initialize(self, total_duration: float) -> bool:
        """Set the range to the whole video. Only the first call has effect."""
        if self.initialized:
            return False
        self.total_duration = total_duration
        self.start, self.end = 0, total_duration
        self._sync_raw()
        self.initialized = True
        return True

    def attach_player(self, player: PlayerAdapter) -> bool:
        """Player-ready callback: keep the player and initialize from its duration."""
        self.player = player
        return self.initialize(player.get_duration())

    def reset(self) -> None:
        self.start = self.end = self.total_duration = 0
        self._sync_raw()
        self.initialized = False

    def on_slider_change(self, values: tuple[float, float]) -> None:
        # The slider enforces ordering and the minimum gap itself.
        self.start, self.end = values
        self._sync_raw()
        self._seek(self.start)

    def commit_start(self, text: str | None = None) -> bool:
        """Commit the start field. Returns False if the text was rejected."""
        if text is not None:
            self.raw_start = text
        try:
            secs = from_display(self.raw_start)
        except TimecodeError:
            self.raw_start = to_display(self.start)
            return False
        self.start = max(0, min(secs, self.end - MIN_GAP))
        self.raw_start = to_display(self.start)
        self._seek(self.start)
        return True

    def commit_end(self, text: str | None = None) -> bool:
        """Commit the end field. Returns False if the text was rejected.

        Playback goes back to the clip start, not the new end.
        """
        if text is not None:
            self.raw_end = text
        try:
            secs = from_display(self.raw_end)
        except TimecodeError:
            self.raw_end = to_display(self.end)
            return False
        self.end = max(min(secs, self.total_duration), self.start + MIN_GAP)
        self.raw_end = to_display(self.end)
        self._seek(self.start)
        return True

    def nudge_start(self, delta: int) -> None:
        self.start = max(0, min(self.start + delta, self.end - MIN_GAP))
        self.raw_start = to_display(self.start)
        self._seek(self.start)

    def nudge_end(self, delta: int) -> None:
        self.end = max(min(self.end + delta, self.total_duration), self.start + MIN_GAP)
        self.raw_end = to_display(self.end)
        self._seek(self.end)

    def jump_to_start(self) -> None:
        self._seek(self.start)

    def jump_to_end(self) -> None:
        self._seek(self.end)
