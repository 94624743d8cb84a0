from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from music_player.models import Track


class PlaybackError(Exception):
    """Base for every recoverable playback failure."""


class InvalidIndex(PlaybackError):
    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"index {index} out of range for playlist of {size}")
        self.index = index
        self.size = size


class EmptyPlaylist(PlaybackError):
    def __init__(self) -> None:
        super().__init__("playlist is empty")


class SinkUnavailable(PlaybackError):
    """Audio sink could not start or resume (missing/corrupt source, no mixer)."""

    def __init__(self, message: str, track: Optional["Track"] = None) -> None:
        super().__init__(message)
        self.track = track
