from __future__ import annotations

from typing import Iterable, Iterator, Tuple

from music_player.errors import EmptyPlaylist, InvalidIndex
from music_player.models import Track


class Playlist:
    """
    Ordered, immutable sequence of tracks for one playback session.

    Cursor arithmetic wraps in both directions: past the last track comes
    the first one, before the first track comes the last one.
    """

    __slots__ = ("_tracks",)

    def __init__(self, tracks: Iterable[Track] = ()) -> None:
        self._tracks: Tuple[Track, ...] = tuple(tracks)

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(self._tracks)

    def __getitem__(self, index: int) -> Track:
        return self._tracks[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Playlist):
            return NotImplemented
        return self._tracks == other._tracks

    def __hash__(self) -> int:
        return hash(self._tracks)

    def __repr__(self) -> str:
        names = ", ".join(t.display_name for t in self._tracks)
        return f"Playlist([{names}])"

    @property
    def tracks(self) -> Tuple[Track, ...]:
        return self._tracks

    def is_empty(self) -> bool:
        return not self._tracks

    def check_index(self, index: int) -> None:
        if not self._tracks:
            raise EmptyPlaylist()
        if not 0 <= index < len(self._tracks):
            raise InvalidIndex(index, len(self._tracks))

    def index_of(self, track_id: str) -> int:
        for i, t in enumerate(self._tracks):
            if t.track_id == track_id:
                return i
        return -1

    def next_index(self, index: int) -> int:
        if not self._tracks:
            raise EmptyPlaylist()
        return (index + 1) % len(self._tracks)

    def previous_index(self, index: int) -> int:
        if not self._tracks:
            raise EmptyPlaylist()
        return (index - 1 + len(self._tracks)) % len(self._tracks)

    def is_last(self, index: int) -> bool:
        return index == len(self._tracks) - 1
