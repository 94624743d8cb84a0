from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

from music_player.config import SUPPORTED_EXTENSIONS
from music_player.errors import PlaybackError


@dataclass(frozen=True, slots=True)
class Track:
    track_id: str
    display_name: str
    source_ref: str  # opaque locator, a file path for the pygame sink


class PlaybackState(Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class AdvancePolicy(Enum):
    CONTINUOUS = "continuous"
    SINGLE_TRACK = "single_track"

    @classmethod
    def parse(cls, value: str | "AdvancePolicy") -> "AdvancePolicy":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"unknown advance policy: {value!r}")
        key = value.strip().lower().replace("-", "_")
        for policy in cls:
            if policy.value == key:
                return policy
        raise ValueError(f"unknown advance policy: {value!r}")


class TransportAction(Enum):
    PLAY = "play"
    PAUSE = "pause"
    TOGGLE = "toggle"
    STOP = "stop"
    NEXT = "next"
    PREVIOUS = "previous"


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    cursor: Optional[int]
    state: PlaybackState
    track: Optional[Track] = None
    error: Optional[PlaybackError] = None


def track_from_path(path: str | Path, track_id: Optional[str] = None) -> Track:
    p = Path(path)
    name = p.name.rsplit(".", 1)[0] if "." in p.name else p.name
    return Track(
        track_id=track_id if track_id is not None else str(p),
        display_name=name or p.name,
        source_ref=str(p),
    )


def tracks_from_paths(paths: Iterable[str | Path]) -> List[Track]:
    tracks: List[Track] = []
    for raw in paths:
        p = Path(raw)
        if p.suffix.lower() not in SUPPORTED_EXTENSIONS:
            continue
        tracks.append(track_from_path(p, track_id=str(len(tracks))))
    return tracks
