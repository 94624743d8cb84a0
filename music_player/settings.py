from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from music_player.config import (
    DEFAULT_ADVANCE_POLICY,
    DEFAULT_VOLUME,
    DEFAULT_WRAP_AROUND,
)
from music_player.models import AdvancePolicy
from music_player.storage import load_json, save_json

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PlayerConfig:
    advance_policy: AdvancePolicy = AdvancePolicy.CONTINUOUS
    wrap_around: bool = DEFAULT_WRAP_AROUND
    volume: float = DEFAULT_VOLUME

    def to_dict(self) -> dict:
        return {
            "advance_policy": self.advance_policy.value,
            "wrap_around": self.wrap_around,
            "volume": self.volume,
        }


def clamp_volume(volume: float) -> float:
    return min(1.0, max(0.0, float(volume)))


def load_config(path: Path) -> PlayerConfig:
    data = load_json(
        path,
        {
            "advance_policy": DEFAULT_ADVANCE_POLICY,
            "wrap_around": DEFAULT_WRAP_AROUND,
            "volume": DEFAULT_VOLUME,
        },
    )
    if not isinstance(data, dict):
        logger.warning("Ignoring malformed config in %s", path)
        data = {}

    try:
        policy = AdvancePolicy.parse(data.get("advance_policy") or DEFAULT_ADVANCE_POLICY)
    except ValueError as e:
        logger.warning("%s; falling back to %s", e, DEFAULT_ADVANCE_POLICY)
        policy = AdvancePolicy.parse(DEFAULT_ADVANCE_POLICY)

    try:
        volume = clamp_volume(data.get("volume", DEFAULT_VOLUME))
    except (TypeError, ValueError):
        volume = DEFAULT_VOLUME

    wrap_around = data.get("wrap_around", DEFAULT_WRAP_AROUND)
    if not isinstance(wrap_around, bool):
        logger.warning("wrap_around must be true or false, got %r", wrap_around)
        wrap_around = DEFAULT_WRAP_AROUND

    return PlayerConfig(
        advance_policy=policy,
        wrap_around=wrap_around,
        volume=volume,
    )


def save_config(path: Path, config: PlayerConfig) -> bool:
    return save_json(path, config.to_dict())
