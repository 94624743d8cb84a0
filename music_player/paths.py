from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping, Optional

CONFIG_ENV = "MUSIC_PLAYER_CONFIG"
CONFIG_NAME = "config.json"


def default_config_file(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Where config.json lives, first match wins:
    $MUSIC_PLAYER_CONFIG, next to a frozen executable, the repo checkout.
    """
    env = os.environ if environ is None else environ
    override = (env.get(CONFIG_ENV) or "").strip()
    if override:
        return Path(override).expanduser()
    if getattr(sys, "frozen", False):  # PyInstaller
        return Path(sys.executable).resolve().parent / CONFIG_NAME
    return Path(__file__).resolve().parents[1] / CONFIG_NAME
