# music_player/app.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from PySide6.QtCore import QCoreApplication

from music_player.config import APP_TITLE
from music_player.console import ConsoleCommands
from music_player.controller import PlaybackController
from music_player.events import EventBus
from music_player.models import AdvancePolicy, tracks_from_paths
from music_player.paths import default_config_file
from music_player.playback import PygameAudioSink
from music_player.playlist import Playlist
from music_player.presenter import LogPresenter, attach_presenter
from music_player.pump import EventPump
from music_player.settings import PlayerConfig, clamp_volume, load_config, save_config

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="music-player", description=APP_TITLE)
    p.add_argument("files", nargs="+", help="audio files, played in the given order")
    p.add_argument(
        "--policy",
        choices=[a.value for a in AdvancePolicy],
        help="what happens when a track ends on its own",
    )
    p.add_argument("--no-wrap", action="store_true", help="stop after the last track")
    p.add_argument("--volume", type=float, help="0.0 - 1.0")
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="defaults to $MUSIC_PLAYER_CONFIG or config.json beside the app",
    )
    p.add_argument("--save-config", action="store_true", help="persist the flags above")
    p.add_argument("--log-level", default="INFO")
    return p


def apply_overrides(config: PlayerConfig, args: argparse.Namespace) -> PlayerConfig:
    if args.policy:
        config.advance_policy = AdvancePolicy.parse(args.policy)
    if args.no_wrap:
        config.wrap_around = False
    if args.volume is not None:
        config.volume = clamp_volume(args.volume)
    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.config is None:
        args.config = default_config_file()
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = apply_overrides(load_config(args.config), args)
    if args.save_config:
        save_config(args.config, config)

    playlist = Playlist(tracks_from_paths(args.files))
    if playlist.is_empty():
        logger.error("No playable files given")
        return 2

    qt_app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    bus = EventBus()
    sink = PygameAudioSink(volume=config.volume)
    controller = PlaybackController(
        sink,
        advance_policy=config.advance_policy,
        wrap_around=config.wrap_around,
        post=bus.post,
    )
    attach_presenter(controller, LogPresenter())

    pump = EventPump(controller, bus, poll_sink=sink.poll)
    console = ConsoleCommands(bus, sys.stdin, on_quit=qt_app.quit)

    controller.load(playlist, 0)
    pump.start()
    console.start()
    logger.info("Commands: play, pause, p(toggle), n(ext), b(ack), s(top), q(uit)")

    try:
        return qt_app.exec()
    finally:
        console.stop()
        pump.stop()
        controller.dispose()


if __name__ == "__main__":
    raise SystemExit(main())
