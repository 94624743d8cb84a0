from __future__ import annotations

import logging
from typing import Optional, Protocol

from music_player.config import APP_TITLE
from music_player.controller import ObserverToken, PlaybackController
from music_player.models import PlaybackState, SessionSnapshot

logger = logging.getLogger(__name__)

STATE_TEXT = {
    PlaybackState.PLAYING: "Playing",
    PlaybackState.PAUSED: "Paused",
    PlaybackState.STOPPED: "Stopped",
}


class NotificationPresenter(Protocol):
    """Renders transport state; talks back only through public commands."""

    def present(self, snapshot: SessionSnapshot) -> None: ...


def attach_presenter(
    controller: PlaybackController, presenter: NotificationPresenter
) -> ObserverToken:
    token = controller.register_observer(presenter.present)
    presenter.present(controller.snapshot())
    return token


def now_playing_text(snapshot: SessionSnapshot) -> tuple[str, str]:
    title = snapshot.track.display_name if snapshot.track else APP_TITLE
    text = STATE_TEXT[snapshot.state]
    if snapshot.error is not None:
        text = f"{text} · {snapshot.error}"
    return title, text


class LogPresenter:
    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.log = log or logger
        self.last: Optional[tuple[str, str]] = None

    def present(self, snapshot: SessionSnapshot) -> None:
        line = now_playing_text(snapshot)
        if line == self.last:
            return
        self.last = line
        if snapshot.error is not None:
            self.log.warning("%s | %s", *line)
        else:
            self.log.info("%s | %s", *line)
