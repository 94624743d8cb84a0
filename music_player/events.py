from __future__ import annotations

import logging
import queue as thread_queue
from typing import Callable

from music_player.controller import PlaybackController
from music_player.models import TransportAction

logger = logging.getLogger(__name__)


class EventBus:
    """
    Serializes everything that touches the controller onto one thread.

    Producers (console thread, sink callbacks, UI) put dict events from any
    thread; process_events() drains them on the control thread.
    """

    def __init__(self) -> None:
        self.events: "thread_queue.Queue[dict]" = thread_queue.Queue()

    def submit(self, action: TransportAction) -> None:
        self.events.put({"type": "command", "action": action})

    def post(self, fn: Callable[[], None]) -> None:
        self.events.put({"type": "call", "fn": fn})

    def log(self, msg: str) -> None:
        self.events.put({"type": "log", "msg": msg})

    def pending(self) -> int:
        return self.events.qsize()

    def process_events(self, controller: PlaybackController) -> int:
        handled = 0
        try:
            while True:
                ev = self.events.get_nowait()
                et = ev.get("type")
                handled += 1

                if et == "command":
                    controller.dispatch(ev["action"])

                elif et == "call":
                    ev["fn"]()

                elif et == "log":
                    logger.info("%s", ev.get("msg", ""))

                else:
                    logger.warning("Unknown event type: %r", et)

        except thread_queue.Empty:
            pass

        return handled
