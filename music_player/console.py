from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, TextIO

from music_player.events import EventBus
from music_player.models import TransportAction

logger = logging.getLogger(__name__)

COMMANDS = {
    "play": TransportAction.PLAY,
    "pause": TransportAction.PAUSE,
    "toggle": TransportAction.TOGGLE,
    "p": TransportAction.TOGGLE,
    "stop": TransportAction.STOP,
    "s": TransportAction.STOP,
    "next": TransportAction.NEXT,
    "n": TransportAction.NEXT,
    "previous": TransportAction.PREVIOUS,
    "prev": TransportAction.PREVIOUS,
    "b": TransportAction.PREVIOUS,
}
QUIT_COMMANDS = {"quit", "q", "exit"}


def parse_command(line: str) -> Optional[TransportAction]:
    return COMMANDS.get(line.strip().lower())


class ConsoleCommands:
    """
    Reads transport commands from a text stream in a background thread and
    hands them to the EventBus. Never touches the controller directly.
    """

    def __init__(
        self,
        bus: EventBus,
        stream: TextIO,
        on_quit: Optional[Callable[[], None]] = None,
    ) -> None:
        self.bus = bus
        self.stream = stream
        self.on_quit = on_quit

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop, daemon=True, name="console-commands"
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()

    def is_running(self) -> bool:
        return not self._stop_event.is_set()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def handle_line(self, line: str) -> bool:
        """Returns False once the reader should stop."""
        word = line.strip().lower()
        if not word:
            return True
        if word in QUIT_COMMANDS:
            if self.on_quit is not None:
                self.bus.post(self.on_quit)
            return False

        action = parse_command(word)
        if action is None:
            self.bus.log(f"Unknown command: {word}")
            return True
        self.bus.submit(action)
        return True

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            line = self.stream.readline()
            if not line:  # EOF
                break
            if not self.handle_line(line):
                break
        self._stop_event.set()
