from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

from music_player.config import EVENT_PUMP_INTERVAL_MS, WATCHDOG_INTERVAL_MS
from music_player.controller import PlaybackController
from music_player.events import EventBus


class EventPump(QObject):
    """Drives the EventBus and the sink watchdog from the Qt event loop."""

    def __init__(
        self,
        controller: PlaybackController,
        bus: EventBus,
        poll_sink: Optional[Callable[[], object]] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.controller = controller
        self.bus = bus
        self.poll_sink = poll_sink

        self.ev_timer = QTimer(self)
        self.ev_timer.setInterval(EVENT_PUMP_INTERVAL_MS)
        self.ev_timer.timeout.connect(self.process_events)

        self.wd_timer = QTimer(self)
        self.wd_timer.setInterval(WATCHDOG_INTERVAL_MS)
        self.wd_timer.timeout.connect(self.watchdog)

    def start(self) -> None:
        self.ev_timer.start()
        if self.poll_sink is not None:
            self.wd_timer.start()

    def stop(self) -> None:
        self.ev_timer.stop()
        self.wd_timer.stop()

    def is_running(self) -> bool:
        return self.ev_timer.isActive()

    def process_events(self) -> None:
        if self.controller.disposed:
            return
        self.bus.process_events(self.controller)

    def watchdog(self) -> None:
        if self.controller.disposed or self.poll_sink is None:
            return
        self.poll_sink()
        # completion posted by the sink is handled on this same tick
        self.bus.process_events(self.controller)
