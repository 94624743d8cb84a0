"""
Tests for presenters and the Qt event pump.
"""

import logging

from conftest import FakeSink
from music_player.controller import PlaybackController
from music_player.events import EventBus
from music_player.models import PlaybackState, SessionSnapshot, TransportAction
from music_player.presenter import LogPresenter, attach_presenter, now_playing_text


class RecordingPresenter:
    def __init__(self):
        self.snapshots = []

    def present(self, snapshot):
        self.snapshots.append(snapshot)


class TestPresenters:
    def test_attach_presents_current_state(self, sink, abc):
        c = PlaybackController(sink)
        p = RecordingPresenter()
        token = attach_presenter(c, p)
        assert p.snapshots[0].state is PlaybackState.STOPPED

        c.load(abc, 0)
        assert p.snapshots[-1].track.display_name == "A"

        c.unregister_observer(token)
        c.stop()
        assert len(p.snapshots) == 2

    def test_now_playing_text(self, abc):
        assert now_playing_text(SessionSnapshot(None, PlaybackState.STOPPED)) == (
            "Music Player",
            "Stopped",
        )
        snap = SessionSnapshot(0, PlaybackState.PAUSED, abc[0])
        assert now_playing_text(snap) == ("A", "Paused")

    def test_log_presenter_skips_duplicates(self, sink, abc, caplog):
        c = PlaybackController(sink)
        attach_presenter(c, LogPresenter())
        with caplog.at_level(logging.INFO, logger="music_player.presenter"):
            c.load(abc, 0)
            c.play()  # no-op, no notification
            c.stop()
            c.stop()
        lines = [r.getMessage() for r in caplog.records if r.name == "music_player.presenter"]
        assert lines == ["A | Playing", "Music Player | Stopped"]

    def test_log_presenter_warns_on_error(self, abc, caplog):
        c = PlaybackController(FakeSink(broken={"a"}))
        attach_presenter(c, LogPresenter())
        with caplog.at_level(logging.INFO, logger="music_player.presenter"):
            c.load(abc, 0)
        warned = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert any("cannot open" in r.getMessage() for r in warned)


class TestEventPump:
    def test_process_events_drains_bus(self, qapp, abc):
        from music_player.pump import EventPump

        bus = EventBus()
        c = PlaybackController(FakeSink(), post=bus.post)
        c.load(abc, 0)
        pump = EventPump(c, bus)
        bus.submit(TransportAction.NEXT)
        pump.process_events()
        assert c.cursor == 1

    def test_watchdog_polls_and_handles_completion(self, qapp, abc):
        from music_player.pump import EventPump

        bus = EventBus()
        sink = FakeSink()
        c = PlaybackController(sink, post=bus.post)
        c.load(abc, 0)
        pump = EventPump(c, bus, poll_sink=sink.finish)
        pump.watchdog()
        assert c.cursor == 1

    def test_start_stop(self, qapp, sink):
        from music_player.pump import EventPump

        c = PlaybackController(sink)
        pump = EventPump(c, EventBus(), poll_sink=lambda: None)
        pump.start()
        assert pump.is_running()
        assert pump.wd_timer.isActive()
        pump.stop()
        assert not pump.is_running()

    def test_disposed_controller_is_left_alone(self, qapp, sink, abc):
        from music_player.pump import EventPump

        bus = EventBus()
        c = PlaybackController(sink, post=bus.post)
        c.dispose()
        bus.submit(TransportAction.NEXT)
        EventPump(c, bus).process_events()
        assert bus.pending() == 1
