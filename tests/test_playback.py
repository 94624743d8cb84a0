"""
Tests for PygameAudioSink against a fake pygame mixer.
"""

import types

import pytest

from music_player import playback
from music_player.errors import SinkUnavailable
from music_player.models import Track
from music_player.playback import PygameAudioSink

TRACK = Track("1", "Song", "music/song.mp3")


class FakeMusic:
    def __init__(self, error_cls):
        self.error_cls = error_cls
        self.busy = False
        self.loaded = None
        self.missing = set()
        self.calls = []

    def set_volume(self, v):
        self.calls.append(("volume", v))

    def load(self, path):
        if path in self.missing:
            raise self.error_cls(f"No file '{path}' found")
        self.loaded = path

    def play(self):
        self.busy = True
        self.calls.append(("play",))

    def pause(self):
        self.busy = False
        self.calls.append(("pause",))

    def unpause(self):
        self.busy = True
        self.calls.append(("unpause",))

    def stop(self):
        self.busy = False
        self.calls.append(("stop",))

    def unload(self):
        self.loaded = None

    def get_busy(self):
        return self.busy


@pytest.fixture
def fake_pygame(monkeypatch):
    error_cls = type("error", (RuntimeError,), {})
    music = FakeMusic(error_cls)
    mixer = types.SimpleNamespace(
        init=lambda: None,
        quit=lambda: music.calls.append(("quit",)),
        music=music,
    )
    fake = types.SimpleNamespace(error=error_cls, mixer=mixer)
    monkeypatch.setattr(playback, "pygame", fake)
    return fake


class Clock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def make_sink(clock=None):
    return PygameAudioSink(volume=0.5, grace_sec=1.0, clock=clock or Clock())


class TestPygameAudioSink:
    def test_without_pygame_start_fails(self, monkeypatch):
        monkeypatch.setattr(playback, "pygame", None)
        sink = PygameAudioSink()
        assert not sink.is_ready()
        with pytest.raises(SinkUnavailable) as exc:
            sink.start(TRACK)
        assert exc.value.track == TRACK

    def test_volume_applied_at_init(self, fake_pygame):
        make_sink()
        assert fake_pygame.mixer.music.calls == [("volume", 0.5)]

    def test_start_plays_file(self, fake_pygame):
        sink = make_sink()
        sink.start(TRACK)
        assert fake_pygame.mixer.music.loaded == "music/song.mp3"
        assert sink.is_playing()
        assert sink.is_active()

    def test_missing_file_raises_sink_unavailable(self, fake_pygame):
        fake_pygame.mixer.music.missing.add("music/song.mp3")
        sink = make_sink()
        with pytest.raises(SinkUnavailable) as exc:
            sink.start(TRACK)
        assert isinstance(exc.value.__cause__, fake_pygame.error)
        assert not sink.is_active()

    def test_poll_fires_completion_once(self, fake_pygame):
        clock = Clock()
        sink = make_sink(clock)
        done = []
        sink.set_completion_handler(lambda: done.append(1))
        sink.start(TRACK)

        fake_pygame.mixer.music.busy = False
        assert sink.poll() is False  # still inside grace window
        clock.now += 2
        assert sink.poll() is True
        assert sink.poll() is False
        assert done == [1]

    def test_no_completion_while_playing(self, fake_pygame):
        clock = Clock()
        sink = make_sink(clock)
        done = []
        sink.set_completion_handler(lambda: done.append(1))
        sink.start(TRACK)
        clock.now += 5
        assert sink.poll() is False
        assert done == []

    def test_no_completion_after_stop(self, fake_pygame):
        clock = Clock()
        sink = make_sink(clock)
        done = []
        sink.set_completion_handler(lambda: done.append(1))
        sink.start(TRACK)
        sink.stop()
        clock.now += 5
        assert sink.poll() is False
        assert done == []

    def test_no_completion_while_paused(self, fake_pygame):
        clock = Clock()
        sink = make_sink(clock)
        done = []
        sink.set_completion_handler(lambda: done.append(1))
        sink.start(TRACK)
        sink.pause()
        clock.now += 5
        assert sink.is_paused()
        assert sink.poll() is False
        assert done == []

    def test_resume_restarts_grace_window(self, fake_pygame):
        clock = Clock()
        sink = make_sink(clock)
        sink.start(TRACK)
        sink.pause()
        clock.now += 10
        sink.resume()
        fake_pygame.mixer.music.busy = False
        assert sink.poll() is False

    def test_resume_without_track_fails(self, fake_pygame):
        sink = make_sink()
        with pytest.raises(SinkUnavailable):
            sink.resume()

    def test_shutdown_quits_mixer(self, fake_pygame):
        sink = make_sink()
        sink.start(TRACK)
        sink.shutdown()
        assert ("quit",) in fake_pygame.mixer.music.calls
        assert not sink.is_ready()
