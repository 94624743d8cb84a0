import pytest

from music_player.errors import SinkUnavailable
from music_player.models import Track
from music_player.playlist import Playlist


class FakeSink:
    """Records calls; fails for track ids listed in `broken`."""

    def __init__(self, broken=()):
        self.broken = set(broken)
        self.fail_resume = False
        self.calls = []
        self.active = None
        self.handler = None
        self.shut_down = False

    def set_completion_handler(self, handler):
        self.handler = handler

    def start(self, track):
        self.calls.append(("start", track.track_id))
        if track.track_id in self.broken:
            raise SinkUnavailable(f"cannot open {track.source_ref}", track)
        self.active = track

    def pause(self):
        self.calls.append(("pause",))

    def resume(self):
        self.calls.append(("resume",))
        if self.fail_resume:
            raise SinkUnavailable("device lost")

    def stop(self):
        self.calls.append(("stop",))
        self.active = None

    def shutdown(self):
        self.calls.append(("shutdown",))
        self.shut_down = True

    def finish(self):
        """Simulate the current track reaching its natural end."""
        if self.active is None:
            return
        self.active = None
        if self.handler is not None:
            self.handler()

    def started(self):
        return [c[1] for c in self.calls if c[0] == "start"]


def make_tracks(*names):
    return [Track(track_id=n, display_name=n.upper(), source_ref=f"music/{n}.mp3") for n in names]


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def abc():
    return Playlist(make_tracks("a", "b", "c"))


@pytest.fixture
def qapp():
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
