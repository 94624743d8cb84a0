from __future__ import annotations

import itertools
import logging
from typing import Callable, Dict, Iterable, Optional, Union

from music_player.errors import PlaybackError, SinkUnavailable
from music_player.models import (
    AdvancePolicy,
    PlaybackState,
    SessionSnapshot,
    Track,
    TransportAction,
)
from music_player.playback import AudioSink
from music_player.playlist import Playlist

logger = logging.getLogger(__name__)

StateObserver = Callable[[SessionSnapshot], None]
Poster = Callable[[Callable[[], None]], None]


class ObserverToken:
    """Handle returned by register_observer; the only way to unregister."""

    __slots__ = ("id",)
    _ids = itertools.count(1)

    def __init__(self) -> None:
        self.id = next(self._ids)

    def __repr__(self) -> str:
        return f"ObserverToken({self.id})"


def _call_now(fn: Callable[[], None]) -> None:
    fn()


class PlaybackController:
    """
    Owns the playback session: playlist, cursor and transport state.

    Guarantees:
    - cursor is None exactly when state is STOPPED
    - at most one sink track is active; it is stopped before another starts
    - every transition ends with one observer notification carrying the cursor
    - sink failures never escape; the session falls back to STOPPED

    Not thread-safe. Every call, including sink completions, must arrive on a
    single control context (see EventBus). `post` is how the sink's
    completion callback is marshalled there.
    """

    def __init__(
        self,
        sink: AudioSink,
        *,
        advance_policy: Union[AdvancePolicy, str] = AdvancePolicy.CONTINUOUS,
        wrap_around: bool = True,
        post: Optional[Poster] = None,
    ) -> None:
        self.sink = sink
        self.advance_policy = AdvancePolicy.parse(advance_policy)
        self.wrap_around = bool(wrap_around)

        self.playlist = Playlist()
        self.cursor: Optional[int] = None
        self.state = PlaybackState.STOPPED
        self.last_error: Optional[PlaybackError] = None

        self._observers: Dict[ObserverToken, StateObserver] = {}
        self._post: Poster = post or _call_now
        self._generation = 0
        self._disposed = False

    # ======================================================================
    # QUERIES
    # ======================================================================

    @property
    def current_track(self) -> Optional[Track]:
        if self.cursor is None:
            return None
        return self.playlist[self.cursor]

    @property
    def disposed(self) -> bool:
        return self._disposed

    def snapshot(self, error: Optional[PlaybackError] = None) -> SessionSnapshot:
        return SessionSnapshot(
            cursor=self.cursor,
            state=self.state,
            track=self.current_track,
            error=error,
        )

    # ======================================================================
    # OBSERVERS
    # ======================================================================

    def register_observer(self, observer: StateObserver) -> ObserverToken:
        token = ObserverToken()
        self._observers[token] = observer
        return token

    def unregister_observer(self, token: ObserverToken) -> bool:
        return self._observers.pop(token, None) is not None

    def _notify(self, error: Optional[PlaybackError] = None) -> None:
        snap = self.snapshot(error)
        for token, observer in list(self._observers.items()):
            if token not in self._observers:
                continue  # removed by an earlier observer in this round
            try:
                observer(snap)
            except Exception:
                logger.exception("Observer %r failed", token)

    # ======================================================================
    # TRANSPORT
    # ======================================================================

    def load(self, playlist: Union[Playlist, Iterable[Track]], index: int) -> bool:
        """
        Start `playlist[index]`. Raises EmptyPlaylist / InvalidIndex before any
        side effect. Returns False when the sink refused the track; the session
        is then (playlist, None, STOPPED) and observers got the error.
        """
        if self._disposed:
            return False
        if not isinstance(playlist, Playlist):
            playlist = Playlist(playlist)
        playlist.check_index(index)

        self._release_sink()
        self.playlist = playlist
        track = playlist[index]

        # the handler is bound to this track before it can possibly fire
        generation = self._generation + 1
        self.sink.set_completion_handler(lambda: self._on_sink_completed(generation))
        try:
            self.sink.start(track)
        except SinkUnavailable as e:
            logger.warning("Cannot start %s: %s", track.display_name, e)
            self.cursor = None
            self.state = PlaybackState.STOPPED
            self.last_error = e
            self._notify(e)
            return False

        self._generation = generation
        self.cursor = index
        self.state = PlaybackState.PLAYING
        self.last_error = None
        logger.info("Playing [%d] %s", index, track.display_name)
        self._notify()
        return True

    def play(self) -> bool:
        if self._disposed:
            return False
        if self.state is not PlaybackState.PAUSED or self.cursor is None:
            logger.debug("play ignored in state %s", self.state.value)
            return False

        try:
            self.sink.resume()
        except SinkUnavailable as e:
            logger.warning("Cannot resume: %s", e)
            self.last_error = e
            self._release_sink()
            self.cursor = None
            self.state = PlaybackState.STOPPED
            self._notify(e)
            return False

        self.state = PlaybackState.PLAYING
        logger.info("Resumed")
        self._notify()
        return True

    def pause(self) -> bool:
        if self._disposed:
            return False
        if self.state is not PlaybackState.PLAYING:
            logger.debug("pause ignored in state %s", self.state.value)
            return False

        self.sink.pause()
        self.state = PlaybackState.PAUSED
        logger.info("Paused")
        self._notify()
        return True

    def toggle(self) -> bool:
        if self.state is PlaybackState.PLAYING:
            return self.pause()
        if self.state is PlaybackState.PAUSED:
            return self.play()
        return False

    def stop(self) -> None:
        if self._disposed:
            return
        self._release_sink()
        self.cursor = None
        self.state = PlaybackState.STOPPED
        logger.info("Stopped")
        self._notify()

    def next(self) -> bool:
        if self._disposed or self.cursor is None or self.playlist.is_empty():
            return False
        return self.load(self.playlist, self.playlist.next_index(self.cursor))

    def previous(self) -> bool:
        if self._disposed or self.cursor is None or self.playlist.is_empty():
            return False
        return self.load(self.playlist, self.playlist.previous_index(self.cursor))

    def select(self, index: int) -> bool:
        """Row tap: stop the row that is loaded, otherwise load the tapped row."""
        if self.cursor == index:
            self.stop()
            return False
        return self.load(self.playlist, index)

    def dispatch(self, action: TransportAction) -> None:
        handlers = {
            TransportAction.PLAY: self.play,
            TransportAction.PAUSE: self.pause,
            TransportAction.TOGGLE: self.toggle,
            TransportAction.STOP: self.stop,
            TransportAction.NEXT: self.next,
            TransportAction.PREVIOUS: self.previous,
        }
        handlers[action]()

    # ======================================================================
    # COMPLETION
    # ======================================================================

    def _on_sink_completed(self, generation: int) -> None:
        # May run on the sink's thread; only marshal, never touch state here.
        self._post(lambda: self.on_track_completed(generation))

    def on_track_completed(self, generation: Optional[int] = None) -> None:
        if self._disposed or self.state is not PlaybackState.PLAYING:
            logger.debug("completion ignored in state %s", self.state.value)
            return
        if generation is not None and generation != self._generation:
            logger.debug("stale completion for generation %d dropped", generation)
            return

        if self.advance_policy is AdvancePolicy.SINGLE_TRACK:
            self.stop()
            return

        if self.cursor is None:
            return
        if not self.wrap_around and self.playlist.is_last(self.cursor):
            logger.info("End of playlist")
            self.stop()
            return
        self.next()

    # ======================================================================
    # TEARDOWN
    # ======================================================================

    def _release_sink(self) -> None:
        if self.state is PlaybackState.STOPPED:
            return
        # any completion already queued for the old track is now stale
        self._generation += 1
        self.sink.stop()

    def dispose(self) -> None:
        if self._disposed:
            return
        self.stop()
        self._disposed = True
        self._observers.clear()
        self.sink.set_completion_handler(None)
        self.sink.shutdown()
        self.playlist = Playlist()
        logger.debug("controller disposed")
