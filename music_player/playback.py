from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol

from music_player.config import COMPLETION_GRACE_SEC, DEFAULT_VOLUME
from music_player.errors import SinkUnavailable
from music_player.models import Track

try:
    import pygame  # type: ignore
except Exception:
    pygame = None

logger = logging.getLogger(__name__)

CompletionHandler = Callable[[], None]


class AudioSink(Protocol):
    """
    Capability that actually decodes and outputs one track at a time.

    The completion handler fires at most once per successfully started track,
    and never after stop() was called on that track.
    """

    def set_completion_handler(self, handler: Optional[CompletionHandler]) -> None: ...

    def start(self, track: Track) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def stop(self) -> None: ...

    def shutdown(self) -> None: ...


class PygameAudioSink:
    def __init__(
        self,
        volume: float = DEFAULT_VOLUME,
        *,
        grace_sec: float = COMPLETION_GRACE_SEC,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ready = False
        self._paused = False
        self._active = False  # a started track that has not ended or been stopped
        self._started_at = 0.0
        self._grace_sec = float(grace_sec)
        self._clock = clock
        self._on_complete: Optional[CompletionHandler] = None
        self._init(volume)

    def _init(self, volume: float) -> None:
        if pygame is None:
            logger.warning("pygame is not installed, audio output disabled")
            self._ready = False
            return
        try:
            pygame.mixer.init()
            pygame.mixer.music.set_volume(float(volume))
            self._ready = True
        except pygame.error as e:
            logger.warning("pygame mixer init failed: %s", e)
            self._ready = False

    def is_ready(self) -> bool:
        return bool(self._ready)

    def is_paused(self) -> bool:
        return bool(self._paused)

    def is_active(self) -> bool:
        return bool(self._active)

    def is_playing(self) -> bool:
        if not self._ready:
            return False
        try:
            return bool(pygame.mixer.music.get_busy())
        except pygame.error:
            return False

    def set_completion_handler(self, handler: Optional[CompletionHandler]) -> None:
        self._on_complete = handler

    def start(self, track: Track) -> None:
        if not self._ready:
            raise SinkUnavailable("Audio not available (pygame missing or failed init)", track)
        self.stop()
        try:
            pygame.mixer.music.load(track.source_ref)
            pygame.mixer.music.play()
        except (pygame.error, OSError) as e:
            raise SinkUnavailable(f"Cannot play {track.display_name}: {e}", track) from e
        self._paused = False
        self._active = True
        self._started_at = self._clock()
        logger.debug("pygame: playing %s", track.source_ref)

    def pause(self) -> None:
        if not self._ready or not self._active:
            return
        try:
            pygame.mixer.music.pause()
            self._paused = True
        except pygame.error as e:
            logger.warning("pause failed: %s", e)

    def resume(self) -> None:
        if not self._ready or not self._active:
            raise SinkUnavailable("Nothing to resume")
        try:
            pygame.mixer.music.unpause()
        except pygame.error as e:
            raise SinkUnavailable(f"Cannot resume: {e}") from e
        self._paused = False
        self._started_at = self._clock()

    def stop(self) -> None:
        self._active = False
        self._paused = False
        if not self._ready:
            return
        try:
            pygame.mixer.music.stop()
            pygame.mixer.music.unload()
        except pygame.error as e:
            logger.warning("stop failed: %s", e)

    def poll(self) -> bool:
        """
        Detects natural end of the current track. Returns True when the
        completion handler was fired.
        """
        if not self._active or self._paused:
            return False
        if (self._clock() - self._started_at) < self._grace_sec:
            return False
        if self.is_playing():
            return False

        self._active = False
        logger.debug("pygame: track reached its end")
        if self._on_complete is not None:
            self._on_complete()
        return True

    def shutdown(self) -> None:
        self._active = False
        self._on_complete = None
        if not self._ready:
            return
        try:
            pygame.mixer.music.stop()
            pygame.mixer.quit()
        except pygame.error as e:
            logger.warning("mixer shutdown failed: %s", e)
        self._ready = False
