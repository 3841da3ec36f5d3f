"""Supervisor: wires the actors together and runs them to completion."""

import logging
import threading
from typing import Callable, Optional, TextIO

from jukebox.constants import JOIN_TIMEOUT
from jukebox.input_handler import InputActor
from jukebox.models import Playlist, PlayerConfig
from jukebox.playback import PlaybackActor
from jukebox.state import StateHandle

LOGGER = logging.getLogger(__name__)


class Supervisor:
    """Owns the shared state and the two actor threads."""

    def __init__(
        self,
        playlist: Playlist,
        config: PlayerConfig,
        source,
        builder_factory: Callable[[], object],
        output: Optional[TextIO] = None,
    ):
        self.playlist = playlist
        self.config = config
        self.shutdown = threading.Event()
        self.state = StateHandle(config.initial_state(), len(playlist))
        self.playback = PlaybackActor(
            playlist, self.state, self.shutdown, builder_factory, config.poll_interval
        )
        self.input = InputActor(source, self.state, playlist, self.shutdown, output)
        self._threads = []

    def run(self) -> Optional[Exception]:
        """Run both actors until one of them requests shutdown.

        Returns:
            The fatal error reported by the playback actor, or None after a
            normal quit.
        """
        LOGGER.info("Starting with %d tracks", len(self.playlist))
        self._threads = [
            threading.Thread(target=self.playback.run, name='playback-actor'),
            threading.Thread(target=self.input.run, name='input-actor'),
        ]
        for thread in self._threads:
            thread.start()

        try:
            while not self.shutdown.wait(JOIN_TIMEOUT):
                if not any(t.is_alive() for t in self._threads):
                    break
        except KeyboardInterrupt:
            LOGGER.info("Interrupted by user")
        finally:
            self.stop()

        return self.playback.error

    def stop(self) -> None:
        """Request shutdown and wait for both actors to finish."""
        self.shutdown.set()
        for thread in self._threads:
            thread.join()
            LOGGER.debug("%s joined", thread.name)
        LOGGER.info("Stopped")
