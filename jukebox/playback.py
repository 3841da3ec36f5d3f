"""Playback actor: reconciles the audio device with the shared play state."""

import logging
import threading
from typing import Callable, Optional

from jukebox.constants import POLL_INTERVAL, Phase
from jukebox.errors import DecodeError, DeviceUnavailableError, PlaylistExhaustedError
from jukebox.models import Playlist, PlayState
from jukebox.state import StateHandle
from jukebox.transitions import end_of_track, skip_track

LOGGER = logging.getLogger(__name__)


class PlaybackActor:
    """Owns the output stream and keeps it in line with the play state.

    Every ``poll_interval`` seconds the actor reads a snapshot and issues the
    few device operations needed to converge: load a track when the index or
    ``reload_seq`` moved, play or pause when ``playing`` flipped, and decide
    what comes next when the stream reports end of track.

    The stream builder is created by calling ``builder_factory`` inside
    :meth:`run`, so the device binding lives in the actor's own thread.
    """

    def __init__(
        self,
        playlist: Playlist,
        state: StateHandle,
        shutdown: threading.Event,
        builder_factory: Callable[[], object],
        poll_interval: float = POLL_INTERVAL,
    ):
        self.playlist = playlist
        self.state = state
        self.shutdown = shutdown
        self.builder_factory = builder_factory
        self.poll_interval = poll_interval
        self.phase = Phase.IDLE
        self.error: Optional[Exception] = None
        self.applied: Optional[PlayState] = None
        self._builder = None
        self._stream = None
        self._loaded_index: Optional[int] = None
        self._loaded_seq: Optional[int] = None

    @property
    def loaded_index(self) -> Optional[int]:
        return self._loaded_index

    def run(self) -> None:
        """Run the poll loop until shutdown is requested."""
        LOGGER.debug("Playback actor started")
        try:
            self._builder = self.builder_factory()
            while not self.shutdown.is_set():
                self.poll()
                self.shutdown.wait(self.poll_interval)
        except DeviceUnavailableError as e:
            self._fail(e)
        except Exception as e:
            LOGGER.exception("Playback failed")
            self._fail(e)
        finally:
            self._unload()
            LOGGER.debug("Playback actor stopped")

    def poll(self) -> Phase:
        """Reconcile the device with the current snapshot once."""
        if self.playlist.is_empty() or self.error is not None:
            return self.phase

        snapshot = self.state.read()
        if self.applied is not None and snapshot.request_seq != self.applied.request_seq:
            LOGGER.debug("Observed %d new command(s)", snapshot.request_seq - self.applied.request_seq)

        if self.phase is Phase.LOADED_PLAYING and not self._needs_reload(snapshot):
            if self._stream.is_ended():
                self._set_phase(Phase.ENDED)
                snapshot = self._finish_track()

        if self._needs_reload(snapshot):
            snapshot = self._load(snapshot)
            if snapshot is None:
                return self.phase

        self._apply_playing(snapshot)
        self.applied = snapshot
        return self.phase

    def _needs_reload(self, snapshot: PlayState) -> bool:
        return (
            self._stream is None
            or snapshot.current_index != self._loaded_index
            or snapshot.reload_seq != self._loaded_seq
        )

    def _finish_track(self) -> PlayState:
        index, seq = self._loaded_index, self._loaded_seq
        size = len(self.playlist)
        failure = self._stream.error
        if failure is not None:
            LOGGER.warning("Playback of %s failed, skipping: %s",
                           self.playlist[index].name, failure)
        advance = end_of_track if failure is None else skip_track

        def decide(current: PlayState) -> PlayState:
            # A newer next/previous/restart request wins over the automatic choice
            if current.current_index != index or current.reload_seq != seq:
                return current
            decided = advance(current, size)
            if not current.playing:
                # Paused while the last block drained
                decided = decided.evolve(playing=False)
            return decided

        snapshot = self.state.mutate(decide)
        LOGGER.debug("Track %d ended, continuing with %s", index, snapshot)
        return snapshot

    def _load(self, snapshot: PlayState) -> Optional[PlayState]:
        """Load the track at ``snapshot.current_index``, skipping broken files.

        Tries each track at most once. If none opens, the actor records
        :class:`PlaylistExhaustedError`, halts in IDLE and requests shutdown.
        """
        self._unload()
        size = len(self.playlist)
        start = snapshot.current_index

        for offset in range(size):
            index = (start + offset) % size
            track = self.playlist[index]
            try:
                stream = self._builder.open(track)
            except DecodeError as e:
                LOGGER.warning("Skipping %s: %s", track.name, e.reason)
                continue

            if index != start:
                snapshot = self._write_back_index(snapshot, index)

            self._stream = stream
            self._loaded_index = index
            self._loaded_seq = snapshot.reload_seq
            self._set_phase(Phase.LOADED_PAUSED)
            LOGGER.info("Now playing: %s", track.name)
            return snapshot

        self._fail(PlaylistExhaustedError(f"none of the {size} tracks could be played"))
        return None

    def _write_back_index(self, snapshot: PlayState, index: int) -> PlayState:
        start, seq = snapshot.current_index, snapshot.reload_seq

        def skip(current: PlayState) -> PlayState:
            if current.current_index != start or current.reload_seq != seq:
                return current
            return current.evolve(current_index=index)

        updated = self.state.mutate(skip)
        if updated.current_index != index:
            # The user moved on meanwhile; the next poll reloads
            return snapshot.evolve(current_index=index)
        return updated

    def _apply_playing(self, snapshot: PlayState) -> None:
        if snapshot.playing and self.phase is Phase.LOADED_PAUSED:
            self._stream.play()
            self._set_phase(Phase.LOADED_PLAYING)
        elif not snapshot.playing and self.phase is Phase.LOADED_PLAYING:
            self._stream.pause()
            self._set_phase(Phase.LOADED_PAUSED)

    def _unload(self) -> None:
        stream, self._stream = self._stream, None
        self._loaded_index = None
        self._loaded_seq = None
        self._set_phase(Phase.IDLE)
        if stream is None:
            return
        try:
            stream.close()
        except Exception as e:
            LOGGER.warning("Failed to close stream: %s", e)

    def _set_phase(self, phase: Phase) -> None:
        if phase is not self.phase:
            LOGGER.debug("Playback phase %s -> %s", self.phase.value, phase.value)
            self.phase = phase

    def _fail(self, error: Exception) -> None:
        LOGGER.error("Playback halted: %s", error)
        self.error = error
        self.shutdown.set()
