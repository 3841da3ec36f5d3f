import logging
import threading
from typing import Callable

from jukebox.models import PlayState


LOGGER = logging.getLogger(__name__)


class StateHandle:
    """Lock-guarded holder of the shared PlayState.

    The only synchronization point between the input and playback actors.
    Each actor gets the handle at construction time.

    ``read`` returns the current immutable snapshot. ``mutate`` applies a
    ``PlayState -> PlayState`` function under the lock and publishes the
    result in one assignment, so no reader sees a partial transition.

    A transition that raises or produces an invalid snapshot is discarded:
    the last good snapshot stays published, a warning is logged and the
    handle is flagged as degraded. Errors never leave ``mutate``.
    """

    def __init__(self, initial: PlayState, size: int):
        self._lock = threading.Lock()
        self._state = initial
        self._size = size
        self._degraded = False

    @property
    def degraded(self) -> bool:
        return self._degraded

    def read(self) -> PlayState:
        with self._lock:
            return self._state

    def mutate(self, fn: Callable[[PlayState], PlayState]) -> PlayState:
        with self._lock:
            previous = self._state
            try:
                candidate = fn(previous)
            except Exception:
                LOGGER.warning("State transition failed, keeping last good state", exc_info=True)
                self._degraded = True
                return previous

            if not self._is_valid(candidate):
                LOGGER.warning("Rejected invalid state %r, keeping %r", candidate, previous)
                self._degraded = True
                return previous

            self._state = candidate

        if candidate != previous:
            LOGGER.debug("State changed to %s", candidate)
        return candidate

    def _is_valid(self, state: object) -> bool:
        if not isinstance(state, PlayState):
            return False
        if self._size > 0 and not 0 <= state.current_index < self._size:
            return False
        return True
