"""Keyboard input handling and the input actor."""

import io
import logging
import os
import select
import sys
import termios
import threading
import tty
from collections import deque
from typing import Deque, Optional, TextIO

from jukebox.constants import COMMAND_KEYS, INPUT_TIMEOUT, Command
from jukebox.display import format_status
from jukebox.models import Playlist
from jukebox.state import StateHandle
from jukebox.transitions import apply_command

LOGGER = logging.getLogger(__name__)


def _wait_readable(stream: TextIO, timeout: float) -> bool:
    """Wait up to ``timeout`` for ``stream`` to become readable.

    Streams without a file descriptor are always considered readable.
    """
    try:
        stream.fileno()
    except (AttributeError, io.UnsupportedOperation):
        return True
    return select.select([stream], [], [], timeout)[0] != []


class KeyboardPoller:
    """Context manager for raw keyboard input on Unix/Linux systems."""

    def __init__(self, stream: TextIO = sys.stdin):
        self.stream = stream
        self.fd: Optional[int] = None
        self.old_settings: Optional[list] = None

    def __enter__(self):
        try:
            self.fd = self.stream.fileno()
            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
            return self
        except Exception as e:
            LOGGER.error("Failed to initialize keyboard poller: %s", e)
            raise

    def __exit__(self, *args):
        if self.fd is not None and self.old_settings is not None:
            try:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
            except Exception as e:
                LOGGER.error("Failed to restore terminal settings: %s", e)

    def kbhit(self, timeout: float = INPUT_TIMEOUT) -> bool:
        """Check if a key has been pressed."""
        if self.fd is None:
            return False
        return _wait_readable(self.stream, timeout)

    def getch(self) -> str:
        """Get a single character from keyboard, or '' at end of input."""
        if self.fd is None:
            return ""
        # Bypass the text buffer so select() sees every pending key
        return os.read(self.fd, 1).decode('utf-8', errors='replace')

    def next_command(self, timeout: float = INPUT_TIMEOUT) -> Optional[str]:
        """Return the next key, ``""`` if none arrived, or None at end of input."""
        if not self.kbhit(timeout):
            return ""
        key = self.getch()
        return key if key else None


class LineCommandSource:
    """Reads commands from a non-interactive stream such as a pipe.

    Every non-blank character is one command. Streams with a file
    descriptor are read in raw chunks, others line by line.
    """

    def __init__(self, stream: TextIO = sys.stdin):
        self.stream = stream
        self._pending: Deque[str] = deque()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        pass

    def next_command(self, timeout: float = INPUT_TIMEOUT) -> Optional[str]:
        if self._pending:
            return self._pending.popleft()
        if not _wait_readable(self.stream, timeout):
            return ""
        chunk = self._read_chunk()
        if not chunk:
            return None
        self._pending.extend(ch for ch in chunk if not ch.isspace())
        return self._pending.popleft() if self._pending else ""

    def _read_chunk(self) -> str:
        try:
            fd = self.stream.fileno()
        except (AttributeError, io.UnsupportedOperation):
            return self.stream.readline()
        return os.read(fd, 1024).decode('utf-8', errors='replace')


def open_command_source(stream: TextIO = sys.stdin):
    """Pick a keyboard poller for terminals and a line reader otherwise."""
    try:
        interactive = stream.isatty()
    except (AttributeError, ValueError):
        interactive = False
    if interactive:
        return KeyboardPoller(stream)
    return LineCommandSource(stream)


class InputActor:
    """Turns key presses into play state transitions.

    Each command is applied through the state handle before the next one is
    read. ``q`` and end of input set the shutdown flag instead.
    """

    def __init__(self, source, state: StateHandle, playlist: Playlist,
                 shutdown: threading.Event, output: Optional[TextIO] = None,
                 timeout: float = INPUT_TIMEOUT):
        self.source = source
        self.state = state
        self.playlist = playlist
        self.shutdown = shutdown
        self.output = output
        self.timeout = timeout

    def run(self) -> None:
        LOGGER.debug("Input actor started")
        try:
            with self.source:
                while not self.shutdown.is_set():
                    key = self.source.next_command(self.timeout)
                    if key is None:
                        LOGGER.info("End of input, quitting")
                        self.shutdown.set()
                        break
                    if key:
                        self.handle_key(key)
        except Exception as e:
            LOGGER.error("Input actor failed: %s", e)
            self.shutdown.set()
        finally:
            LOGGER.debug("Input actor stopped")

    def handle_key(self, key: str) -> bool:
        """Apply the command bound to ``key``.

        Returns:
            True if the key was a known command, False otherwise.
        """
        command = COMMAND_KEYS.get(key)
        if command is None:
            LOGGER.debug("Ignoring key %r", key)
            return False

        if command is Command.QUIT:
            LOGGER.info("Quit requested")
            self.shutdown.set()
            return True

        size = len(self.playlist)
        new_state = self.state.mutate(lambda s: apply_command(s, command, size))
        LOGGER.debug("Applied %s", command.name)
        if new_state.show_state:
            self._show(new_state)
        return True

    def _show(self, state) -> None:
        out = self.output if self.output is not None else sys.stdout
        out.write(format_status(state, self.playlist) + "\n")
        out.flush()
