"""Exception types raised by the jukebox."""

from pathlib import Path


class JukeboxError(Exception):
    """Base class for all jukebox errors."""


class LibraryError(JukeboxError):
    """The music directory is missing, not a directory, or has no playable files."""


class DeviceUnavailableError(JukeboxError):
    """No usable audio output device."""


class DecodeError(JukeboxError):
    """A single file could not be opened or decoded."""

    def __init__(self, path: Path, reason: object):
        self.path = path
        self.reason = reason
        super().__init__(f"could not decode {path}: {reason}")


class PlaylistExhaustedError(JukeboxError):
    """A full pass over the playlist found nothing playable."""
