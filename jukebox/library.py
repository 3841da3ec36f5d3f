"""Music directory scanning."""

import logging
import os
from pathlib import Path
from typing import List, Union

import soundfile

from jukebox.errors import LibraryError
from jukebox.models import Playlist

LOGGER = logging.getLogger(__name__)


def scan(root: Union[str, Path]) -> List[Path]:
    """Recursively list regular files under ``root`` in traversal order.

    Paths are resolved to absolute paths. Unreadable directories are skipped.
    """
    paths: List[Path] = []
    for dirpath, _, filenames in os.walk(root, onerror=_log_walk_error):
        for filename in filenames:
            path = Path(dirpath) / filename
            if path.is_file():
                paths.append(path.resolve())
    return paths


def is_playable(path: Path) -> bool:
    """Check whether libsndfile can read an audio stream from ``path``."""
    try:
        info = soundfile.info(str(path))
    except (RuntimeError, OSError) as e:
        LOGGER.debug("Skipping %s: %s", path, e)
        return False
    return info.frames > 0 and info.channels > 0


def build_playlist(root: Union[str, Path]) -> Playlist:
    """Build the playlist from every playable file below ``root``.

    Raises:
        LibraryError: ``root`` does not exist, is not a directory, or holds
            no playable files.
    """
    root_path = Path(root).expanduser()
    if not root_path.exists():
        raise LibraryError(f"path does not exist: {root_path}")
    if not root_path.is_dir():
        raise LibraryError(f"not a directory: {root_path}")

    LOGGER.info("Scanning %s", root_path)
    candidates = scan(root_path)
    playlist = Playlist.from_paths(p for p in candidates if is_playable(p))
    LOGGER.info("Found %d playable of %d files", len(playlist), len(candidates))

    if playlist.is_empty():
        raise LibraryError(f"no playable audio files in {root_path}")
    return playlist


def _log_walk_error(error: OSError) -> None:
    LOGGER.warning("Cannot read %s: %s", error.filename, error.strerror)
