"""Data models for the jukebox."""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple, Union

from jukebox.constants import AUDIO_BLOCK_SIZE, POLL_INTERVAL


@dataclass(frozen=True)
class Track:
    """A single playable file."""
    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    def __str__(self) -> str:
        return str(self.path)


class Playlist:
    """Ordered, read-only sequence of tracks.

    Built once at startup and shared by both actors without locking.
    """

    def __init__(self, tracks: Iterable[Track] = ()):
        self._tracks: Tuple[Track, ...] = tuple(tracks)

    @classmethod
    def from_paths(cls, paths: Iterable[Path]) -> 'Playlist':
        return cls(Track(Path(p)) for p in paths)

    def __len__(self) -> int:
        return len(self._tracks)

    def __getitem__(self, index: int) -> Track:
        return self._tracks[index]

    def __iter__(self) -> Iterator[Track]:
        return iter(self._tracks)

    def __repr__(self) -> str:
        return f"Playlist({len(self._tracks)} tracks)"

    def is_empty(self) -> bool:
        return not self._tracks

    def valid_index(self, index: int) -> bool:
        return 0 <= index < len(self._tracks)


@dataclass(frozen=True)
class PlayState:
    """Snapshot of the shared play state.

    Instances are immutable; a transition always produces a new snapshot,
    so readers never observe a half-applied change.
    """
    current_index: int = 0
    playing: bool = False
    loop_enabled: bool = False
    autoplay_enabled: bool = True
    show_state: bool = False
    request_seq: int = 0
    reload_seq: int = 0

    def evolve(self, **changes) -> 'PlayState':
        return replace(self, **changes)


@dataclass
class PlayerConfig:
    """Runtime settings shared by the supervisor and the actors."""
    log_level: str = 'INFO'
    poll_interval: float = POLL_INTERVAL
    block_size: int = AUDIO_BLOCK_SIZE
    output_device: Optional[Union[int, str]] = None
    autoplay: bool = True
    loop: bool = False
    start_playing: bool = False
    show_state: bool = False

    def initial_state(self) -> PlayState:
        return PlayState(
            playing=self.start_playing,
            loop_enabled=self.loop,
            autoplay_enabled=self.autoplay,
            show_state=self.show_state,
        )
