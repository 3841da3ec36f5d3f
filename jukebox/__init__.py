"""Package initialization."""

from jukebox.audio import AudioStream, AudioStreamBuilder
from jukebox.config import ConfigManager
from jukebox.constants import Command, Phase
from jukebox.errors import (
    DecodeError,
    DeviceUnavailableError,
    JukeboxError,
    LibraryError,
    PlaylistExhaustedError,
)
from jukebox.input_handler import InputActor, KeyboardPoller, LineCommandSource
from jukebox.models import Playlist, PlayerConfig, PlayState, Track
from jukebox.playback import PlaybackActor
from jukebox.state import StateHandle
from jukebox.supervisor import Supervisor

__all__ = [
    'AudioStream',
    'AudioStreamBuilder',
    'ConfigManager',
    'Command',
    'Phase',
    'DecodeError',
    'DeviceUnavailableError',
    'JukeboxError',
    'LibraryError',
    'PlaylistExhaustedError',
    'InputActor',
    'KeyboardPoller',
    'LineCommandSource',
    'Playlist',
    'PlayerConfig',
    'PlayState',
    'Track',
    'PlaybackActor',
    'StateHandle',
    'Supervisor',
]
