"""Constants and enums for the jukebox."""

from enum import Enum


class Command(str, Enum):
    """Single-key runtime commands."""
    QUIT = 'q'
    TOGGLE_PLAY = 'p'
    NEXT = 'k'
    PREVIOUS = 'j'
    RESTART = 'r'
    TOGGLE_LOOP = 'l'
    TOGGLE_AUTOPLAY = 'a'
    TOGGLE_SHOW_STATE = 's'


class Phase(str, Enum):
    """Playback actor states."""
    IDLE = 'idle'
    LOADED_PAUSED = 'loaded-paused'
    LOADED_PLAYING = 'loaded-playing'
    ENDED = 'ended'


COMMAND_KEYS = {command.value: command for command in Command}

# Commands that need a valid playlist index
INDEXED_COMMANDS = frozenset({
    Command.TOGGLE_PLAY,
    Command.NEXT,
    Command.PREVIOUS,
    Command.RESTART,
})

# Playback settings
POLL_INTERVAL = 0.05
MAX_POLL_INTERVAL = 1.0
AUDIO_BLOCK_SIZE = 2048
INPUT_TIMEOUT = 0.1
JOIN_TIMEOUT = 0.5

CONFIG_FILE = 'config.yaml'
LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'
LOG_DATE_FORMAT = '%d.%m.%Y %H:%M:%S'
