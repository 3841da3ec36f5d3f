"""Command line entry point."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from jukebox.audio import AudioStreamBuilder
from jukebox.config import ConfigManager
from jukebox.constants import CONFIG_FILE, LOG_DATE_FORMAT, LOG_FORMAT
from jukebox.errors import LibraryError
from jukebox.input_handler import open_command_source
from jukebox.library import build_playlist
from jukebox.supervisor import Supervisor

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2

KEY_HELP = (
    "Keys: p play/pause, k next, j previous, r restart, "
    "l loop, a autoplay, s show state, q quit"
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='jukebox',
        description='Play the audio files of a directory with single-key controls.',
    )
    parser.add_argument(
        'directory', nargs='?', type=Path,
        help='directory to scan recursively (default: current directory)',
    )
    parser.add_argument(
        '--config', type=Path, default=Path(CONFIG_FILE),
        help=f'YAML configuration file (default: {CONFIG_FILE})',
    )
    parser.add_argument(
        '--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], type=str.upper,
        help='override the configured log level',
    )
    return parser.parse_args(argv)


def setup_logging(level: str = 'INFO') -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level or 'INFO')

    config_manager = ConfigManager(args.config)
    config_manager.load()
    config = config_manager.config
    if args.log_level:
        ConfigManager.apply_log_level(args.log_level)

    directory = args.directory if args.directory is not None else Path.cwd()
    if args.directory is None:
        LOGGER.info("No path provided, using current location")

    try:
        playlist = build_playlist(directory)
    except LibraryError as e:
        print(f"jukebox: {e}", file=sys.stderr)
        return EXIT_USAGE

    print(KEY_HELP, flush=True)
    supervisor = Supervisor(
        playlist,
        config,
        open_command_source(sys.stdin),
        lambda: AudioStreamBuilder(config.block_size, config.output_device),
    )
    error = supervisor.run()
    if error is not None:
        print(f"jukebox: {error}", file=sys.stderr)
        return EXIT_FATAL
    return EXIT_OK
