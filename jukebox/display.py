"""Status line rendering."""

from jukebox.models import Playlist, PlayState


def _on_off(flag: bool) -> str:
    return 'on' if flag else 'off'


def format_status(state: PlayState, playlist: Playlist) -> str:
    """Render ``state`` as a single status line."""
    if playlist.is_empty():
        return "[0/0] (empty playlist)"
    track = playlist[state.current_index] if playlist.valid_index(state.current_index) else None
    name = track.name if track else '?'
    return (
        f"[{state.current_index + 1}/{len(playlist)}] {name} | "
        f"{'playing' if state.playing else 'paused'} | "
        f"loop {_on_off(state.loop_enabled)} | "
        f"autoplay {_on_off(state.autoplay_enabled)}"
    )
