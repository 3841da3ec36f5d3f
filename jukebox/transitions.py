"""Pure play state transitions.

Every function takes a snapshot and returns a new one; nothing here touches
locks or devices. Command transitions bump ``request_seq``; the ones that
require the loaded track to start over also bump ``reload_seq``.
"""

from typing import Callable, Dict

from jukebox.constants import INDEXED_COMMANDS, Command
from jukebox.models import PlayState


def toggle_play(state: PlayState, size: int) -> PlayState:
    return state.evolve(playing=not state.playing)


def next_track(state: PlayState, size: int) -> PlayState:
    return state.evolve(
        current_index=(state.current_index + 1) % size,
        reload_seq=state.reload_seq + 1,
    )


def previous_track(state: PlayState, size: int) -> PlayState:
    return state.evolve(
        current_index=(state.current_index - 1 + size) % size,
        reload_seq=state.reload_seq + 1,
    )


def restart(state: PlayState, size: int) -> PlayState:
    return state.evolve(reload_seq=state.reload_seq + 1)


def toggle_loop(state: PlayState, size: int) -> PlayState:
    return state.evolve(loop_enabled=not state.loop_enabled)


def toggle_autoplay(state: PlayState, size: int) -> PlayState:
    return state.evolve(autoplay_enabled=not state.autoplay_enabled)


def toggle_show_state(state: PlayState, size: int) -> PlayState:
    return state.evolve(show_state=not state.show_state)


TRANSITIONS: Dict[Command, Callable[[PlayState, int], PlayState]] = {
    Command.TOGGLE_PLAY: toggle_play,
    Command.NEXT: next_track,
    Command.PREVIOUS: previous_track,
    Command.RESTART: restart,
    Command.TOGGLE_LOOP: toggle_loop,
    Command.TOGGLE_AUTOPLAY: toggle_autoplay,
    Command.TOGGLE_SHOW_STATE: toggle_show_state,
}


def apply_command(state: PlayState, command: Command, size: int) -> PlayState:
    """Apply a user command to ``state`` for a playlist of ``size`` tracks.

    Commands that need a track are no-ops on an empty playlist and leave the
    snapshot untouched, ``request_seq`` included. ``Command.QUIT`` has no
    play state transition.
    """
    transition = TRANSITIONS.get(command)
    if transition is None:
        return state
    if size <= 0 and command in INDEXED_COMMANDS:
        return state
    new_state = transition(state, size)
    return new_state.evolve(request_seq=state.request_seq + 1)


def end_of_track(state: PlayState, size: int) -> PlayState:
    """Decide what happens when the current track runs out.

    Loop restarts the same index. Otherwise autoplay advances by one, which
    on a single-track playlist lands on the same index again. With neither
    flag set playback stops on the current index, rewound to the start so
    a later play command replays it.
    """
    if size <= 0:
        return state
    if state.loop_enabled:
        return state.evolve(playing=True, reload_seq=state.reload_seq + 1)
    if state.autoplay_enabled:
        return state.evolve(
            current_index=(state.current_index + 1) % size,
            playing=True,
            reload_seq=state.reload_seq + 1,
        )
    return state.evolve(playing=False, reload_seq=state.reload_seq + 1)


def skip_track(state: PlayState, size: int) -> PlayState:
    """Move past a track that failed while playing, ignoring loop."""
    if size <= 0:
        return state
    return state.evolve(
        current_index=(state.current_index + 1) % size,
        reload_seq=state.reload_seq + 1,
    )
