"""Tests for jukebox.input_handler: command sources and the input actor."""

import io
import threading

import pytest

from jukebox.input_handler import (
    InputActor,
    KeyboardPoller,
    LineCommandSource,
    open_command_source,
)
from jukebox.models import PlayState
from jukebox.state import StateHandle

from conftest import make_playlist


def make_actor(playlist, text='', state=None, output=None):
    handle = StateHandle(state or PlayState(), len(playlist))
    shutdown = threading.Event()
    source = LineCommandSource(io.StringIO(text))
    return InputActor(source, handle, playlist, shutdown, output=output, timeout=0.01)


class TestLineCommandSource:

    def test_each_character_is_a_command(self):
        source = LineCommandSource(io.StringIO('pk\nj\n'))
        keys = [source.next_command(0) for _ in range(4)]
        assert keys == ['p', 'k', 'j', None]

    def test_blank_line_yields_nothing(self):
        source = LineCommandSource(io.StringIO('\n  \nq\n'))
        assert source.next_command(0) == ''
        assert source.next_command(0) == ''
        assert source.next_command(0) == 'q'

    def test_end_of_input_is_none(self):
        assert LineCommandSource(io.StringIO('')).next_command(0) is None


class TestOpenCommandSource:

    def test_non_terminal_gets_line_source(self):
        assert isinstance(open_command_source(io.StringIO('')), LineCommandSource)

    def test_terminal_gets_keyboard_poller(self):
        class Tty(io.StringIO):
            def isatty(self):
                return True

        assert isinstance(open_command_source(Tty('')), KeyboardPoller)


class TestInputActor:

    def test_keys_are_applied_in_order(self, playlist):
        actor = make_actor(playlist, 'pkk\n')
        actor.run()
        state = actor.state.read()
        assert state.playing is True
        assert state.current_index == 2
        assert state.request_seq == 3

    def test_quit_sets_shutdown_without_touching_state(self, playlist):
        actor = make_actor(playlist, 'q\nk\n')
        actor.run()
        assert actor.shutdown.is_set()
        assert actor.state.read() == PlayState()

    def test_end_of_input_is_implicit_quit(self, playlist):
        actor = make_actor(playlist, 'p\n')
        actor.run()
        assert actor.shutdown.is_set()
        assert actor.state.read().playing is True

    def test_unknown_keys_are_ignored(self, playlist):
        actor = make_actor(playlist, 'xyz?P\n')
        actor.run()
        assert actor.state.read() == PlayState()

    def test_stops_when_shutdown_set_elsewhere(self, playlist):
        actor = make_actor(playlist, 'k\n')
        actor.shutdown.set()
        actor.run()
        assert actor.state.read().current_index == 0

    @pytest.mark.parametrize('key', ['k', 'j', 'r', 'p'])
    def test_empty_playlist_noops(self, key):
        actor = make_actor(make_playlist())
        assert actor.handle_key(key) is True
        assert actor.state.read() == PlayState()

    def test_restart_keeps_index(self, playlist):
        actor = make_actor(playlist, state=PlayState(current_index=1))
        actor.handle_key('r')
        state = actor.state.read()
        assert state.current_index == 1
        assert state.reload_seq == 1

    def test_show_state_prints_status(self, playlist):
        out = io.StringIO()
        actor = make_actor(playlist, 'sk\n', output=out)
        actor.run()
        lines = out.getvalue().splitlines()
        assert len(lines) == 2
        assert lines[-1].startswith('[2/3] b.wav')

    def test_show_state_off_prints_nothing(self, playlist):
        out = io.StringIO()
        actor = make_actor(playlist, 'kp\n', output=out)
        actor.run()
        assert out.getvalue() == ''

    def test_source_failure_requests_shutdown(self, playlist):
        class Broken(LineCommandSource):
            def next_command(self, timeout=0):
                raise OSError('read failed')

        actor = make_actor(playlist)
        actor.source = Broken(io.StringIO(''))
        actor.run()
        assert actor.shutdown.is_set()
