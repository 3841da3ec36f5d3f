"""Shared fixtures: in-memory audio streams so tests need no sound device."""

import threading
from pathlib import Path

import pytest

from jukebox.errors import DecodeError
from jukebox.models import Playlist, PlayState
from jukebox.state import StateHandle


class FakeStream:
    def __init__(self, track):
        self.track = track
        self.playing = False
        self.ended = False
        self.error = None
        self.closed = False
        self.calls = []

    def play(self):
        self.calls.append('play')
        self.playing = True

    def pause(self):
        self.calls.append('pause')
        self.playing = False

    def is_ended(self):
        return self.ended

    def close(self):
        self.calls.append('close')
        self.closed = True


class FakeBuilder:
    """Opens FakeStreams; names in ``broken`` raise DecodeError."""

    def __init__(self, broken=()):
        self.broken = set(broken)
        self.opened = []

    def open(self, track):
        if track.name in self.broken:
            raise DecodeError(track.path, 'corrupt')
        stream = FakeStream(track)
        self.opened.append(stream)
        return stream

    @property
    def current(self):
        return self.opened[-1]


def make_playlist(*names):
    return Playlist.from_paths(Path('/music') / name for name in names)


@pytest.fixture
def playlist():
    return make_playlist('a.wav', 'b.wav', 'c.wav')


@pytest.fixture
def shutdown():
    return threading.Event()


@pytest.fixture
def builder():
    return FakeBuilder()


@pytest.fixture
def handle(playlist):
    return StateHandle(PlayState(), len(playlist))
