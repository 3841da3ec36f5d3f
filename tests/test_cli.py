"""Tests for jukebox.cli: argument handling and exit codes."""

import io

import pytest

from jukebox import cli
from jukebox.display import format_status
from jukebox.errors import DeviceUnavailableError
from jukebox.models import PlayState

from conftest import FakeBuilder, make_playlist
from test_library import write_wav


@pytest.fixture
def no_config(tmp_path):
    return ['--config', str(tmp_path / 'absent.yaml')]


class TestExitCodes:

    def test_missing_directory(self, tmp_path, no_config, capsys):
        assert cli.main([str(tmp_path / 'nope')] + no_config) == cli.EXIT_USAGE
        err = capsys.readouterr().err
        assert 'does not exist' in err

    def test_file_instead_of_directory(self, tmp_path, no_config, capsys):
        path = write_wav(tmp_path / 'a.wav')
        assert cli.main([str(path)] + no_config) == cli.EXIT_USAGE
        assert 'not a directory' in capsys.readouterr().err

    def test_no_playable_files(self, tmp_path, no_config, capsys):
        music = tmp_path / 'music'
        music.mkdir()
        (music / 'x.txt').write_text('x')
        assert cli.main([str(music)] + no_config) == cli.EXIT_USAGE
        assert 'no playable' in capsys.readouterr().err

    def test_device_unavailable(self, tmp_path, no_config, monkeypatch, capsys):
        write_wav(tmp_path / 'music' / 'a.wav')

        def no_device(*args, **kwargs):
            raise DeviceUnavailableError('no audio output device')

        monkeypatch.setattr(cli, 'AudioStreamBuilder', no_device)
        monkeypatch.setattr(cli.sys, 'stdin', io.StringIO(''))
        assert cli.main([str(tmp_path / 'music')] + no_config) == cli.EXIT_FATAL
        assert 'no audio output device' in capsys.readouterr().err

    def test_quit_exits_cleanly(self, tmp_path, no_config, monkeypatch, capsys):
        write_wav(tmp_path / 'music' / 'a.wav')
        monkeypatch.setattr(cli, 'AudioStreamBuilder', lambda *args: FakeBuilder())
        monkeypatch.setattr(cli.sys, 'stdin', io.StringIO('pq\n'))
        assert cli.main([str(tmp_path / 'music')] + no_config) == cli.EXIT_OK
        assert 'Keys:' in capsys.readouterr().out

    def test_defaults_to_current_directory(self, tmp_path, no_config, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert cli.main(no_config) == cli.EXIT_USAGE


class TestParseArgs:

    def test_log_level_is_case_insensitive(self):
        assert cli.parse_args(['--log-level', 'debug']).log_level == 'DEBUG'

    def test_too_many_arguments(self):
        with pytest.raises(SystemExit):
            cli.parse_args(['a', 'b'])


class TestFormatStatus:

    def test_describes_state(self):
        playlist = make_playlist('a.wav', 'b.wav')
        state = PlayState(current_index=1, playing=True, loop_enabled=True)
        assert format_status(state, playlist) == (
            "[2/2] b.wav | playing | loop on | autoplay on"
        )

    def test_empty_playlist(self):
        assert format_status(PlayState(), make_playlist()) == "[0/0] (empty playlist)"
