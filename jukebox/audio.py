"""Audio decoding and device output."""

import logging
import threading
from typing import Optional, Union

import numpy as np
import soundfile

from jukebox.constants import AUDIO_BLOCK_SIZE
from jukebox.errors import DecodeError, DeviceUnavailableError
from jukebox.models import Track

LOGGER = logging.getLogger(__name__)


def _load_sounddevice():
    # PortAudio is loaded at import time, so a missing library surfaces here
    try:
        import sounddevice
    except OSError as e:
        raise DeviceUnavailableError(f"PortAudio not available: {e}") from e
    return sounddevice


class AudioStream:
    """One decoded file bound to an output stream.

    Frames are read from the file inside the PortAudio callback. The stream
    is bound to the thread that created it and must be closed there.
    """

    def __init__(self, track: Track, sound_file: soundfile.SoundFile, sd, block_size: int,
                 device: Optional[Union[int, str]] = None):
        self.track = track
        self._file = sound_file
        self._sd = sd
        self._exhausted = threading.Event()
        self.error: Optional[Exception] = None
        self._output = sd.OutputStream(
            samplerate=sound_file.samplerate,
            channels=sound_file.channels,
            dtype='float32',
            blocksize=block_size,
            device=device,
            callback=self._callback,
        )

    def _callback(self, outdata: np.ndarray, frames: int, time_info, status) -> None:
        if status:
            LOGGER.debug("Output status for %s: %s", self.track.name, status)
        try:
            data = self._file.read(frames, dtype='float32', always_2d=True)
        except Exception as e:
            # Stop cleanly so the failure surfaces as an ended stream
            self.error = e
            outdata.fill(0)
            self._exhausted.set()
            raise self._sd.CallbackStop() from e
        count = len(data)
        outdata[:count] = data
        if count < frames:
            outdata[count:] = 0
            self._exhausted.set()
            raise self._sd.CallbackStop()

    def play(self) -> None:
        if not self._output.active and not self._exhausted.is_set():
            self._output.start()

    def pause(self) -> None:
        if self._output.active:
            self._output.stop()

    def is_ended(self) -> bool:
        """True once the file ran out or failed and the device drained the last block."""
        return self._exhausted.is_set() and not self._output.active

    def close(self) -> None:
        try:
            self._output.close()
        finally:
            self._file.close()


class AudioStreamBuilder:
    """Opens tracks as output streams on one device.

    Raises:
        DeviceUnavailableError: PortAudio is missing or there is no output
            device matching ``device``.
    """

    def __init__(self, block_size: int = AUDIO_BLOCK_SIZE,
                 device: Optional[Union[int, str]] = None):
        self.block_size = block_size
        self.device = device
        self._sd = _load_sounddevice()
        try:
            info = self._sd.query_devices(device, kind='output')
        except (ValueError, self._sd.PortAudioError) as e:
            raise DeviceUnavailableError(f"no audio output device: {e}") from e
        LOGGER.info("Using output device %s", info['name'])

    def open(self, track: Track) -> AudioStream:
        """Open ``track`` paused at its first frame.

        Raises:
            DecodeError: the file cannot be decoded or the device rejects its
                format.
        """
        try:
            sound_file = soundfile.SoundFile(str(track.path))
        except (RuntimeError, OSError) as e:
            raise DecodeError(track.path, e) from e

        try:
            return AudioStream(track, sound_file, self._sd, self.block_size, self.device)
        except self._sd.PortAudioError as e:
            sound_file.close()
            raise DecodeError(track.path, e) from e
