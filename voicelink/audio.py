"""Block-wise audio capture from a raw 32-bit float PCM stream."""

from __future__ import annotations

import sys
import threading
from array import array
from collections.abc import Callable, Iterable
from typing import BinaryIO

SAMPLE_RATE = 44100
CHANNELS = 1
FRAMES_PER_BUFFER = 256
SAMPLE_SIZE = array("f").itemsize


def encode_samples(samples: Iterable[float]) -> bytes:
    """Pack samples as native-order 32-bit floats."""
    return array("f", samples).tobytes()


def decode_samples(data: bytes) -> list[float]:
    """Unpack native-order 32-bit floats; the length must be a whole number of samples."""
    if len(data) % SAMPLE_SIZE:
        raise ValueError(
            f"audio data length {len(data)} is not a multiple of {SAMPLE_SIZE}"
        )
    samples = array("f")
    samples.frombytes(bytes(data))
    return samples.tolist()


class AudioCapture:
    """Reads mono float32 audio in fixed-size blocks and hands each to a callback.

    The input is any binary stream of raw samples (standard input by default);
    capture runs on a background thread until stopped or the stream ends.
    """

    def __init__(
        self,
        source: BinaryIO | None = None,
        frames_per_buffer: int = FRAMES_PER_BUFFER,
        sample_rate: int = SAMPLE_RATE,
    ) -> None:
        if frames_per_buffer <= 0:
            raise ValueError("frames_per_buffer must be positive")
        self._source = source
        self.frames_per_buffer = frames_per_buffer
        self.sample_rate = sample_rate
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_capturing(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start_capture(self, callback: Callable[[list[float]], None]) -> None:
        """Start delivering blocks of samples to ``callback``."""
        self.stop_capture()
        source = self._source if self._source is not None else sys.stdin.buffer
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, args=(source, callback), daemon=True
        )
        self._thread.start()

    def stop_capture(self) -> None:
        """Stop capturing and wait for the capture thread to finish."""
        thread = self._thread
        if thread is None:
            return
        self._stop.set()
        if thread is not threading.current_thread():
            thread.join()
        self._thread = None

    def __enter__(self) -> AudioCapture:
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop_capture()

    def _run(self, source: BinaryIO, callback: Callable[[list[float]], None]) -> None:
        block_bytes = self.frames_per_buffer * SAMPLE_SIZE
        while not self._stop.is_set():
            chunk = source.read(block_bytes)
            if not chunk:
                return
            usable = len(chunk) - len(chunk) % SAMPLE_SIZE
            if usable == 0:
                return
            callback(decode_samples(chunk[:usable]))