import io
import struct
import threading

import pytest

from voicelink.audio import (
    CHANNELS,
    FRAMES_PER_BUFFER,
    SAMPLE_RATE,
    AudioCapture,
    decode_samples,
    encode_samples,
)


def test_default_capture_uses_stream_parameters():
    assert SAMPLE_RATE == 44100
    assert FRAMES_PER_BUFFER == 256
    assert CHANNELS == 1
    samples = [0.5] * 257
    capture = AudioCapture(source=io.BytesIO(encode_samples(samples)))
    blocks = []
    capture.start_capture(blocks.append)
    capture._thread.join(timeout=2)
    capture.stop_capture()
    assert [len(b) for b in blocks] == [256, 1]


def test_encode_is_native_float32():
    assert encode_samples([1.0, -0.5]) == struct.pack("ff", 1.0, -0.5)


def test_round_trip():
    samples = [0.0, 0.25, -1.0, 0.5, 0.125]
    assert decode_samples(encode_samples(samples)) == samples


def test_encoded_length_is_four_bytes_per_sample():
    assert len(encode_samples([0.0] * 7)) == 7 * 4


def test_decode_empty():
    assert decode_samples(b"") == []


def test_decode_rejects_partial_sample():
    with pytest.raises(ValueError):
        decode_samples(b"\x00\x00\x00")


def test_capture_delivers_blocks_in_order():
    samples = [float(i % 8) / 8 for i in range(FRAMES_PER_BUFFER * 2 + 10)]
    capture = AudioCapture(source=io.BytesIO(encode_samples(samples)))
    blocks = []
    done = threading.Event()

    def collect(block):
        blocks.append(block)

    capture.start_capture(collect)
    capture._thread.join(timeout=2)
    capture.stop_capture()
    done.set()
    assert [len(b) for b in blocks] == [FRAMES_PER_BUFFER, FRAMES_PER_BUFFER, 10]
    assert [s for b in blocks for s in b] == samples
    assert capture.is_capturing is False


def test_capture_drops_trailing_partial_sample():
    data = encode_samples([0.5, 0.25]) + b"\x01\x02"
    capture = AudioCapture(source=io.BytesIO(data), frames_per_buffer=4)
    blocks = []
    capture.start_capture(blocks.append)
    capture._thread.join(timeout=2)
    capture.stop_capture()
    assert blocks == [[0.5, 0.25]]


def test_stop_without_start_is_harmless():
    capture = AudioCapture(source=io.BytesIO(b""))
    capture.stop_capture()
    assert capture.is_capturing is False


def test_invalid_block_size():
    with pytest.raises(ValueError):
        AudioCapture(source=io.BytesIO(b""), frames_per_buffer=0)


def test_context_manager_stops_capture():
    data = encode_samples([0.5] * 8)
    blocks = []
    with AudioCapture(source=io.BytesIO(data), frames_per_buffer=8) as capture:
        capture.start_capture(blocks.append)
    assert capture.is_capturing is False
    assert blocks == [[0.5] * 8]