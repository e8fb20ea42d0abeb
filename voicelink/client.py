"""Interactive voice client: streams captured audio to the relay and reports what comes back."""

from __future__ import annotations

import argparse
import os
import socket
import sys
import threading
from array import array
from collections.abc import Iterable, Iterator
from typing import TextIO

from voicelink.audio import AudioCapture, encode_samples

READ_SIZE = 1024
PREVIEW_BYTES = 10
CONNECT_TIMEOUT = 2.0


def describe_received(data: bytes) -> str:
    """Report a received chunk: its size and its first bytes as signed values."""
    preview = "".join(f"{value} " for value in array("b", bytes(data[:PREVIEW_BYTES])))
    return f"Received {len(data)} bytes of audio data\nFirst few bytes: {preview}"


class Client:
    """TCP connection to the relay plus an audio capture feeding it."""

    def __init__(
        self,
        capture: AudioCapture | None = None,
        *,
        out: TextIO | None = None,
        err: TextIO | None = None,
        connect_timeout: float = CONNECT_TIMEOUT,
    ) -> None:
        self._capture = capture if capture is not None else AudioCapture()
        self._out = out
        self._err = err
        self._connect_timeout = connect_timeout
        self._sock: socket.socket | None = None
        self._receiver: threading.Thread | None = None
        self._print_lock = threading.Lock()
        self._connected = False
        self._capturing = False
        self._closing = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def is_capturing(self) -> bool:
        return self._capturing

    def _say(self, text: str, *, error: bool = False) -> None:
        if error:
            stream = self._err if self._err is not None else sys.stderr
        else:
            stream = self._out if self._out is not None else sys.stdout
        with self._print_lock:
            print(text, file=stream, flush=True)

    def connect(self, host: str, port) -> bool:
        """Connect to the relay, replacing any existing connection."""
        self._say(f"Attempting to connect to {host}:{port}...")
        self._disconnect()
        try:
            sock = socket.create_connection((host, port), timeout=self._connect_timeout)
        except OSError as exc:
            self._say(f"Connection failed: {exc}", error=True)
        else:
            sock.settimeout(None)
            self._sock = sock
            self._closing = False
            self._connected = True
            self._say(f"Connected to {host}:{port}")
        self._say("Status: Connected" if self._connected else "Status: Not connected")
        return self._connected

    def start_audio(self) -> None:
        """Begin sending captured audio and listening for relayed data."""
        if not self._connected:
            self._say("Not connected to server. Please connect first.")
            return
        if self._capturing:
            self._say("Audio capture is already running.")
            return
        self._capturing = True
        self._capture.start_capture(self._send_audio)
        self._start_receiver()
        self._say("Audio capture started.")

    def stop_audio(self) -> None:
        """Stop sending captured audio."""
        if not self._capturing:
            self._say("Audio capture is not running.")
            return
        self._capturing = False
        self._capture.stop_capture()
        self._say("Audio capture stopped.")

    def close(self) -> None:
        """Stop capture and drop the connection."""
        if self._capturing:
            self._capturing = False
            self._capture.stop_capture()
        self._disconnect()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _disconnect(self) -> None:
        sock = self._sock
        self._connected = False
        if sock is None:
            return
        self._closing = True
        self._sock = None
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        sock.close()
        receiver = self._receiver
        if receiver is not None and receiver is not threading.current_thread():
            receiver.join()
        self._receiver = None

    def _start_receiver(self) -> None:
        if self._receiver is not None and self._receiver.is_alive():
            return
        sock = self._sock
        if sock is None:
            return
        self._receiver = threading.Thread(
            target=self._receive_loop, args=(sock,), daemon=True
        )
        self._receiver.start()

    def _send_audio(self, samples: list[float]) -> None:
        sock = self._sock
        if sock is None:
            return
        try:
            sock.sendall(encode_samples(samples))
        except OSError as exc:
            self._say(f"Error sending audio: {exc}", error=True)

    def _receive_loop(self, sock: socket.socket) -> None:
        while True:
            try:
                data = sock.recv(READ_SIZE)
            except OSError as exc:
                if not self._closing:
                    self._say(f"Error receiving audio: {exc}", error=True)
                return
            if not data:
                if not self._closing:
                    self._say("Server closed the connection.")
                return
            self._say(describe_received(data))


def print_menu() -> None:
    print("\n--- Menu ---")
    print("1. Connect to server")
    print("2. Start audio")
    print("3. Stop audio")
    print("4. Exit")
    print("Enter your choice: ", end="", flush=True)


def _tokens(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        yield from line.split()


def _run_menu(client: Client, tokens: Iterator[str]) -> None:
    while True:
        print_menu()
        choice = next(tokens, None)
        if choice is None:
            print()
            print("Exiting...")
            return
        try:
            number = int(choice)
        except ValueError:
            number = 0
        if number == 1:
            print("Enter server host: ", end="", flush=True)
            host = next(tokens, None)
            print("Enter server port: ", end="", flush=True)
            port = next(tokens, None)
            if host is None or port is None:
                print()
                print("Exiting...")
                return
            client.connect(host, port)
        elif number == 2:
            client.start_audio()
        elif number == 3:
            client.stop_audio()
        elif number == 4:
            print("Exiting...")
            return
        else:
            print("Invalid choice. Please try again.")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Send raw mono float32 audio to a relay server."
    )
    parser.add_argument(
        "--input",
        default=os.devnull,
        help="file of raw native-order float32 samples to stream (default: silence)",
    )
    args = parser.parse_args(argv)
    try:
        with open(args.input, "rb") as source:
            with Client(AudioCapture(source=source)) as client:
                _run_menu(client, _tokens(sys.stdin))
    except Exception as exc:
        print(f"Exception: {exc}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())