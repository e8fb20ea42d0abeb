"""Minimal chat client that posts each message as JSON to an HTTP endpoint."""

from __future__ import annotations

import argparse
import json
import sys
import urllib.error
import urllib.request
from collections.abc import Callable

DEFAULT_URL = "http://192.168.0.78:5000/"
DEFAULT_SENDER = "user1"
WINDOW_TITLE = "Simple Messenger"


def build_payload(message: str, sender: str = DEFAULT_SENDER) -> bytes:
    """Encode a chat message as an indented UTF-8 JSON document."""
    document = {"message": message, "sender": sender}
    return (json.dumps(document, indent=4, ensure_ascii=False) + "\n").encode("utf-8")


def _describe_error(exc: Exception) -> str:
    if isinstance(exc, urllib.error.HTTPError):
        return f"{exc.code} {exc.reason}"
    if isinstance(exc, urllib.error.URLError):
        return str(exc.reason)
    return str(exc)


class MessengerClient:
    """Sends messages to a chat endpoint and keeps a log of the outcomes."""

    def __init__(
        self,
        url: str = DEFAULT_URL,
        sender: str = DEFAULT_SENDER,
        *,
        timeout: float = 10.0,
        on_display: Callable[[str], None] | None = None,
    ) -> None:
        self.url = url
        self.sender = sender
        self.timeout = timeout
        self.chat_display: list[str] = []
        self._on_display = on_display

    def _display(self, line: str) -> None:
        self.chat_display.append(line)
        if self._on_display is not None:
            self._on_display(line)

    def send_message(self, message: str) -> str | None:
        """Post a message; return the line added to the display, or None if empty."""
        if not message:
            return None
        request = urllib.request.Request(
            self.url,
            data=build_payload(message, self.sender),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as reply:
                body = reply.read().decode("utf-8", errors="replace")
        except (urllib.error.URLError, OSError) as exc:
            line = f"Error: {_describe_error(exc)}"
        else:
            line = f"Message sent: {body}"
        self._display(line)
        return line


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=WINDOW_TITLE)
    parser.add_argument("--url", default=DEFAULT_URL)
    parser.add_argument("--sender", default=DEFAULT_SENDER)
    args = parser.parse_args(argv)
    client = MessengerClient(args.url, args.sender, on_display=print)
    print(WINDOW_TITLE, flush=True)
    for line in sys.stdin:
        client.send_message(line.rstrip("\r\n"))
    return 0


if __name__ == "__main__":
    sys.exit(main())