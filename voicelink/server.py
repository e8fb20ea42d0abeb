"""Broadcast relay server: every chunk received from one client goes to all."""

from __future__ import annotations

import argparse
import asyncio
import sys
from contextlib import suppress

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
READ_SIZE = 1024


class Session:
    """One connected participant with an ordered outgoing queue."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        server: Server,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._server = server
        self._outgoing: asyncio.Queue[bytes] = asyncio.Queue()
        self._writer_task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Relay incoming data to the server until the peer goes away."""
        self._writer_task = asyncio.create_task(self._write_loop())
        try:
            while True:
                try:
                    data = await self._reader.read(READ_SIZE)
                except (ConnectionError, OSError):
                    break
                if not data:
                    break
                self._server.deliver(data)
        finally:
            self._server.leave(self)
            await self.close()

    def deliver(self, msg: bytes) -> None:
        """Queue a message for sending; messages go out in order."""
        self._outgoing.put_nowait(bytes(msg))

    async def close(self) -> None:
        """Stop sending and close the connection."""
        task = self._writer_task
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        self._writer_task = None
        if not self._writer.is_closing():
            self._writer.close()
        with suppress(ConnectionError, OSError):
            await self._writer.wait_closed()

    async def _write_loop(self) -> None:
        while True:
            msg = await self._outgoing.get()
            try:
                self._writer.write(msg)
                await self._writer.drain()
            except (ConnectionError, OSError):
                self._server.leave(self)
                return


class Server:
    """Accepts TCP connections and relays data between all participants."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
        self.host = host
        self._requested_port = port
        self._participants: set[Session] = set()
        self._server: asyncio.base_events.Server | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def participants(self) -> frozenset:
        return frozenset(self._participants)

    @property
    def port(self) -> int:
        """The port actually listened on (useful when 0 was requested)."""
        if self._server is None or not self._server.sockets:
            return self._requested_port
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        """Begin listening for connections."""
        if self._server is not None:
            raise RuntimeError("server already started")
        self._server = await asyncio.start_server(
            self._on_connect, self.host, self._requested_port
        )

    async def close(self) -> None:
        """Stop listening and drop every participant."""
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
        for task in list(self._tasks):
            task.cancel()
        for task in list(self._tasks):
            with suppress(asyncio.CancelledError):
                await task
        for session in list(self._participants):
            await session.close()
        self._participants.clear()

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    def deliver(self, msg: bytes) -> None:
        """Send a message to every participant, the sender included."""
        for participant in list(self._participants):
            participant.deliver(msg)

    def join(self, session) -> None:
        self._participants.add(session)

    def leave(self, session) -> None:
        self._participants.discard(session)

    async def _on_connect(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        print("New connection", flush=True)
        session = Session(reader, writer, self)
        self.join(session)
        task = asyncio.current_task()
        if task is not None:
            self._tasks.add(task)
        try:
            await session.start()
        finally:
            if task is not None:
                self._tasks.discard(task)


async def _serve(host: str, port: int) -> None:
    server = Server(host, port)
    await server.start()
    print(f"Server running on port {server.port}", flush=True)
    try:
        await server.serve_forever()
    finally:
        await server.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Relay audio between clients.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    try:
        asyncio.run(_serve(args.host, args.port))
    except KeyboardInterrupt:
        pass
    except Exception as exc:  # report and exit cleanly, like the command does
        print(f"Exception: {exc}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())