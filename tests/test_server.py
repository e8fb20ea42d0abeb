import asyncio

import pytest

from voicelink.server import READ_SIZE, Server, main


class _Recorder:
    def __init__(self):
        self.received = []

    def deliver(self, msg):
        self.received.append(msg)


async def _wait_for(condition, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not condition():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_message_larger_than_read_size_is_relayed_whole():
    assert READ_SIZE == 1024
    payload = bytes(i % 251 for i in range(READ_SIZE * 3 + 17))
    server = Server("127.0.0.1", 0)
    await server.start()
    try:
        r1, w1 = await asyncio.open_connection("127.0.0.1", server.port)
        r2, w2 = await asyncio.open_connection("127.0.0.1", server.port)
        await _wait_for(lambda: len(server.participants) == 2)
        w1.write(payload)
        await w1.drain()
        got2 = await asyncio.wait_for(r2.readexactly(len(payload)), 2)
        assert got2 == payload
        w1.close()
        w2.close()
    finally:
        await server.close()


def test_deliver_reaches_every_participant():
    server = Server("127.0.0.1", 0)
    a, b = _Recorder(), _Recorder()
    server.join(a)
    server.join(b)
    server.deliver(b"hello")
    assert a.received == [b"hello"]
    assert b.received == [b"hello"]


def test_leave_stops_delivery_and_ignores_unknown():
    server = Server("127.0.0.1", 0)
    a, b = _Recorder(), _Recorder()
    server.join(a)
    server.join(b)
    server.leave(a)
    server.leave(_Recorder())
    server.deliver(b"x")
    assert a.received == []
    assert b.received == [b"x"]
    assert server.participants == frozenset({b})


def test_join_twice_counts_once():
    server = Server("127.0.0.1", 0)
    a = _Recorder()
    server.join(a)
    server.join(a)
    assert len(server.participants) == 1


@pytest.mark.asyncio
async def test_broadcast_between_clients():
    server = Server("127.0.0.1", 0)
    await server.start()
    try:
        r1, w1 = await asyncio.open_connection("127.0.0.1", server.port)
        r2, w2 = await asyncio.open_connection("127.0.0.1", server.port)
        await _wait_for(lambda: len(server.participants) == 2)
        w1.write(b"voice-data")
        await w1.drain()
        got2 = await asyncio.wait_for(r2.readexactly(10), 2)
        got1 = await asyncio.wait_for(r1.readexactly(10), 2)
        assert got2 == b"voice-data"
        assert got1 == b"voice-data"
        w1.close()
        w2.close()
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_disconnect_leaves_server():
    server = Server("127.0.0.1", 0)
    await server.start()
    try:
        _, w1 = await asyncio.open_connection("127.0.0.1", server.port)
        r2, w2 = await asyncio.open_connection("127.0.0.1", server.port)
        await _wait_for(lambda: len(server.participants) == 2)
        w1.close()
        await w1.wait_closed()
        await _wait_for(lambda: len(server.participants) == 1)
        w2.write(b"ab")
        await w2.drain()
        assert await asyncio.wait_for(r2.readexactly(2), 2) == b"ab"
        w2.close()
    finally:
        await server.close()
    assert server.participants == frozenset()


@pytest.mark.asyncio
async def test_start_twice_raises():
    server = Server("127.0.0.1", 0)
    await server.start()
    try:
        with pytest.raises(RuntimeError):
            await server.start()
    finally:
        await server.close()


def test_main_rejects_bad_port():
    with pytest.raises(SystemExit):
        main(["--port", "not-a-number"])