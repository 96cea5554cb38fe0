"""Unit tests for the single-key cancel listener."""

import asyncio
import io
import os
import sys

import pytest

from simroute.app.keyboard import ESC, KeyListener, split_keys


@pytest.fixture
def pipe_stream():
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "r")
    writer = os.fdopen(write_fd, "w")
    yield reader, writer
    for stream in (reader, writer):
        if not stream.closed:
            stream.close()


async def _wait_for(predicate, timeout=2.0):
    for _ in range(int(timeout / 0.01)):
        if predicate():
            return True
        await asyncio.sleep(0.01)
    return predicate()


class TestSplitKeys:

    @pytest.mark.parametrize("chunk,expected", [
        ("abc", ["a", "b", "c"]),
        (ESC, [ESC]),
        ("a" + ESC, ["a", ESC]),
        (ESC + ESC, [ESC, ESC]),
        ("\x1b[A", ["\x1b[A"]),
        ("\x1b[1;5C" + ESC, ["\x1b[1;5C", ESC]),
        ("\x1bOP", ["\x1bOP"]),
        ("\x1bx", ["\x1bx"]),
        ("", []),
    ])
    def test_split(self, chunk, expected):
        assert split_keys(chunk) == expected


class TestKeyListener:

    @pytest.mark.asyncio
    async def test_escape_triggers_cancel_and_eof_ends(self, pipe_stream):
        reader, writer = pipe_stream
        writer.write("q" + ESC)
        writer.close()
        presses = []

        listener = KeyListener(stream=reader)
        await asyncio.wait_for(listener.listen(presses.append), timeout=5.0)

        assert presses == ["keyboard"]

    @pytest.mark.asyncio
    async def test_escape_after_other_key_in_same_burst(self, pipe_stream):
        reader, writer = pipe_stream
        presses = []
        listener = KeyListener(stream=reader)
        task = asyncio.create_task(listener.listen(presses.append))

        writer.write("a" + ESC)
        writer.flush()
        # The writer stays open: no EOF to wake the poll a second time.
        seen = await _wait_for(lambda: presses)
        listener.stop()
        await asyncio.wait_for(task, timeout=5.0)

        assert seen
        assert presses == ["keyboard"]

    @pytest.mark.asyncio
    async def test_escape_sequences_do_not_cancel(self, pipe_stream):
        reader, writer = pipe_stream
        writer.write("\x1b[A" + "\x1bOP" + "\x1bx")
        writer.close()
        presses = []

        listener = KeyListener(stream=reader)
        await asyncio.wait_for(listener.listen(presses.append), timeout=5.0)

        assert presses == []

    @pytest.mark.asyncio
    async def test_custom_cancel_key(self, pipe_stream):
        reader, writer = pipe_stream
        writer.write("xq")
        writer.close()
        presses = []

        listener = KeyListener(cancel_key="q", stream=reader)
        await asyncio.wait_for(listener.listen(presses.append), timeout=5.0)

        assert presses == ["keyboard"]

    @pytest.mark.asyncio
    async def test_stop_ends_listening(self, pipe_stream):
        reader, _writer = pipe_stream
        listener = KeyListener(stream=reader)

        task = asyncio.create_task(listener.listen(lambda source: None))
        await asyncio.sleep(0.05)
        listener.stop()

        await asyncio.wait_for(task, timeout=5.0)
        assert task.done()

    @pytest.mark.asyncio
    async def test_missing_stdin_returns_immediately(self, monkeypatch):
        monkeypatch.setattr(sys, "stdin", None)
        presses = []

        listener = KeyListener()
        await asyncio.wait_for(listener.listen(presses.append), timeout=1.0)

        assert presses == []

    @pytest.mark.asyncio
    async def test_stream_without_descriptor_returns_immediately(self):
        presses = []

        listener = KeyListener(stream=io.StringIO(ESC))
        await asyncio.wait_for(listener.listen(presses.append), timeout=1.0)

        assert presses == []
