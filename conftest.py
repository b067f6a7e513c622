"""
Shared fixtures for the JSON compactor tests.
"""

from typing import Callable, List, Optional, Sequence, Union

import pytest


class ChunkedSource:
    """Fake binary source that hands out predefined chunks.

    Each entry is returned by one read call: bytes are copied into the
    caller's buffer, None means "nothing yet", an exception is raised.
    Once the entries run out every read reports end of input.
    """

    def __init__(self, chunks: Sequence[Union[bytes, None, Exception]],
                 on_read: Optional[Callable[[int], None]] = None):
        self.chunks = list(chunks)
        self.on_read = on_read
        self.reads = 0

    def readinto(self, buffer) -> Optional[int]:
        index = self.reads
        self.reads += 1
        if self.on_read:
            self.on_read(index)
        if index >= len(self.chunks):
            return 0
        chunk = self.chunks[index]
        if isinstance(chunk, Exception):
            raise chunk
        if chunk is None:
            return None
        assert len(chunk) <= len(buffer), "test chunk larger than pump buffer"
        buffer[:len(chunk)] = chunk
        return len(chunk)


class RecordingSink:
    """Fake binary sink that records writes and flushes.

    `write_errors` maps a write call index to the exception that call raises.
    """

    def __init__(self, write_errors=None, flush_error: Optional[Exception] = None,
                 on_write: Optional[Callable[[int], None]] = None):
        self.write_errors = dict(write_errors or {})
        self.flush_error = flush_error
        self.on_write = on_write
        self.writes: List[bytes] = []
        self.write_calls = 0
        self.flushes = 0

    def write(self, data) -> int:
        index = self.write_calls
        self.write_calls += 1
        if index in self.write_errors:
            raise self.write_errors[index]
        self.writes.append(bytes(data))
        if self.on_write:
            self.on_write(index)
        return len(data)

    def flush(self) -> None:
        self.flushes += 1
        if self.flush_error:
            raise self.flush_error

    @property
    def data(self) -> bytes:
        return b''.join(self.writes)


@pytest.fixture
def make_source():
    """Factory for ChunkedSource"""
    return ChunkedSource


@pytest.fixture
def make_sink():
    """Factory for RecordingSink"""
    return RecordingSink


@pytest.fixture
def sample_document():
    """Indented JSON with whitespace and escapes inside strings"""
    return (
        b'{\n'
        b'  "name" : "jc  tool",\n'
        b'  "tabs":\t"a\tb",\r\n'
        b'  "quote" : "say \\"hi\\" ",\n'
        b'  "list" : [ 1, 2 ,\n    3 ],\n'
        b'  "nested": { "k" : " v " }\n'
        b'}\n'
    )


@pytest.fixture
def sample_compacted():
    return (
        b'{"name":"jc  tool","tabs":"a\tb","quote":"say \\"hi\\" ",'
        b'"list":[1,2,3],"nested":{"k":" v "}}'
    )
