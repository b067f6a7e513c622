"""
Whitespace removal stage: drops insignificant JSON whitespace chunk by chunk.
"""

import logging
from typing import Tuple, Union

from base_classes import CarriedState

logger = logging.getLogger(__name__)

Chunk = Union[bytes, bytearray, memoryview]

QUOTE = ord('"')
BACKSLASH = ord('\\')
WHITESPACE = frozenset(b'\n\r\t ')


def transform(chunk: Chunk, state: CarriedState) -> Tuple[bytes, CarriedState]:
    """
    Remove whitespace outside quoted strings from one chunk.

    Only the single preceding byte is inspected to decide whether a quote is
    escaped, so a string ending in an escaped backslash (``"a\\\\"``) is not
    closed by its final quote. The state carries over between chunks, which
    makes the result independent of where the stream was split.

    Args:
        chunk: Bytes read from the input
        state: State returned by the previous call, or CarriedState()

    Returns:
        Tuple of the compacted bytes and the state for the next chunk
    """
    output = bytearray()
    quotes = state.quotes
    last = state.last

    for c in chunk:
        if quotes == 0:
            if c == QUOTE:
                quotes += 1
                output.append(c)
            elif c not in WHITESPACE:
                output.append(c)
        else:
            if c == QUOTE and last != BACKSLASH:
                quotes -= 1
            output.append(c)
        last = c

    return bytes(output), CarriedState(quotes=quotes, last=last)


def compact_bytes(data: Chunk) -> bytes:
    """Compact a complete document held in memory"""
    output, _ = transform(data, CarriedState())
    return output


class WhitespaceCompactor:
    """
    Stateful wrapper around transform() for feeding a stream piece by piece.

    Holds the carried state between calls and keeps running byte counts.
    """

    def __init__(self):
        self.state = CarriedState()
        self.bytes_in = 0
        self.bytes_out = 0

    @property
    def inside_string(self) -> bool:
        return self.state.inside_string

    def feed(self, chunk: Chunk) -> bytes:
        """Compact the next chunk of the stream"""
        output, self.state = transform(chunk, self.state)
        self.bytes_in += len(chunk)
        self.bytes_out += len(output)
        return output

    def reset(self):
        """Start over as if at the beginning of a new stream."""
        if self.state.inside_string:
            logger.debug("Resetting compactor inside an unterminated string")
        self.state = CarriedState()
        self.bytes_in = 0
        self.bytes_out = 0
