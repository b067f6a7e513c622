"""
Base Classes for the JSON Compactor
===================================

Contains the core data structures threaded through the compaction pipeline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class CarriedState:
    """State carried from one chunk to the next"""
    quotes: int = 0  # 0 outside a string, 1 inside
    last: Optional[int] = None  # previous byte, None at stream start

    @property
    def inside_string(self) -> bool:
        return self.quotes > 0


class TerminationCause(Enum):
    """Why the stream pump stopped"""
    END_OF_INPUT = "end_of_input"
    UPSTREAM_READ_ERROR = "upstream_read_error"
    DOWNSTREAM_BROKEN_PIPE = "downstream_broken_pipe"
    CANCELLATION_SIGNAL = "cancellation_signal"

    @property
    def should_flush(self) -> bool:
        """Flushing into a closed pipe would fail again, so skip it"""
        return self is not TerminationCause.DOWNSTREAM_BROKEN_PIPE
