"""
Stream Errors for the JSON Compactor
====================================

Error taxonomy for the read/transform/write loop. None of these are raised
out of the pump; they are recorded and logged so the process always exits
cleanly.
"""

import errno
import time
import traceback
from typing import Any, Dict, Optional


class StreamError(Exception):
    """Base class for errors observed while pumping a stream"""

    error_code: str = "stream"

    def __init__(self, message: str, cause: Optional[Exception] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize a stream error.

        Args:
            message: Error description
            cause: Original exception that caused this error
            details: Additional error context
        """
        super().__init__(message)
        self.cause = cause
        self.details = details or {}
        self.timestamp = time.time()
        self.traceback = traceback.format_exc() if cause else None

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.cause:
            return f"{base_msg}: {self.cause}"
        return base_msg

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(message={super().__str__()!r}, "
                f"cause={self.cause!r}, details={self.details!r})")

    def log_context(self) -> Dict[str, Any]:
        """Get error context for structured logging"""
        return {
            'error_type': type(self).__name__,
            'error_code': self.error_code,
            'message': str(self),
            'timestamp': self.timestamp,
            'details': self.details,
            'cause': str(self.cause) if self.cause else None,
            'traceback': self.traceback
        }


class UpstreamReadError(StreamError):
    """Reading from the input failed for a reason other than end-of-input"""
    error_code = "upstream_read"


class DownstreamWriteError(StreamError):
    """Writing to the output failed; the pump keeps going"""
    error_code = "downstream_write"


class DownstreamClosedError(StreamError):
    """The output reader closed its end of the pipe"""
    error_code = "broken_pipe"


class FlushError(StreamError):
    """Final flush of buffered output failed"""
    error_code = "flush"


def is_broken_pipe(exc: BaseException) -> bool:
    """Check whether a write failure means the downstream reader went away"""
    if isinstance(exc, BrokenPipeError):
        return True
    return isinstance(exc, OSError) and exc.errno == errno.EPIPE
