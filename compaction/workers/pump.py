"""
Stream Pump
===========

Drives the whitespace stage over successive chunks read from a source and
writes the results to a sink until the input ends, an error stops it, or
cancellation is requested.
"""

import logging
import select
import time
from typing import BinaryIO, List, Optional

from base_classes import CarriedState, TerminationCause
from compaction.stages.whitespace import transform
from compaction.workers.cancellation import CancellationFlag
from compactor_configs import DEFAULT_CHUNK_SIZE
from stream_errors import (
    StreamError, UpstreamReadError, DownstreamWriteError,
    DownstreamClosedError, is_broken_pipe
)
from stream_monitoring import StreamMonitor

logger = logging.getLogger(__name__)

RETRY_INTERVAL = 0.05  # seconds to wait when a non-blocking source has no data


class StreamPump:
    """Single-threaded read/transform/write loop with cooperative cancellation"""

    def __init__(self,
                 source: BinaryIO,
                 sink: BinaryIO,
                 cancellation: CancellationFlag,
                 chunk_size: int = DEFAULT_CHUNK_SIZE,
                 monitor: Optional[StreamMonitor] = None):
        """
        Initialize the stream pump.

        Args:
            source: Binary stream to read from
            sink: Binary stream to write to; flushing is left to the caller
            cancellation: Flag polled once per chunk
            chunk_size: Size of the reusable read buffer
            monitor: Optional monitor receiving per-chunk counts
        """
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")

        self.source = source
        self.sink = sink
        self.cancellation = cancellation
        self.chunk_size = chunk_size
        self.monitor = monitor

        self.state = CarriedState()
        self.termination_cause: Optional[TerminationCause] = None
        self.errors: List[StreamError] = []

        self._buffer = bytearray(chunk_size)
        self._view = memoryview(self._buffer)

    def _read_chunk(self) -> Optional[int]:
        """
        Read into the reusable buffer.

        Returns:
            Number of bytes read, 0 at end of input, or None when a
            non-blocking source has nothing yet
        """
        readinto = getattr(self.source, 'readinto1', None) or getattr(self.source, 'readinto', None)
        if readinto is not None:
            return readinto(self._view)

        read = getattr(self.source, 'read1', None) or self.source.read
        data = read(self.chunk_size)
        if data is None:
            return None
        n = len(data)
        self._buffer[:n] = data
        return n

    def _wait_for_input(self) -> None:
        """Block briefly until the source may be readable again"""
        try:
            fd = self.source.fileno()
        except (AttributeError, OSError, ValueError):
            time.sleep(RETRY_INTERVAL)
            return
        select.select([fd], [], [], RETRY_INTERVAL)

    def _record(self, error: StreamError) -> None:
        self.errors.append(error)
        if self.monitor:
            self.monitor.record_error(error)

    def run(self) -> TerminationCause:
        """
        Pump the source into the sink.

        Cancellation is checked before each read and again once the read
        returns; a chunk read after cancellation is dropped unwritten.

        Returns:
            The reason the loop stopped
        """
        eof = False
        broken_pipe = False
        cause = TerminationCause.END_OF_INPUT

        while not eof and not broken_pipe:
            if self.cancellation.is_set():
                cause = TerminationCause.CANCELLATION_SIGNAL
                break

            try:
                n = self._read_chunk()
            except BlockingIOError:
                n = None
            except OSError as e:
                error = UpstreamReadError("error reading from stdin", cause=e,
                                          details={'chunk_size': self.chunk_size})
                logger.error(str(error), extra={'stream_error': error.log_context()})
                self._record(error)
                cause = TerminationCause.UPSTREAM_READ_ERROR
                break

            if n is None:
                self._wait_for_input()
                continue
            if n == 0:
                eof = True

            if self.cancellation.is_set():
                if n:
                    logger.debug(f"Dropping {n} bytes read after cancellation")
                cause = TerminationCause.CANCELLATION_SIGNAL
                break

            if n > 0:
                chunk = self._view[:n]
                output, state = transform(chunk, self.state)
                try:
                    self.sink.write(output)
                except OSError as e:
                    if is_broken_pipe(e):
                        self._record(DownstreamClosedError("downstream reader closed the pipe", cause=e))
                        logger.debug("Output closed by reader, stopping without flush")
                        cause = TerminationCause.DOWNSTREAM_BROKEN_PIPE
                        broken_pipe = True
                        break
                    error = DownstreamWriteError("error writing to stdout", cause=e,
                                                 details={'bytes': len(output)})
                    logger.error(str(error), extra={'stream_error': error.log_context()})
                    self._record(error)
                self.state = state
                if self.monitor:
                    self.monitor.record_chunk(n, len(output))

        self.termination_cause = cause
        if self.state.inside_string and cause is TerminationCause.END_OF_INPUT:
            logger.debug("Input ended inside a quoted string")
        logger.debug(f"Stream pump stopped: {cause.value}")
        return cause
