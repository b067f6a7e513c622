"""
Shutdown Sequencer
==================

Runs the stream pump on a worker thread, turns OS signals into a
cancellation request, waits for the pump to finish its in-flight chunk and
flushes buffered output unless the reader has gone away.
"""

import logging
import queue
import signal
import threading
from typing import BinaryIO, Dict, List, Optional, Sequence

from base_classes import TerminationCause
from compaction.workers.cancellation import CancellationFlag
from compaction.workers.pump import StreamPump
from stream_errors import FlushError, StreamError

logger = logging.getLogger(__name__)


def _default_signals() -> List[signal.Signals]:
    names = ('SIGINT', 'SIGTERM', 'SIGPIPE')
    return [getattr(signal, name) for name in names if hasattr(signal, name)]


DEFAULT_SIGNALS = tuple(_default_signals())
JOIN_POLL_INTERVAL = 0.1  # seconds


class ShutdownSequencer:
    """Coordinates the signal listener, the pump thread and the final flush"""

    def __init__(self,
                 pump: StreamPump,
                 sink: BinaryIO,
                 cancellation: Optional[CancellationFlag] = None,
                 signals: Sequence[int] = DEFAULT_SIGNALS,
                 install_handlers: bool = True):
        """
        Initialize the sequencer.

        Args:
            pump: Pump to run; it must share `cancellation`
            sink: Stream flushed once the pump stops
            cancellation: Flag set on the first signal, defaults to the pump's
            signals: Signals that request a graceful stop
            install_handlers: Whether to install OS signal handlers at all
        """
        self.pump = pump
        self.sink = sink
        self.cancellation = cancellation or pump.cancellation
        self.signals = tuple(signals)
        self.install_handlers = install_handlers

        self.errors: List[StreamError] = []
        self.received_signal: Optional[int] = None

        # SimpleQueue.put is reentrant, so signal handlers may call it
        self._channel: "queue.SimpleQueue[Optional[int]]" = queue.SimpleQueue()
        self._original_handlers: Dict[int, object] = {}

    def _on_signal(self, signum, frame) -> None:
        self._channel.put(signum)

    def _install(self) -> None:
        if not self.install_handlers:
            return
        # signal.signal() only works on the main thread
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread, skipping signal handlers")
            return
        for signum in self.signals:
            self._original_handlers[signum] = signal.getsignal(signum)
            signal.signal(signum, self._on_signal)

    def _restore(self) -> None:
        for signum, handler in self._original_handlers.items():
            signal.signal(signum, handler)
        self._original_handlers.clear()

    def _listen(self) -> None:
        signum = self._channel.get()
        if signum is None:
            return
        self.received_signal = signum
        if self.cancellation.set():
            logger.info(f"Received {signal.Signals(signum).name}, stopping after the current chunk")

    def _run_pump(self) -> None:
        try:
            self.pump.run()
        except Exception as e:
            logger.exception(f"Stream pump failed: {e}")

    def _flush(self) -> None:
        try:
            self.sink.flush()
        except OSError as e:
            error = FlushError("error flushing to stdout", cause=e)
            logger.error(str(error), extra={'stream_error': error.log_context()})
            self.errors.append(error)

    def run(self) -> TerminationCause:
        """
        Run the pump to completion and perform the final flush.

        Returns:
            The pump's termination cause
        """
        listener = threading.Thread(target=self._listen, name="jc-signal-listener", daemon=True)
        pump_thread = threading.Thread(target=self._run_pump, name="jc-stream-pump", daemon=True)
        try:
            self._install()
            listener.start()
            pump_thread.start()
            # short joins let pending signal handlers run
            while pump_thread.is_alive():
                pump_thread.join(JOIN_POLL_INTERVAL)

            cause = self.pump.termination_cause
            if cause is None:
                # pump raised before choosing a cause
                cause = TerminationCause.UPSTREAM_READ_ERROR
            if cause.should_flush:
                self._flush()
            return cause
        finally:
            self._channel.put(None)
            if listener.is_alive():
                listener.join()
            self._restore()
