"""
Worker components for pumping a stream and shutting it down cleanly.
"""

from .cancellation import CancellationFlag
from .pump import StreamPump
from .shutdown import ShutdownSequencer, DEFAULT_SIGNALS

__all__ = [
    'CancellationFlag',
    'StreamPump',
    'ShutdownSequencer',
    'DEFAULT_SIGNALS',
]
