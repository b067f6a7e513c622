"""
JSON compaction modules.
"""

# Import pipeline stages
from .stages.whitespace import WhitespaceCompactor, compact_bytes, transform
from .workers.cancellation import CancellationFlag
from .workers.pump import StreamPump
from .workers.shutdown import ShutdownSequencer

__version__ = "1.0.0"

__all__ = [
    'WhitespaceCompactor',
    'compact_bytes',
    'transform',
    'CancellationFlag',
    'StreamPump',
    'ShutdownSequencer',
]
