"""
Stages for the JSON compaction system.
"""

from .whitespace import WhitespaceCompactor, compact_bytes, transform

__all__ = [
    'WhitespaceCompactor',
    'compact_bytes',
    'transform',
]
