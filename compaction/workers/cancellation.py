"""
Cancellation flag shared by the signal listener and the stream pump.
"""

import threading


class CancellationFlag:
    """One-way stop flag; every access holds the lock"""

    def __init__(self):
        self._lock = threading.Lock()
        self._cancelled = False

    def is_set(self) -> bool:
        with self._lock:
            return self._cancelled

    def set(self) -> bool:
        """
        Request cancellation.

        Returns:
            True if this call flipped the flag, False if it was already set
        """
        with self._lock:
            if self._cancelled:
                return False
            self._cancelled = True
            return True

    def __repr__(self) -> str:
        return f"CancellationFlag(cancelled={self.is_set()})"
