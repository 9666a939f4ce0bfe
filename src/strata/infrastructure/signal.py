"""Change signals used purely as cache-invalidation dependencies.

Each named change category has a monotonically advancing epoch. A
:class:`ChangeToken` remembers the epoch it was issued at and reports
``has_changed`` once the category has been signalled since.
"""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class ChangeToken:
    """Expiration token bound to one change category."""

    __slots__ = ("_signal", "epoch", "key")

    def __init__(self, signal: Signal, key: str, epoch: int) -> None:
        self._signal = signal
        self.key = key
        self.epoch = epoch

    @property
    def has_changed(self) -> bool:
        return self._signal.epoch(self.key) > self.epoch

    def __repr__(self) -> str:
        return f"ChangeToken({self.key!r}, epoch={self.epoch}, changed={self.has_changed})"


class Signal:
    """Process-wide registry of change categories."""

    def __init__(self) -> None:
        self._epochs: dict[str, int] = {}
        self._lock = threading.Lock()

    def epoch(self, key: str) -> int:
        with self._lock:
            return self._epochs.get(key, 0)

    def get_token(self, key: str) -> ChangeToken:
        """Return a token that expires the next time *key* is signalled."""
        return ChangeToken(self, key, self.epoch(key))

    def signal_token(self, key: str) -> int:
        """Advance *key*'s epoch, expiring every token issued before now.

        Returns the new epoch.
        """
        with self._lock:
            epoch = self._epochs.get(key, 0) + 1
            self._epochs[key] = epoch
        logger.debug("Signalled %s (epoch %d)", key, epoch)
        return epoch
