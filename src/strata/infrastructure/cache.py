"""MemoryCache — process-wide async cache with change-token expiration.

Entries carry zero or more :class:`ChangeToken` dependencies. An entry
whose token has changed is never returned: reads treat it as a miss and
evict it. Concurrent misses on one key converge on a single factory run.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import anyio

if TYPE_CHECKING:
    from strata.infrastructure.signal import ChangeToken

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass
class CacheEntry:
    """A cached value and the tokens that expire it."""

    key: str
    value: Any = None
    expiration_tokens: list[ChangeToken] = field(default_factory=list)

    def add_expiration_token(self, token: ChangeToken) -> None:
        self.expiration_tokens.append(token)

    @property
    def is_expired(self) -> bool:
        return any(token.has_changed for token in self.expiration_tokens)


class MemoryCache:
    """Key-value cache shared by every request in the process."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._locks: dict[str, anyio.Lock] = {}

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value for *key*, evicting it if expired."""
        entry = self._entries.get(key)
        if entry is None:
            return default
        if entry.is_expired:
            logger.debug("Cache entry %s expired", key)
            self._entries.pop(key, None)
            return default
        return entry.value

    def set(self, key: str, value: Any, tokens: list[ChangeToken] | None = None) -> None:
        self._entries[key] = CacheEntry(key=key, value=value, expiration_tokens=list(tokens or []))

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    async def get_or_create(
        self,
        key: str,
        factory: Callable[[CacheEntry], Awaitable[Any]],
    ) -> Any:
        """Return the cached value for *key*, building it with *factory* on a miss.

        The factory receives the new :class:`CacheEntry` so it can attach
        expiration tokens before doing any work. Factory exceptions
        propagate and leave nothing cached.
        """
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            return value

        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = anyio.Lock()

        async with lock:
            # Another task may have populated the entry while we waited.
            value = self.get(key, _MISSING)
            if value is not _MISSING:
                return value

            entry = CacheEntry(key=key)
            entry.value = await factory(entry)
            self._entries[key] = entry
            logger.debug("Cache entry %s populated", key)
            return entry.value
