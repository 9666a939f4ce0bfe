"""MetadataCache — cross-request snapshot of widgets and layers.

The snapshot lives in the process-wide :class:`MemoryCache` under a fixed
key and expires when :data:`LAYER_CHANGE_TOKEN` is signalled. Whoever
mutates layers or widget assignments advances that token; this module
only listens.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from strata.domain.layers import MetadataSnapshot

if TYPE_CHECKING:
    from strata.infrastructure.cache import CacheEntry, MemoryCache
    from strata.infrastructure.signal import Signal
    from strata.services.request import LayerStore

logger = logging.getLogger(__name__)

LAYER_WIDGETS_CACHE_KEY = "strata.layers:AllWidgets"
LAYER_CHANGE_TOKEN = "strata.layers:LayerMetadata"


class MetadataCache:
    """Serve the current :class:`MetadataSnapshot`, recomputing after a change."""

    def __init__(self, memory_cache: MemoryCache, signal: Signal, store: LayerStore) -> None:
        self._memory_cache = memory_cache
        self._signal = signal
        self._store = store

    async def get(self) -> MetadataSnapshot:
        return await self._memory_cache.get_or_create(LAYER_WIDGETS_CACHE_KEY, self._load)

    async def _load(self, entry: CacheEntry) -> MetadataSnapshot:
        # Take the token before querying: a change raised mid-load must
        # expire what we are about to store.
        entry.add_expiration_token(self._signal.get_token(LAYER_CHANGE_TOKEN))
        widgets = await self._store.get_published_widgets()
        layers = await self._store.get_layers()
        snapshot = MetadataSnapshot.build(widgets, layers)
        logger.debug(
            "Loaded layer metadata: %d widgets, %d layers",
            len(snapshot.widgets),
            len(snapshot.layers),
        )
        return snapshot
