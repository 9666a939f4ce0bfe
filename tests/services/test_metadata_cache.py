"""Tests for the cross-request metadata snapshot cache."""

from __future__ import annotations

import anyio

from strata.domain.layers import Layer
from strata.infrastructure.cache import MemoryCache
from strata.infrastructure.signal import Signal
from strata.services.metadata_cache import (
    LAYER_CHANGE_TOKEN,
    LAYER_WIDGETS_CACHE_KEY,
    MetadataCache,
)
from tests.conftest import FakeLayerStore, widget


def _store() -> FakeLayerStore:
    return FakeLayerStore(
        layers=[Layer(name="Always", rule="true")],
        widgets=[widget("w1", "Always", "Footer"), widget("w2", "Always", "Footer", published=False)],
    )


class TestMetadataCache:
    def test_loads_published_widgets_and_layers(self) -> None:
        snapshot = anyio.run(MetadataCache(MemoryCache(), Signal(), _store()).get)
        assert [w.content_item_id for w in snapshot.widgets] == ["w1"]
        assert set(snapshot.layers) == {"Always"}

    def test_second_get_is_served_from_cache(self) -> None:
        store = _store()
        cache = MetadataCache(MemoryCache(), Signal(), store)
        first = anyio.run(cache.get)
        second = anyio.run(cache.get)
        assert second is first
        assert store.widget_queries == 1
        assert store.layer_queries == 1

    def test_shared_across_cache_instances(self) -> None:
        store, memory, signal = _store(), MemoryCache(), Signal()
        first = anyio.run(MetadataCache(memory, signal, store).get)
        assert anyio.run(MetadataCache(memory, signal, store).get) is first
        assert LAYER_WIDGETS_CACHE_KEY in memory

    def test_signal_forces_reload(self) -> None:
        store, signal = _store(), Signal()
        cache = MetadataCache(MemoryCache(), signal, store)
        first = anyio.run(cache.get)
        store.layers.append(Layer(name="New"))
        signal.signal_token(LAYER_CHANGE_TOKEN)

        second = anyio.run(cache.get)
        assert second is not first
        assert set(second.layers) == {"Always", "New"}
        assert store.widget_queries == 2

    def test_change_during_load_expires_snapshot(self) -> None:
        signal = Signal()

        class SignallingStore(FakeLayerStore):
            async def get_layers(self) -> list[Layer]:
                signal.signal_token(LAYER_CHANGE_TOKEN)
                return await super().get_layers()

        store = SignallingStore(layers=[Layer(name="Always")])
        memory = MemoryCache()
        anyio.run(MetadataCache(memory, signal, store).get)
        assert LAYER_WIDGETS_CACHE_KEY not in memory
