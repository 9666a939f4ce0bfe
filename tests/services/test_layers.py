"""Tests for LayerService — layer and widget administration."""

from __future__ import annotations

from typing import Any

import anyio

from strata.infrastructure.site import Site
from strata.plugins import hookimpl
from strata.services.layers import LayerService
from strata.services.metadata_cache import LAYER_CHANGE_TOKEN
from strata.services.request import RequestInfo
from tests.conftest import add_layer, assign_widget


class _ChangeRecorder:
    def __init__(self) -> None:
        self.events: list[tuple[str, str, str]] = []

    @hookimpl
    def post_layer_change(self, kind: str, name: str, action: str) -> None:
        self.events.append((kind, name, action))


class TestSaveLayer:
    def test_create_then_update(self, site: Site) -> None:
        svc = LayerService(site)
        first = svc.save_layer("Always", rule="true")
        assert first.ok
        assert first.data == {"name": "Always", "rule": "true", "created": True}
        second = svc.save_layer("Always", rule="false")
        assert second.ok
        assert second.data["created"] is False
        assert site.store.get_layer("Always").rule == "false"

    def test_name_is_trimmed(self, site: Site) -> None:
        assert add_layer(site, "  Home  ", "true")["name"] == "Home"

    def test_empty_name_rejected(self, site: Site) -> None:
        result = LayerService(site).save_layer("   ")
        assert not result.ok
        assert result.error.code == "INVALID_INPUT"

    def test_rule_optional(self, site: Site) -> None:
        data = add_layer(site, "Disabled")
        assert data["rule"] is None

    def test_empty_rule_stored_as_none(self, site: Site) -> None:
        add_layer(site, "Disabled", "")
        assert site.store.get_layer("Disabled").rule is None

    def test_blank_rule_stored_as_none(self, site: Site) -> None:
        data = add_layer(site, "Blank", "   ")
        assert data["rule"] is None
        assert site.store.get_layer("Blank").rule is None

    def test_invalid_rule_rejected(self, site: Site) -> None:
        result = LayerService(site).save_layer("Broken", rule="is_homepage(")
        assert not result.ok
        assert result.error.code == "INVALID_RULE"
        assert site.store.get_layer("Broken") is None

    def test_unknown_function_is_accepted(self, site: Site) -> None:
        assert LayerService(site).save_layer("Later", rule="not_defined_yet()").ok

    def test_signals_change(self, site: Site) -> None:
        before = site.signal.epoch(LAYER_CHANGE_TOKEN)
        add_layer(site, "Always", "true")
        assert site.signal.epoch(LAYER_CHANGE_TOKEN) == before + 1

    def test_failed_save_does_not_signal(self, site: Site) -> None:
        LayerService(site).save_layer("Broken", rule="(")
        assert site.signal.epoch(LAYER_CHANGE_TOKEN) == 0


class TestRemoveLayer:
    def test_remove(self, site: Site) -> None:
        add_layer(site, "Always", "true")
        result = LayerService(site).remove_layer("Always")
        assert result.ok
        assert result.data == {"name": "Always", "stale_widgets": 0}
        assert result.warnings == []

    def test_missing(self, site: Site) -> None:
        result = LayerService(site).remove_layer("Nope")
        assert not result.ok
        assert result.error.code == "NOT_FOUND"

    def test_warns_about_stale_widgets(self, site: Site) -> None:
        add_layer(site, "Always", "true")
        assign_widget(site, "w1", layer="Always", zone="Footer")
        result = LayerService(site).remove_layer("Always")
        assert result.data["stale_widgets"] == 1
        assert any("still reference" in w for w in result.warnings)
        assert site.store.get_widget("w1") is not None


class TestListLayers:
    def test_counts_widgets(self, site: Site) -> None:
        add_layer(site, "A", "true")
        add_layer(site, "B")
        assign_widget(site, "w1", layer="A", zone="Footer")
        assign_widget(site, "w2", layer="A", zone="Header")
        result = LayerService(site).list_layers()
        assert result.ok
        assert result.data["count"] == 2
        counts = {item["name"]: item["widgets"] for item in result.data["items"]}
        assert counts == {"A": 2, "B": 0}


class TestWidgets:
    def test_assign_requires_existing_layer(self, site: Site) -> None:
        result = LayerService(site).assign_widget(
            "w1", content_type="HtmlWidget", layer="Nope", zone="Footer"
        )
        assert not result.ok
        assert result.error.code == "NOT_FOUND"

    def test_assign_requires_zone(self, site: Site) -> None:
        add_layer(site, "A", "true")
        result = LayerService(site).assign_widget("w1", content_type="HtmlWidget", layer="A", zone="  ")
        assert not result.ok
        assert result.error.code == "INVALID_INPUT"

    def test_assign_requires_content_type(self, site: Site) -> None:
        add_layer(site, "A", "true")
        result = LayerService(site).assign_widget("w1", content_type="", layer="A", zone="Footer")
        assert not result.ok
        assert result.error.code == "INVALID_INPUT"

    def test_assign_and_update(self, site: Site) -> None:
        add_layer(site, "A", "true")
        assert assign_widget(site, "w1", layer="A", zone="Footer")["created"] is True
        assert assign_widget(site, "w1", layer="A", zone="Header")["created"] is False
        assert site.store.get_widget("w1").zone == "Header"

    def test_list_marks_stale(self, site: Site) -> None:
        add_layer(site, "A", "true")
        assign_widget(site, "w1", layer="A", zone="Footer")
        assign_widget(site, "w2", layer="A", zone="Footer", published=False)
        LayerService(site).remove_layer("A")
        items = LayerService(site).list_widgets().data["items"]
        assert [(i["id"], i["stale"], i["published"]) for i in items] == [
            ("w1", True, True),
            ("w2", True, False),
        ]

    def test_list_published_only(self, site: Site) -> None:
        add_layer(site, "A", "true")
        assign_widget(site, "w1", layer="A", zone="Footer", published=False)
        assign_widget(site, "w2", layer="A", zone="Footer")
        result = LayerService(site).list_widgets(published_only=True)
        assert [i["id"] for i in result.data["items"]] == ["w2"]

    def test_publish_and_unpublish(self, site: Site) -> None:
        add_layer(site, "A", "true")
        assign_widget(site, "w1", layer="A", zone="Footer", published=False)
        svc = LayerService(site)
        assert svc.publish_widget("w1").ok
        assert site.store.get_widget("w1").published is True
        assert svc.publish_widget("w1", published=False).data == {"id": "w1", "published": False}

    def test_publish_missing(self, site: Site) -> None:
        result = LayerService(site).publish_widget("nope")
        assert not result.ok
        assert result.error.code == "NOT_FOUND"

    def test_remove(self, site: Site) -> None:
        add_layer(site, "A", "true")
        assign_widget(site, "w1", layer="A", zone="Footer")
        svc = LayerService(site)
        assert svc.remove_widget("w1").ok
        assert svc.remove_widget("w1").error.code == "NOT_FOUND"


class TestChangeNotification:
    def test_plugins_notified(self, site: Site) -> None:
        recorder = _ChangeRecorder()
        site.plugin_manager.register_plugin(recorder, name="recorder")
        add_layer(site, "A", "true")
        assign_widget(site, "w1", layer="A", zone="Footer")
        LayerService(site).publish_widget("w1", published=False)
        LayerService(site).remove_layer("A")
        assert recorder.events == [
            ("layer", "A", "created"),
            ("widget", "w1", "created"),
            ("widget", "w1", "unpublished"),
            ("layer", "A", "removed"),
        ]

    def test_plugin_failure_is_warning(self, site: Site) -> None:
        class Failing:
            @hookimpl
            def post_layer_change(self, kind: str, name: str, action: str) -> None:
                raise RuntimeError("webhook down")

        site.plugin_manager.register_plugin(Failing(), name="failing")
        result = LayerService(site).save_layer("A", rule="true")
        assert result.ok
        assert any("webhook down" in w for w in result.warnings)

    def test_mutations_reach_next_render(self, site: Site) -> None:
        add_layer(site, "A", "true")
        assign_widget(site, "w1", layer="A", zone="Footer")

        def placed() -> Any:
            return anyio.run(site.render, RequestInfo()).outcome.placed

        assert placed() == 1
        LayerService(site).publish_widget("w1", published=False)
        assert placed() == 0
        LayerService(site).publish_widget("w1")
        LayerService(site).save_layer("A", rule="false")
        assert placed() == 0
