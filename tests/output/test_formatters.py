"""Tests for output mode selection."""

from __future__ import annotations

import json

from strata.output.formatters import OutputSettings, format_result
from strata.services.result import ServiceResult


class TestFormatResult:
    def test_json(self) -> None:
        result = ServiceResult(ok=True, op="save_layer", data={"name": "A"})
        parsed = json.loads(format_result(result, settings=OutputSettings(json_output=True)))
        assert parsed["ok"] is True
        assert parsed["data"] == {"name": "A"}

    def test_quiet(self) -> None:
        result = ServiceResult(ok=True, op="save_layer")
        assert format_result(result, settings=OutputSettings(quiet=True)) == "OK: save_layer"

    def test_json_wins_over_quiet(self) -> None:
        result = ServiceResult(ok=True, op="x")
        output = format_result(result, settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(output)["op"] == "x"

    def test_default_is_rich(self) -> None:
        assert "OK" in format_result(ServiceResult(ok=True, op="x"))
