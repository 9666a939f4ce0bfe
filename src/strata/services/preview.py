"""PreviewService — run the layering hook for a simulated request.

Lets an author see which widgets a given request would receive without
a web server. Pipeline faults, which fail a real response, are reported
here as ServiceResult errors.
"""

from __future__ import annotations

import functools

import anyio

from strata.domain.errors import LayoutError, RuleEvaluationError
from strata.domain.shapes import WidgetWrapper
from strata.services.base import BaseService
from strata.services.contracts import PreviewData, dump_validated
from strata.services.request import RequestInfo, ResultKind
from strata.services.result import ServiceResult
from strata.services.telemetry import traced


class PreviewService(BaseService):
    """Preview widget placement for one request."""

    @traced
    def preview(
        self,
        path: str,
        *,
        result: ResultKind = ResultKind.VIEW,
        is_admin: bool = False,
        theme: str | None = None,
        user: str | None = None,
        roles: tuple[str, ...] = (),
        culture: str = "en-US",
    ) -> ServiceResult:
        op = "preview"
        request = RequestInfo(path=path, user=user, roles=roles, culture=culture)
        try:
            rendered = anyio.run(
                functools.partial(
                    self._site.render, request, result=result, is_admin=is_admin, theme=theme
                )
            )
        except RuleEvaluationError as exc:
            return ServiceResult.failure(op, "RULE_ERROR", str(exc), layer=exc.layer, rule=exc.rule)
        except LayoutError as exc:
            return ServiceResult.failure(op, "LAYOUT_ERROR", str(exc))

        items = []
        zones: dict[str, int] = {}
        for zone_name, zone in rendered.layout.zones.items():
            zones[zone_name] = len(zone.items)
            for position, shape in enumerate(zone.items, start=1):
                if not isinstance(shape, WidgetWrapper) or shape.content is None:
                    continue
                items.append(
                    {
                        "zone": zone_name,
                        "position": position,
                        "id": shape.widget.content_item_id,
                        "type": shape.widget.content_type,
                        "classes": shape.content.classes,
                        "alternates": shape.metadata.alternates,
                    }
                )

        outcome = rendered.outcome
        data = dump_validated(
            PreviewData,
            {
                "path": path,
                "result": str(result),
                "layered": outcome.ran,
                "evaluations": outcome.evaluations,
                "placed": outcome.placed,
                "skipped_stale": outcome.skipped_stale,
                "zones": zones,
                "items": items,
            },
        )
        warnings: list[str] = []
        if outcome.skipped_stale:
            warnings.append(f"{outcome.skipped_stale} widget(s) reference missing layers")
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
