"""SqlLayerStore — layer and widget persistence over SQLAlchemy Core.

Reads used by the rendering pipeline are async and run the blocking
SQLite queries on a worker thread. Writes are synchronous; they are
issued by :class:`~strata.services.layers.LayerService`, which owns the
change signal. The store never raises the signal itself.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import anyio
from sqlalchemy import delete, insert, select, update

from strata.domain.layers import Layer, WidgetAssignment
from strata.infrastructure.database.schema import layers, widgets
from strata.services._helpers import now_iso

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


def _layer_from_row(row: Row[Any]) -> Layer:
    return Layer(name=row.name, rule=row.rule, description=row.description or "")


def _widget_from_row(row: Row[Any]) -> WidgetAssignment:
    return WidgetAssignment(
        content_item_id=row.content_item_id,
        content_type=row.content_type,
        layer=row.layer,
        zone=row.zone,
        display_text=row.display_text or "",
        body=row.body or "",
        published=bool(row.published),
    )


class SqlLayerStore:
    """Layer/widget store backed by the site database."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    # ------------------------------------------------------------------
    # Async reads (pipeline)
    # ------------------------------------------------------------------

    async def get_layers(self) -> list[Layer]:
        return await anyio.to_thread.run_sync(self.list_layers)

    async def get_published_widgets(self) -> list[WidgetAssignment]:
        return await anyio.to_thread.run_sync(self.list_widgets, True)

    # ------------------------------------------------------------------
    # Sync reads
    # ------------------------------------------------------------------

    def list_layers(self) -> list[Layer]:
        with self._engine.connect() as conn:
            rows = conn.execute(select(layers).order_by(layers.c.name)).fetchall()
        return [_layer_from_row(row) for row in rows]

    def list_widgets(self, published_only: bool = False) -> list[WidgetAssignment]:
        """Return widgets in store (insertion) order."""
        stmt = select(widgets).order_by(widgets.c.id)
        if published_only:
            stmt = stmt.where(widgets.c.published == 1)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_widget_from_row(row) for row in rows]

    def get_layer(self, name: str) -> Layer | None:
        with self._engine.connect() as conn:
            row = conn.execute(select(layers).where(layers.c.name == name)).first()
        return _layer_from_row(row) if row is not None else None

    def get_widget(self, content_item_id: str) -> WidgetAssignment | None:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(widgets).where(widgets.c.content_item_id == content_item_id)
            ).first()
        return _widget_from_row(row) if row is not None else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save_layer(self, layer: Layer) -> bool:
        """Insert or update *layer*. Returns True if it was created."""
        now = now_iso()
        values = {"rule": layer.rule, "description": layer.description, "modified": now}
        with self._engine.begin() as conn:
            result = conn.execute(update(layers).where(layers.c.name == layer.name).values(**values))
            if result.rowcount:
                return False
            conn.execute(insert(layers).values(name=layer.name, created=now, **values))
        return True

    def delete_layer(self, name: str) -> bool:
        with self._engine.begin() as conn:
            result = conn.execute(delete(layers).where(layers.c.name == name))
        return bool(result.rowcount)

    def save_widget(self, widget: WidgetAssignment) -> bool:
        """Insert or update *widget*, keeping an existing widget's position.

        Returns True if it was created.
        """
        now = now_iso()
        values = {
            "content_type": widget.content_type,
            "layer": widget.layer,
            "zone": widget.zone,
            "display_text": widget.display_text,
            "body": widget.body,
            "published": int(widget.published),
            "modified": now,
        }
        with self._engine.begin() as conn:
            result = conn.execute(
                update(widgets)
                .where(widgets.c.content_item_id == widget.content_item_id)
                .values(**values)
            )
            if result.rowcount:
                return False
            conn.execute(
                insert(widgets).values(
                    content_item_id=widget.content_item_id, created=now, **values
                )
            )
        return True

    def set_published(self, content_item_id: str, published: bool) -> bool:
        with self._engine.begin() as conn:
            result = conn.execute(
                update(widgets)
                .where(widgets.c.content_item_id == content_item_id)
                .values(published=int(published), modified=now_iso())
            )
        return bool(result.rowcount)

    def delete_widget(self, content_item_id: str) -> bool:
        with self._engine.begin() as conn:
            result = conn.execute(
                delete(widgets).where(widgets.c.content_item_id == content_item_id)
            )
        return bool(result.rowcount)
