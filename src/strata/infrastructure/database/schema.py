"""SQLAlchemy Core table definitions for the strata database.

``widgets.id`` is an autoincrement column: it defines the store order in
which widgets are evaluated and placed.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

layers = Table(
    "layers",
    metadata,
    Column("name", Text, primary_key=True),
    Column("rule", Text),
    Column("description", Text, nullable=False, default="", server_default=""),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

widgets = Table(
    "widgets",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("content_item_id", Text, nullable=False, unique=True),
    Column("content_type", Text, nullable=False),
    # Not a foreign key: a widget may outlive its layer (stale reference).
    Column("layer", Text, nullable=False),
    Column("zone", Text, nullable=False),
    Column("display_text", Text, nullable=False, default="", server_default=""),
    Column("body", Text, nullable=False, default="", server_default=""),
    Column("published", Integer, nullable=False, default=1, server_default="1"),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

Index("ix_widgets_published", widgets.c.published)
Index("ix_widgets_layer", widgets.c.layer)
