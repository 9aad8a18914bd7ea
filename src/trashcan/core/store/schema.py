# src/trashcan/core/store/schema.py
"""SQLAlchemy table definitions for the node store.

Uses SQLAlchemy Core (not ORM) for explicit control over queries
and compatibility with multiple database backends.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
)

# Shared metadata for all tables
metadata = MetaData()

# === Stores ===

stores_table = Table(
    "stores",
    metadata,
    Column("store_ref", String(255), primary_key=True),  # e.g. "archive://SpacesStore"
    Column("root_node_id", String(64), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

# === Nodes ===

nodes_table = Table(
    "nodes",
    metadata,
    Column("node_id", String(64), primary_key=True),
    Column("store_ref", String(255), ForeignKey("stores.store_ref"), nullable=False),
    Column("node_type", String(128), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

Index("ix_nodes_store", nodes_table.c.store_ref)

# === Child Associations ===
# Children of a parent are ordered by (assoc_index, assoc_id). The archival
# process appends each new child with the next assoc_index, so iteration
# order is archival order.

child_assocs_table = Table(
    "child_assocs",
    metadata,
    Column("assoc_id", Integer, primary_key=True, autoincrement=True),
    Column("parent_node_id", String(64), ForeignKey("nodes.node_id"), nullable=False),
    Column("child_node_id", String(64), ForeignKey("nodes.node_id"), nullable=False),
    Column("assoc_type", String(128), nullable=False),
    Column("qname", String(255), nullable=False),
    Column("is_primary", Boolean, nullable=False, default=True),
    Column("assoc_index", Integer, nullable=False),
)

Index(
    "ix_child_assocs_parent_order",
    child_assocs_table.c.parent_node_id,
    child_assocs_table.c.assoc_type,
    child_assocs_table.c.assoc_index,
)
Index("ix_child_assocs_child", child_assocs_table.c.child_node_id)

# === Node Properties ===
# One typed value column is set per row; the other stays NULL.

node_properties_table = Table(
    "node_properties",
    metadata,
    Column("node_id", String(64), ForeignKey("nodes.node_id"), nullable=False),
    Column("name", String(128), nullable=False),
    Column("string_value", Text),
    Column("datetime_value", DateTime(timezone=True)),
    PrimaryKeyConstraint("node_id", "name"),
)
