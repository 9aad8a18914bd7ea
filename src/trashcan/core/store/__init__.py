# src/trashcan/core/store/__init__.py
"""Relational node store backing the archive.

SQLAlchemy Core tables, connection management and the NodeService
implementation used by the cleaner.
"""

from trashcan.core.store.database import ArchiveDB
from trashcan.core.store.node_service import SqlNodeService
from trashcan.core.store.schema import (
    child_assocs_table,
    metadata,
    node_properties_table,
    nodes_table,
    stores_table,
)

__all__ = [
    "ArchiveDB",
    "SqlNodeService",
    "child_assocs_table",
    "metadata",
    "node_properties_table",
    "nodes_table",
    "stores_table",
]
