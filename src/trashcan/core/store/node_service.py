# src/trashcan/core/store/node_service.py
"""SQLAlchemy implementation of the NodeService protocol.

A SqlNodeService wraps one Connection that already has a transaction open
(see ArchiveDB.transaction); it never commits or rolls back itself.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import Connection, and_, delete, func, select

from trashcan.contracts.errors import NodeNotFoundError, StoreNotFoundError
from trashcan.contracts.identity import ChildAssociationRef, NodeRef, StoreRef
from trashcan.core.security import require_system
from trashcan.core.store.schema import (
    child_assocs_table,
    node_properties_table,
    nodes_table,
    stores_table,
)


class SqlNodeService:
    """Node store access bound to a single transaction."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def get_root_node(self, store_ref: StoreRef) -> NodeRef:
        row = self._conn.execute(
            select(stores_table.c.root_node_id).where(stores_table.c.store_ref == str(store_ref))
        ).first()
        if row is None:
            raise StoreNotFoundError(store_ref)
        return NodeRef(store_ref=store_ref, node_id=row.root_node_id)

    def get_child_assocs(
        self,
        parent: NodeRef,
        assoc_type: str,
        *,
        max_results: int | None = None,
    ) -> list[ChildAssociationRef]:
        query = (
            select(
                child_assocs_table.c.child_node_id,
                child_assocs_table.c.assoc_type,
                child_assocs_table.c.qname,
                nodes_table.c.store_ref,
            )
            .select_from(child_assocs_table.join(nodes_table, child_assocs_table.c.child_node_id == nodes_table.c.node_id))
            .where(
                and_(
                    child_assocs_table.c.parent_node_id == parent.node_id,
                    child_assocs_table.c.assoc_type == assoc_type,
                )
            )
            # assoc_id breaks ties between rows written with the same index
            .order_by(child_assocs_table.c.assoc_index, child_assocs_table.c.assoc_id)
        )
        if max_results is not None:
            query = query.limit(max_results)

        assocs: list[ChildAssociationRef] = []
        for position, row in enumerate(self._conn.execute(query)):
            assocs.append(
                ChildAssociationRef(
                    parent_ref=parent,
                    child_ref=NodeRef(store_ref=StoreRef.parse(row.store_ref), node_id=row.child_node_id),
                    assoc_type=row.assoc_type,
                    qname=row.qname,
                    nth_sibling=position,
                )
            )
        return assocs

    def count_child_assocs(self, parent: NodeRef, assoc_type: str) -> int:
        query = (
            select(func.count())
            .select_from(child_assocs_table)
            .where(
                and_(
                    child_assocs_table.c.parent_node_id == parent.node_id,
                    child_assocs_table.c.assoc_type == assoc_type,
                )
            )
        )
        return int(self._conn.execute(query).scalar_one())

    def get_property(self, node: NodeRef, name: str) -> Any:
        row = self._conn.execute(
            select(node_properties_table.c.string_value, node_properties_table.c.datetime_value).where(
                and_(
                    node_properties_table.c.node_id == node.node_id,
                    node_properties_table.c.name == name,
                )
            )
        ).first()
        if row is None:
            return None
        if row.datetime_value is not None:
            return _as_utc(row.datetime_value)
        return row.string_value

    def delete_node(self, node: NodeRef) -> None:
        require_system("delete_node")

        exists = self._conn.execute(select(nodes_table.c.node_id).where(nodes_table.c.node_id == node.node_id)).first()
        if exists is None:
            raise NodeNotFoundError(node)

        subtree = self._collect_primary_subtree(node.node_id)

        # Children first so foreign keys hold at every statement
        for node_ids in _chunks(list(reversed(subtree)), 500):
            self._conn.execute(
                delete(child_assocs_table).where(
                    child_assocs_table.c.parent_node_id.in_(node_ids) | child_assocs_table.c.child_node_id.in_(node_ids)
                )
            )
            self._conn.execute(delete(node_properties_table).where(node_properties_table.c.node_id.in_(node_ids)))
            self._conn.execute(delete(nodes_table).where(nodes_table.c.node_id.in_(node_ids)))

    def _collect_primary_subtree(self, node_id: str) -> list[str]:
        """Return node_id followed by all primary descendants, breadth first."""
        collected = [node_id]
        seen = {node_id}
        frontier = [node_id]
        while frontier:
            rows = self._conn.execute(
                select(child_assocs_table.c.child_node_id).where(
                    and_(
                        child_assocs_table.c.parent_node_id.in_(frontier),
                        child_assocs_table.c.is_primary.is_(True),
                    )
                )
            )
            frontier = [row.child_node_id for row in rows if row.child_node_id not in seen]
            seen.update(frontier)
            collected.extend(frontier)
        return collected


def _as_utc(value: datetime) -> datetime:
    """SQLite returns naive datetimes; stored values are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _chunks(items: list[str], size: int) -> list[list[str]]:
    return [items[i : i + size] for i in range(0, len(items), size)]
