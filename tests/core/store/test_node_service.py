# tests/core/store/test_node_service.py
"""Tests for SqlNodeService."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TypeVar

import pytest

from tests.fixtures import ArchiveBuilder
from trashcan.contracts import (
    ASSOC_CHILDREN,
    PROP_ARCHIVED_DATE,
    NodeNotFoundError,
    NodeRef,
    NodeService,
    PrivilegeError,
    StoreNotFoundError,
    StoreRef,
)
from trashcan.core.security import system_privileges
from trashcan.core.store import ArchiveDB, SqlNodeService, child_assocs_table

T = TypeVar("T")

ARCHIVED = datetime(2024, 3, 1, 8, 30, tzinfo=UTC)


def _read(db: ArchiveDB, work: Callable[[SqlNodeService], T]) -> T:
    with db.transaction(read_only=True) as conn:
        return work(SqlNodeService(conn))


class TestLookups:
    """Root, children, counts and properties."""

    def test_satisfies_protocol(self, db: ArchiveDB) -> None:
        assert _read(db, lambda service: isinstance(service, NodeService))

    def test_get_root_node(self, archive: ArchiveBuilder, db: ArchiveDB) -> None:
        assert _read(db, lambda service: service.get_root_node(archive.store_ref)) == archive.root

    def test_get_root_node_unknown_store(self, archive: ArchiveBuilder, db: ArchiveDB) -> None:
        with pytest.raises(StoreNotFoundError):
            _read(db, lambda service: service.get_root_node(StoreRef.parse("archive://Elsewhere")))

    def test_children_in_archival_order(self, archive: ArchiveBuilder, db: ArchiveDB) -> None:
        refs = [archive.archive(ARCHIVED, name=f"n{i}") for i in range(4)]

        assocs = _read(db, lambda service: service.get_child_assocs(archive.root, ASSOC_CHILDREN))

        assert [a.child_ref for a in assocs] == refs
        assert [a.nth_sibling for a in assocs] == [0, 1, 2, 3]
        assert all(a.parent_ref == archive.root for a in assocs)
        assert all(a.assoc_type == ASSOC_CHILDREN for a in assocs)

    def test_max_results_limits_to_first_children(self, archive: ArchiveBuilder, db: ArchiveDB) -> None:
        for i in range(5):
            archive.archive(ARCHIVED, name=f"n{i}")

        assocs = _read(db, lambda service: service.get_child_assocs(archive.root, ASSOC_CHILDREN, max_results=2))

        assert [a.child_ref.node_id for a in assocs] == ["n0", "n1"]

    def test_other_assoc_types_are_excluded(self, archive: ArchiveBuilder, db: ArchiveDB) -> None:
        archive.archive(ARCHIVED, name="archived")
        archive.add_child(archive.root, name="other", assoc_type="cm:contains")

        assocs = _read(db, lambda service: service.get_child_assocs(archive.root, ASSOC_CHILDREN))

        assert [a.child_ref.node_id for a in assocs] == ["archived"]
        assert _read(db, lambda service: service.count_child_assocs(archive.root, ASSOC_CHILDREN)) == 1

    def test_count_child_assocs(self, archive: ArchiveBuilder, db: ArchiveDB) -> None:
        assert _read(db, lambda service: service.count_child_assocs(archive.root, ASSOC_CHILDREN)) == 0

        for i in range(3):
            archive.archive(ARCHIVED, name=f"n{i}")

        assert _read(db, lambda service: service.count_child_assocs(archive.root, ASSOC_CHILDREN)) == 3

    def test_datetime_property_is_utc_aware(self, archive: ArchiveBuilder, db: ArchiveDB) -> None:
        node = archive.archive(ARCHIVED)

        value = _read(db, lambda service: service.get_property(node, PROP_ARCHIVED_DATE))

        assert value == ARCHIVED
        assert value.utcoffset() == timedelta(0)

    def test_string_property(self, archive: ArchiveBuilder, db: ArchiveDB) -> None:
        node = archive.archive(ARCHIVED, name="doc")

        assert _read(db, lambda service: service.get_property(node, "cm:name")) == "doc.txt"

    def test_missing_property_is_none(self, archive: ArchiveBuilder, db: ArchiveDB) -> None:
        node = archive.archive(None)

        assert _read(db, lambda service: service.get_property(node, PROP_ARCHIVED_DATE)) is None


class TestDeleteNode:
    """Permanent deletion."""

    def test_requires_system_privileges(self, archive: ArchiveBuilder, db: ArchiveDB) -> None:
        node = archive.archive(ARCHIVED)

        with pytest.raises(PrivilegeError):
            _read(db, lambda service: service.delete_node(node))
        assert archive.exists(node)

    def test_missing_node_raises(self, archive: ArchiveBuilder, db: ArchiveDB) -> None:
        missing = NodeRef(store_ref=archive.store_ref, node_id="never-existed")

        with system_privileges(), pytest.raises(NodeNotFoundError):
            _read(db, lambda service: service.delete_node(missing))

    def test_deletes_node_and_primary_subtree(self, archive: ArchiveBuilder, db: ArchiveDB) -> None:
        folder = archive.archive(ARCHIVED, name="folder")
        child = archive.add_child(folder, name="child")
        grandchild = archive.add_child(child, name="grandchild")
        sibling = archive.archive(ARCHIVED, name="sibling")

        with db.transaction() as conn, system_privileges():
            SqlNodeService(conn).delete_node(folder)

        assert not any(archive.exists(n) for n in (folder, child, grandchild))
        assert archive.exists(sibling)
        assert archive.property_count(grandchild) == 0
        assert archive.remaining_children() == ["sibling"]

    def test_secondary_children_survive(self, archive: ArchiveBuilder, db: ArchiveDB) -> None:
        folder = archive.archive(ARCHIVED, name="folder")
        shared = archive.archive(ARCHIVED, name="shared")
        with db.connection() as conn:
            conn.execute(
                child_assocs_table.insert().values(
                    parent_node_id=folder.node_id,
                    child_node_id=shared.node_id,
                    assoc_type="cm:contains",
                    qname="cm:shared",
                    is_primary=False,
                    assoc_index=0,
                )
            )

        with db.transaction() as conn, system_privileges():
            SqlNodeService(conn).delete_node(folder)

        assert archive.exists(shared)
        assert archive.assoc_count(shared) == 1  # its own archive-root association
