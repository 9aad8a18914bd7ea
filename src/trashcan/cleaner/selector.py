# src/trashcan/cleaner/selector.py
"""Batch selection: which archived nodes are due for permanent deletion.

Children of the archive root hang off an ordered association and each newly
archived node is appended at the end, so the first N children in association
order are the N that have been in the trashcan longest. Asking the store for
at most ``batch_count`` children therefore yields the oldest candidates
without loading the whole trashcan.
"""

from datetime import UTC, datetime, timedelta

from trashcan.contracts.identity import NodeRef
from trashcan.contracts.model import ASSOC_CHILDREN, PROP_ARCHIVED_DATE
from trashcan.contracts.store import NodeService

# Nodes without an archived date are treated as archived at the epoch.
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def is_eligible(archived_at: datetime | None, now: datetime, keep_period: timedelta) -> bool:
    """Check whether a node has been archived for at least keep_period.

    A zero or negative keep_period makes every node eligible.
    """
    if keep_period <= timedelta(0):
        return True
    archived = archived_at if archived_at is not None else EPOCH
    return now - archived >= keep_period


def select_batch(
    node_service: NodeService,
    archive_root: NodeRef,
    keep_period: timedelta,
    batch_count: int,
    *,
    now: datetime,
) -> list[NodeRef]:
    """Return up to batch_count archived nodes eligible for deletion, oldest first.

    Must run inside a transaction so the children listing is a consistent
    snapshot.

    Args:
        node_service: Store access bound to the current transaction
        archive_root: Root node of the archive store
        keep_period: Minimum time a node stays archived
        batch_count: Maximum number of nodes returned
        now: Reference time for the age check

    Returns:
        Eligible nodes in archival order

    Raises:
        ValueError: If batch_count is not positive
    """
    if batch_count <= 0:
        raise ValueError(f"batch_count must be positive, got {batch_count}")

    assocs = node_service.get_child_assocs(archive_root, ASSOC_CHILDREN, max_results=batch_count)

    batch: list[NodeRef] = []
    for assoc in assocs:
        archived_at = node_service.get_property(assoc.child_ref, PROP_ARCHIVED_DATE)
        if is_eligible(archived_at, now, keep_period):
            batch.append(assoc.child_ref)

    # The store already honours max_results; truncate anyway
    return batch[:batch_count]
