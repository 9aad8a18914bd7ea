"""Shared contracts for cross-boundary data types.

This package is a LEAF MODULE with no outbound dependencies to core/cleaner.
Settings classes are NOT re-exported here - import them from
trashcan.core.config.

Import patterns:
    # Contracts (lightweight, no heavy dependencies)
    from trashcan.contracts import NodeRef, StoreRef, NodeService

    # Settings classes (from core, pulls in heavy deps)
    from trashcan.core.config import TrashcanSettings
"""

from trashcan.contracts.errors import (
    DeletionFailure,
    NodeNotFoundError,
    PrivilegeError,
    StoreError,
    StoreNotFoundError,
    TransientStoreError,
    TrashcanError,
)
from trashcan.contracts.identity import ChildAssociationRef, NodeRef, StoreRef
from trashcan.contracts.model import (
    ASSOC_CHILDREN,
    DEFAULT_ARCHIVE_STORE_URL,
    PROP_ARCHIVED_DATE,
    TYPE_STORE_ROOT,
)
from trashcan.contracts.results import CleanResult
from trashcan.contracts.store import NodeService

__all__ = [
    "ASSOC_CHILDREN",
    "DEFAULT_ARCHIVE_STORE_URL",
    "PROP_ARCHIVED_DATE",
    "TYPE_STORE_ROOT",
    "ChildAssociationRef",
    "CleanResult",
    "DeletionFailure",
    "NodeNotFoundError",
    "NodeRef",
    "NodeService",
    "PrivilegeError",
    "StoreError",
    "StoreNotFoundError",
    "StoreRef",
    "TransientStoreError",
    "TrashcanError",
]
