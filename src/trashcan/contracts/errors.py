# src/trashcan/contracts/errors.py
"""Error hierarchy and failure records.

Store errors are split by whether a retry can help: TransientStoreError
signals contention that may clear on the next attempt, everything else is
permanent for the node involved.
"""

from typing import TypedDict


class TrashcanError(Exception):
    """Base class for all trashcan errors."""


class StoreError(TrashcanError):
    """Raised when the node store cannot satisfy a request."""


class StoreNotFoundError(StoreError):
    """Raised when a store reference does not exist."""

    def __init__(self, store_ref: object) -> None:
        self.store_ref = store_ref
        super().__init__(f"Store does not exist: {store_ref}")


class NodeNotFoundError(StoreError):
    """Raised when a node does not exist (for example, already deleted)."""

    def __init__(self, node_ref: object) -> None:
        self.node_ref = node_ref
        super().__init__(f"Node does not exist: {node_ref}")


class TransientStoreError(StoreError):
    """Raised for contention failures that are worth retrying.

    Examples: lock timeouts, optimistic concurrency conflicts.
    """


class PrivilegeError(TrashcanError):
    """Raised when an operation requires system privileges the caller lacks."""


class DeletionFailure(TypedDict):
    """Schema for a node that could not be deleted during a clean run."""

    node_ref: str  # String form of the NodeRef
    type: str  # Exception class name (e.g., "NodeNotFoundError")
    exception: str  # String representation of the exception
