# src/trashcan/contracts/identity.py
"""Node and association references.

These types answer: "How do we refer to things in the archive store?"
"""

from dataclasses import dataclass

_PROTOCOL_SEPARATOR = "://"


@dataclass(frozen=True)
class StoreRef:
    """Reference to a node store, e.g. ``archive://SpacesStore``."""

    protocol: str
    identifier: str

    @classmethod
    def parse(cls, url: str) -> "StoreRef":
        """Parse a store URL of the form ``<protocol>://<identifier>``.

        Raises:
            ValueError: If the URL has no protocol separator or an empty part
        """
        protocol, sep, identifier = url.partition(_PROTOCOL_SEPARATOR)
        if not sep or not protocol or not identifier:
            raise ValueError(f"Invalid store reference {url!r}: expected '<protocol>://<identifier>'")
        return cls(protocol=protocol, identifier=identifier)

    def __str__(self) -> str:
        return f"{self.protocol}{_PROTOCOL_SEPARATOR}{self.identifier}"


@dataclass(frozen=True)
class NodeRef:
    """Opaque reference to a node living in a store."""

    store_ref: StoreRef
    node_id: str

    def __str__(self) -> str:
        return f"{self.store_ref}/{self.node_id}"


@dataclass(frozen=True)
class ChildAssociationRef:
    """A parent-to-child association.

    nth_sibling is the child's position among its parent's children of the
    same association type. Children are appended at the end, so a lower
    position means the child was added earlier.
    """

    parent_ref: NodeRef
    child_ref: NodeRef
    assoc_type: str
    qname: str
    nth_sibling: int
