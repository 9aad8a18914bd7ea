# src/trashcan/contracts/model.py
"""Well-known names used by the archive store content model."""

# Ordered association under which archived nodes hang off the archive root.
# Newly archived nodes are appended at the end.
ASSOC_CHILDREN = "sys:children"

# Timestamp recorded by the archival process when a node is moved to the trashcan.
PROP_ARCHIVED_DATE = "sys:archivedDate"

# Node type of a store's root node.
TYPE_STORE_ROOT = "sys:store_root"

DEFAULT_ARCHIVE_STORE_URL = "archive://SpacesStore"
