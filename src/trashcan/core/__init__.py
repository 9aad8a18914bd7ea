# src/trashcan/core/__init__.py
"""Core infrastructure: configuration, logging, retry, privileges and the node store."""
