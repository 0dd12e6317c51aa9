"""Ingestion layer.

This package turns loosely typed remote facility records into validated,
frozen domain objects before they reach the store.
"""

__all__: list[str] = []
