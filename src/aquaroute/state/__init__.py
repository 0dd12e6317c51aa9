"""State/store layer.

This package is the single source of truth for the dashboard's entities:
simulation ticks, remote facility snapshots and the clock all go through
:class:`~aquaroute.state.store.EntityStore`.
"""
