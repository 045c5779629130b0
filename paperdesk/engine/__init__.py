"""Pagination and snapshot engines."""

from .pagination_engine import PaginationEngine
from .snapshot_builder import SnapshotBuilder

__all__ = ["PaginationEngine", "SnapshotBuilder"]
