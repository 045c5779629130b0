"""
paperdesk - paginated document model for rich-text editors.

Keeps an ordered collection of pages, breaks pages whose content overflows
into the following page, and derives snapshots and word counts that match
what the rendering surface shows.

Quick Start:
    from paperdesk import Desk, Overflow

    desk = Desk({"pages": [{"blocks": {0: "Hello"}}]})
    desk.dispatch(Overflow(desk.pages[0].id, ("tail",)))
    snapshot = desk.save()
"""

from .version import __version__, __version_info__

from .exceptions import (
    PaperdeskError,
    ConfigError,
    HolderNotFoundError,
    StorageError,
)
from .config import DEFAULT_CONFIG, DeskConfig, Margins, build_config
from .models.page import PLACEHOLDER, Page
from .messages import ContentChanged, DeleteRequested, Overflow, PageChange
from .surface import MemorySurface, Surface
from .engine import PaginationEngine, SnapshotBuilder
from .desk import Desk

__all__ = [
    "__version__",
    "__version_info__",
    "PaperdeskError",
    "ConfigError",
    "HolderNotFoundError",
    "StorageError",
    "DEFAULT_CONFIG",
    "DeskConfig",
    "Margins",
    "build_config",
    "PLACEHOLDER",
    "Page",
    "ContentChanged",
    "DeleteRequested",
    "Overflow",
    "PageChange",
    "MemorySurface",
    "Surface",
    "PaginationEngine",
    "SnapshotBuilder",
    "Desk",
]
