"""
Snapshot builder.

Derives serializable, surface-independent snapshots of pages and documents::

    {"pages": {page_number: {"id": str, "blocks": {block_index: str}}}}
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, TYPE_CHECKING
import logging

from ..models.page import PLACEHOLDER, Page

if TYPE_CHECKING:
    from ..desk import Desk

logger = logging.getLogger(__name__)


class SnapshotBuilder:
    """Builds page and document snapshots."""

    def __init__(self, placeholder: str = PLACEHOLDER):
        """
        Initialize snapshot builder.

        Args:
            placeholder: The rendering surface's encoding of an empty block
        """
        self.placeholder = placeholder

    def serialize_block(self, content: str) -> str:
        """Serialize block content; a placeholder-only block becomes ''."""
        if content == self.placeholder or content == PLACEHOLDER:
            return ""
        return content

    def build_page_snapshot(self, page: Page, block_indices: Optional[Iterable[int]] = None) -> Dict[str, Any]:
        """
        Build a snapshot of one page.

        The page is cleaned before any block is read, so requested indices
        that no longer exist afterwards are left out.

        Args:
            page: Page to snapshot
            block_indices: Optional subset of block indices

        Returns:
            ``{"id": ..., "blocks": {...}}``
        """
        page.clean()

        requested = list(block_indices) if block_indices is not None else []
        blocks: Dict[int, str] = {}

        if requested:
            for index in requested:
                content = page.get_block(index)
                if content is not None:
                    blocks[index] = self.serialize_block(content)
        else:
            for index in page.indices():
                blocks[index] = self.serialize_block(page.blocks[index])

        return {'id': page.id, 'blocks': blocks}

    def build_document_snapshot(self, desk: "Desk", page_number: Optional[int] = None) -> Dict[str, Any]:
        """
        Build a snapshot of the whole desk or of a single page.

        Args:
            desk: Desk to snapshot
            page_number: Optional 1-based page number

        Returns:
            Document snapshot; ``{"pages": {}}`` if page_number is invalid
        """
        if page_number is None:
            return {
                'pages': {
                    number: self.build_page_snapshot(page)
                    for number, page in enumerate(desk.pages, start=1)
                }
            }

        if not desk.validate_page_number(page_number):
            return {'pages': {}}

        return {'pages': {page_number: self.build_page_snapshot(desk.pages[page_number - 1])}}
