"""
Page model for the desk.

A page owns its identity and an ordered map of blocks. It knows nothing about
the other pages of the document; page numbers are positional and live in the
desk.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from ..config import DeskConfig
    from ..surface import Surface

logger = logging.getLogger(__name__)

# Zero width space keeping an otherwise empty page or block non-empty
PLACEHOLDER = "\u200b"


def normalize_blocks(raw: Any) -> Dict[int, str]:
    """
    Normalize a block map from a page descriptor.

    Integer keys and strings holding integers (JSON round-trip) are kept;
    anything else is dropped. A missing or malformed map yields ``{}``.

    Args:
        raw: Block map as supplied by the caller

    Returns:
        Block map keyed by non-negative int
    """
    if not isinstance(raw, Mapping):
        if raw is not None:
            logger.debug(f"Ignoring malformed block data of type {type(raw).__name__}")
        return {}

    blocks: Dict[int, str] = {}
    for key, content in raw.items():
        try:
            index = int(key)
        except (TypeError, ValueError):
            logger.debug(f"Dropping block with non-integer key {key!r}")
            continue
        if index < 0:
            logger.debug(f"Dropping block with negative key {index}")
            continue
        blocks[index] = "" if content is None else str(content)
    return blocks


class Page:
    """
    Represents one page of the desk.

    Blocks are stored as ``{index: content}`` where content is the text
    engine's serialized form and is never interpreted here, except for
    word counting.
    """

    def __init__(self, page_id: str, blocks: Optional[Dict[int, str]] = None):
        """
        Initialize page.

        Args:
            page_id: Unique page id
            blocks: Initial block map
        """
        self._id = page_id
        self.blocks: Dict[int, str] = dict(blocks or {})
        self.word_count = 0
        self.surface: Optional["Surface"] = None

        self.recompute_word_count()

    @classmethod
    def create(cls, config: "DeskConfig", initial_data: Optional[Mapping[str, Any]] = None) -> "Page":
        """
        Create a page from an optional page descriptor.

        Args:
            config: Desk configuration (supplies the id generator)
            initial_data: Optional ``{"id": ..., "blocks": {...}}`` descriptor

        Returns:
            New Page
        """
        if not isinstance(initial_data, Mapping):
            initial_data = {}

        page_id = initial_data.get('id') or config.gen_uid()
        page = cls(str(page_id), normalize_blocks(initial_data.get('blocks')))

        logger.debug(f"Page {page.id} created with {len(page.blocks)} blocks")
        return page

    @property
    def id(self) -> str:
        """Page id, fixed for the lifetime of the page."""
        return self._id

    @property
    def dom_id(self) -> str:
        return f"desk-page-{self._id}"

    def indices(self) -> List[int]:
        """Block indices present on the page, ascending."""
        return sorted(self.blocks)

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices())

    def __len__(self) -> int:
        return len(self.blocks)

    def get_block(self, index: int) -> Optional[str]:
        """
        Get block content.

        Args:
            index: Block index

        Returns:
            Block content or None if no block sits at index
        """
        return self.blocks.get(index)

    def insert_block(self, index: int, content: str) -> None:
        """
        Insert a block, shifting occupied indices at or after ``index`` up by one.

        Args:
            index: Target index (>= 0)
            content: Block content

        Raises:
            ValueError: If index is negative
        """
        if index < 0:
            raise ValueError(f"Block index must be >= 0, got {index}")

        if index in self.blocks:
            self.blocks = {
                (key + 1 if key >= index else key): value
                for key, value in self.blocks.items()
            }
        self.blocks[index] = content

    def remove_block(self, index: int) -> Optional[str]:
        """
        Remove a block and close the gap it leaves.

        Args:
            index: Block index

        Returns:
            Removed content or None if no block sat at index
        """
        if index not in self.blocks:
            return None

        content = self.blocks.pop(index)
        self.blocks = {
            (key - 1 if key > index else key): value
            for key, value in self.blocks.items()
        }
        return content

    def clear(self) -> None:
        """Remove every block."""
        self.blocks.clear()
        self.word_count = 0

    def recompute_word_count(self) -> int:
        """
        Recount words across all blocks.

        The placeholder sentinel is never counted as a word.

        Returns:
            Word count
        """
        count = 0
        for content in self.blocks.values():
            for word in content.split():
                if word and word != PLACEHOLDER:
                    count += 1
        self.word_count = count
        return count

    def clean(self) -> None:
        """Let the rendering surface normalize transient artifacts of this page."""
        if self.surface is not None:
            self.surface.clean(self)

    def __repr__(self) -> str:
        return f"Page(id={self._id[:8]}..., blocks={len(self.blocks)}, words={self.word_count})"
