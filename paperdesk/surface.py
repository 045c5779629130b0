"""
Rendering surface contract.

The desk never touches a live tree. It asks a surface to attach, detach,
focus and clean pages, and reads the surface's encoding of the empty
placeholder when serializing. ``MemorySurface`` is an in-process surface
used by the command line and by tests.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional
import logging

from .models.page import PLACEHOLDER, Page

logger = logging.getLogger(__name__)


class Surface(ABC):
    """Abstract rendering collaborator of a desk."""

    # Encoding the surface uses for an empty, placeholder-only block
    placeholder: str = PLACEHOLDER

    @abstractmethod
    def find_holder(self, holder: str) -> Optional[Any]:
        """
        Locate the host element pages are attached to.

        Args:
            holder: Holder id from the desk configuration

        Returns:
            Host handle or None if it does not exist
        """

    @abstractmethod
    def attach(self, page: Page) -> None:
        """Create and attach the visual surface of a page."""

    @abstractmethod
    def detach(self, page: Page) -> None:
        """Tear down the visual surface of a page."""

    @abstractmethod
    def clean(self, page: Page) -> None:
        """Normalize transient artifacts of a page before it is read."""

    def focus(self, page: Page) -> None:
        """Move the cursor to a page."""
        logger.debug(f"Focus requested for page {page.id}")


class MemorySurface(Surface):
    """
    Surface keeping attached pages in memory.

    Cleaning renumbers a page's blocks densely from 0, folding away the gaps
    left by out-of-band edits.
    """

    def __init__(self, holders: Iterable[str] = ("desk-editor",), placeholder: str = PLACEHOLDER):
        """
        Initialize memory surface.

        Args:
            holders: Holder ids that exist on this surface
            placeholder: Encoding of the empty placeholder block
        """
        self.holders = set(holders)
        self.placeholder = placeholder
        self.attached: Dict[str, Page] = {}
        self.focused: Optional[str] = None

    def find_holder(self, holder: str) -> Optional[str]:
        return holder if holder in self.holders else None

    def attach(self, page: Page) -> None:
        if page.dom_id in self.attached:
            logger.debug(f"Page {page.id} already attached")
            return
        self.attached[page.dom_id] = page
        logger.debug(f"Attached page {page.id}")

    def detach(self, page: Page) -> None:
        if self.attached.pop(page.dom_id, None) is None:
            logger.warning(f"Page {page.id} was not attached")
            return
        if self.focused == page.id:
            self.focused = None
        logger.debug(f"Detached page {page.id}")

    def clean(self, page: Page) -> None:
        indices = page.indices()
        if indices != list(range(len(indices))):
            page.blocks = {position: page.blocks[index] for position, index in enumerate(indices)}

    def focus(self, page: Page) -> None:
        self.focused = page.id

    def attached_ids(self) -> List[str]:
        """Ids of the pages currently attached."""
        return [page.id for page in self.attached.values()]
