"""
Pagination engine.

Decides how content that overflowed a page is redistributed: it is pushed
onto the front of the following page when one exists, otherwise it becomes
a new page inserted right after the overflowing one.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, TYPE_CHECKING
import logging

from ..messages import PageChange
from ..models.page import Page

if TYPE_CHECKING:
    from ..desk import Desk

logger = logging.getLogger(__name__)


class PaginationEngine:
    """Splits overflowing pages."""

    def handle_overflow(self, model: "Desk", overflowing_page: Page, overflow_content: Sequence[str]) -> bool:
        """
        Move overflowing content to the next page.

        Args:
            model: Desk owning the page
            overflowing_page: Page that outgrew its capacity
            overflow_content: Blocks that no longer fit, in document order

        Returns:
            True if content was moved, False if there was nothing to do or
            the new page was rejected (the desk is left unchanged)
        """
        content: List[str] = list(overflow_content)
        if not content:
            logger.debug(f"Empty overflow reported for page {overflowing_page.id}, ignoring")
            return False

        page_index = model.find_page_index(overflowing_page.id)
        if page_index is None:
            logger.error(f"Couldn't find overflowing page with ID {overflowing_page.id}")
            return False

        page_number = page_index + 1

        new_page: Optional[Page] = None
        if len(model.pages) == page_number:
            new_page = model.create_page({'blocks': dict(enumerate(content))})
            if new_page is None:
                logger.error(f"Couldn't create a page for the overflow of page {page_number}")
                return False

        with model.coalesce_changes():
            if new_page is None:
                next_page = model.pages[page_number]
                for position, block in enumerate(content):
                    next_page.insert_block(position, block)
                next_page.recompute_word_count()
                logger.info(f"Pushed {len(content)} blocks from page {page_number} onto page {page_number + 1}")
            else:
                if not model.insert_page_at(page_number, new_page):
                    logger.error(f"Couldn't insert page {new_page.id} after page {page_number}")
                    return False
                logger.info(f"Broke page {page_number}, created page {page_number + 1} ({new_page.id})")

            model.current_page_number = page_number + 1
            model.focus_current_page()
            model.notify_changes([PageChange(page_number), PageChange(page_number + 1)])

        return True
