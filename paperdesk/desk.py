"""
Desk - the multi-page document model.

The desk owns the ordered collection of pages. Page numbers are positional
(``index + 1``) and are never stored on a page; callers holding a page
number across a mutation must re-resolve it by page id.

Every mutating operation reports the pages it touched as ``PageChange``
records. Those are turned into a snapshot, either of the touched pages or,
with ``save_on_change``, of the whole document, and handed to
``config.on_change``.
"""

from __future__ import annotations

from collections import deque
from contextlib import contextmanager
from typing import Any, Deque, Dict, Iterator, List, Mapping, Optional, Union
import logging

from .config import DEFAULT_CONFIG, DeskConfig
from .engine.pagination_engine import PaginationEngine
from .engine.snapshot_builder import SnapshotBuilder
from .exceptions import ConfigError, HolderNotFoundError
from .messages import ContentChanged, DeleteRequested, Message, Overflow, PageChange, merge_changes
from .models.page import PLACEHOLDER, Page, normalize_blocks
from .surface import MemorySurface, Surface

logger = logging.getLogger(__name__)

# Generated ids that collide with pages on the desk are retried this many times
MAX_ID_ATTEMPTS = 100


class Desk:
    """
    Paginated document model.

    Handles page insertion, deletion and lookup, overflow-driven page
    breaks, snapshots, word counts and change notification.
    """

    def __init__(self, config: Optional[Union[DeskConfig, Mapping[str, Any]]] = None,
                 surface: Optional[Surface] = None,
                 pagination_engine: Optional[PaginationEngine] = None):
        """
        Initialize desk.

        Args:
            config: DeskConfig or a mapping of overrides onto the defaults
            surface: Rendering surface (an in-memory surface owning the
                configured holder when omitted)
            pagination_engine: Engine used to break overflowing pages

        Raises:
            HolderNotFoundError: If the surface has no holder to attach pages to
        """
        if config is None:
            config = DEFAULT_CONFIG
        elif not isinstance(config, DeskConfig):
            config = DEFAULT_CONFIG.merge(config)
        self.config = config

        # Generate a session key if one wasn't provided
        self.session_key = config.session_key or config.gen_uid()

        self.surface = surface if surface is not None else MemorySurface(holders=(config.holder,))
        self.holder = self.surface.find_holder(config.holder)
        if self.holder is None:
            raise HolderNotFoundError("Couldn't find holder", details=config.holder)

        self.pagination_engine = pagination_engine or PaginationEngine()
        self.snapshot_builder = SnapshotBuilder(self.surface.placeholder)

        # Ids of loaded pages must never be handed out again
        reserve = getattr(config.gen_uid, 'reserve', None)
        if reserve is not None:
            for page_data in config.pages:
                if page_data.get('id'):
                    reserve(str(page_data['id']))

        self.pages: List[Page] = []
        for page_data in config.pages:
            self._append_initial_page(Page.create(config, page_data))

        # If there are no pages, create the first one
        if not self.pages:
            self.pages.append(Page.create(config))

        self._current_page_number = 1
        if config.pages and 1 <= config.on_page <= len(self.pages):
            self._current_page_number = config.on_page
        elif config.on_page != 1:
            logger.warning(f"Starting page {config.on_page} out of range, starting on page 1")

        self._pending_changes: Optional[List[PageChange]] = None
        self._dispatching = False
        self._queued_messages: Deque[Message] = deque()

        self.render()
        logger.debug(f"Desk {self.session_key} initialized with {len(self.pages)} pages")

    def _append_initial_page(self, page: Page) -> None:
        if self.find_page_index(page.id) is not None:
            duplicate_id = page.id
            page_id = self.new_page_id()
            if page_id is None:
                raise ConfigError("Cannot assign a unique ID to a duplicate page", details=duplicate_id)
            page = Page(page_id, page.blocks)
            logger.warning(f"Duplicate page ID {duplicate_id} in initial pages, reassigned {page.id}")
        self.pages.append(page)

    def new_page_id(self) -> Optional[str]:
        """
        Generate a page id no page on the desk uses yet.

        Returns:
            Fresh id, or None if the id generator keeps returning taken ids
        """
        for _ in range(MAX_ID_ATTEMPTS):
            page_id = str(self.config.gen_uid())
            if self.find_page_index(page_id) is None:
                return page_id
            logger.debug(f"Generated page ID {page_id} is already taken")

        logger.error(f"No unique page ID after {MAX_ID_ATTEMPTS} attempts")
        return None

    def create_page(self, page_data: Optional[Mapping[str, Any]] = None) -> Optional[Page]:
        """
        Build a page from a page descriptor, generating an unused id if it has none.

        Args:
            page_data: Optional ``{"id": ..., "blocks": {...}}``

        Returns:
            New Page (not yet on the desk), or None if no unique id was found
        """
        if not isinstance(page_data, Mapping):
            page_data = {}
        if page_data.get('id'):
            return Page.create(self.config, page_data)

        page_id = self.new_page_id()
        if page_id is None:
            return None
        return Page.create(self.config, {'id': page_id, 'blocks': page_data.get('blocks')})

    def __len__(self) -> int:
        return len(self.pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(list(self.pages))

    # Rendering

    def render(self) -> None:
        """Attach every page not yet on the surface, focusing the current page."""
        for page_number, page in enumerate(self.pages, start=1):
            if page.surface is None:
                self._attach(page)
                if page_number == self._current_page_number:
                    self.surface.focus(page)

    def _attach(self, page: Page) -> None:
        self.surface.attach(page)
        page.surface = self.surface

    def _detach(self, page: Page) -> None:
        self.surface.detach(page)
        page.surface = None

    def focus_current_page(self) -> None:
        """Move the surface cursor to the current page."""
        self.surface.focus(self.current_page)

    # Lookup

    @property
    def current_page_number(self) -> int:
        """1-based number of the page holding the cursor."""
        return self._current_page_number

    @current_page_number.setter
    def current_page_number(self, page_number: int) -> None:
        if not self.validate_page_number(page_number):
            return
        self._current_page_number = page_number

    @property
    def current_page(self) -> Page:
        return self.pages[self._current_page_number - 1]

    def validate_page_number(self, page_number: Any) -> bool:
        """
        Check that a page number refers to an existing page.

        Args:
            page_number: Candidate 1-based page number

        Returns:
            True if valid, False (logged) otherwise
        """
        if isinstance(page_number, int) and not isinstance(page_number, bool):
            if 1 <= page_number <= len(self.pages):
                return True
        logger.error(f"Invalid page number: {page_number}")
        return False

    def find_page_index(self, page_id: str) -> Optional[int]:
        """
        Find the 0-based position of a page.

        Args:
            page_id: Page id

        Returns:
            Index or None if no page has this id
        """
        for index, page in enumerate(self.pages):
            if page.id == page_id:
                return index
        return None

    def find_page_number(self, page_id: str) -> Optional[int]:
        """
        Find the 1-based page number of a page.

        Args:
            page_id: Page id

        Returns:
            Page number or None if no page has this id
        """
        index = self.find_page_index(page_id)
        if index is None:
            return None
        return index + 1

    def get_page(self, page_id: str) -> Optional[Page]:
        """Get a page by id."""
        index = self.find_page_index(page_id)
        if index is None:
            return None
        return self.pages[index]

    # Page collection

    def insert_page_at(self, position: int, page: Page) -> bool:
        """
        Insert a page at a 0-based position.

        Args:
            position: Target index in ``[0, len(pages)]``
            page: Page to insert

        Returns:
            True if inserted, False if the position or page was rejected
        """
        if isinstance(position, bool) or not isinstance(position, int) \
                or position < 0 or position > len(self.pages):
            logger.error(f"Invalid page position {position} for a desk of {len(self.pages)} pages")
            return False
        if self.find_page_index(page.id) is not None:
            logger.error(f"Page with ID {page.id} is already on the desk")
            return False

        if position == len(self.pages):
            self.pages.append(page)
        else:
            self.pages.insert(position, page)

        # Keep the cursor on the page it was on
        if position < self._current_page_number:
            self._current_page_number += 1

        self._attach(page)
        logger.debug(f"Inserted page {page.id} as page {position + 1}")

        self.notify_changes([
            PageChange(page_number) for page_number in range(position + 1, len(self.pages) + 1)
        ])
        return True

    def insert_new_page_at(self, position: int, page_data: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Build a page from a page descriptor and insert it at a 0-based position.

        Args:
            position: Target index in ``[0, len(pages)]``
            page_data: Optional ``{"id": ..., "blocks": {...}}``

        Returns:
            True if inserted
        """
        page = self.create_page(page_data)
        if page is None:
            return False
        return self.insert_page_at(position, page)

    def insert_page_before(self, before_page_id: str, page_data: Optional[Mapping[str, Any]] = None) -> bool:
        """Insert a new page in front of the page with ``before_page_id``."""
        index = self.find_page_index(before_page_id)
        if index is None:
            logger.error(f"Couldn't find page with ID {before_page_id}")
            return False
        return self.insert_new_page_at(index, page_data)

    def insert_page_after(self, after_page_id: str, page_data: Optional[Mapping[str, Any]] = None) -> bool:
        """Insert a new page right after the page with ``after_page_id``."""
        index = self.find_page_index(after_page_id)
        if index is None:
            logger.error(f"Couldn't find page with ID {after_page_id}")
            return False
        return self.insert_new_page_at(index + 1, page_data)

    def delete_page(self, page: Union[Page, str]) -> bool:
        """
        Delete a page.

        The first page is never removed: if it has no blocks left it gets a
        single placeholder block instead.

        Args:
            page: Page or page id

        Returns:
            True if the page was removed from the desk
        """
        page_id = page.id if isinstance(page, Page) else page
        index = self.find_page_index(page_id)
        if index is None:
            logger.error(f"Couldn't find page with ID {page_id}")
            return False

        target = self.pages[index]
        logger.debug(f"Deleting page {index + 1}")

        if index == 0:
            if len(target) == 0:
                # Deletion of the last block on the page, recreate one
                target.insert_block(0, PLACEHOLDER)
                target.recompute_word_count()
                self.notify_changes([PageChange(1, (0,))])
            return False

        self.pages.pop(index)
        self._detach(target)

        if self._current_page_number > index:
            self._current_page_number -= 1
            self.focus_current_page()

        logger.info(f"Removed page {index + 1} ({target.id})")

        changed = range(index + 1, len(self.pages) + 1)
        self.notify_changes([PageChange(page_number) for page_number in changed] or [PageChange(index)])
        return True

    # Content

    def set_page_content(self, page_id: str, blocks: Mapping[Any, str]) -> bool:
        """
        Replace the content of a page.

        An empty block map is replaced by a single placeholder block so the
        page never ends up visually empty.

        Args:
            page_id: Page id
            blocks: New block map

        Returns:
            True if the page was found and updated
        """
        page = self.get_page(page_id)
        if page is None:
            logger.error(f"Couldn't find page with ID {page_id}")
            return False

        new_blocks = normalize_blocks(blocks)
        if not new_blocks:
            new_blocks = {0: PLACEHOLDER}

        page.clear()
        for index in sorted(new_blocks):
            page.insert_block(index, new_blocks[index])
        page.recompute_word_count()

        self.notify_changes([PageChange(self.find_page_number(page_id))])
        return True

    def word_count(self, page_id: Optional[str] = None, page_number: Optional[int] = None) -> Optional[int]:
        """
        Return the word count of a page or of the whole desk.

        Args:
            page_id: Optionally count just the page with this id
            page_number: Optionally count just this 1-based page

        Returns:
            Word count, or None if the selected page does not exist
        """
        if page_id is not None:
            page = self.get_page(page_id)
            if page is None:
                logger.error(f"Couldn't find page with ID {page_id}")
                return None
            return page.recompute_word_count()

        if page_number is not None:
            if not self.validate_page_number(page_number):
                return None
            return self.pages[page_number - 1].recompute_word_count()

        return sum(page.recompute_word_count() for page in self.pages)

    def save(self, page_number: Optional[int] = None) -> Dict[str, Any]:
        """
        Save the current state of the desk.

        Args:
            page_number: If provided, save just this page

        Returns:
            Document snapshot, ``{"pages": {}}`` for an invalid page number
        """
        return self.snapshot_builder.build_document_snapshot(self, page_number)

    # Change notification

    @contextmanager
    def coalesce_changes(self) -> Iterator[None]:
        """
        Collect change notifications and emit them once, merged, on exit.

        Nested use joins the outermost batch.
        """
        if self._pending_changes is not None:
            yield
            return

        self._pending_changes = []
        try:
            yield
        finally:
            pending, self._pending_changes = self._pending_changes, None
            if pending:
                self._emit(merge_changes(pending))

    def notify_changes(self, changes: List[PageChange]) -> None:
        """
        Report pages touched by a mutation.

        Args:
            changes: Change records
        """
        if self._pending_changes is not None:
            self._pending_changes.extend(changes)
            return
        self._emit(merge_changes(changes))

    def _emit(self, changes: List[PageChange]) -> Dict[str, Any]:
        if self.config.save_on_change:
            snapshot = self.save()
        else:
            pages: Dict[int, Dict[str, Any]] = {}
            for change in changes:
                if 1 <= change.page_number <= len(self.pages):
                    pages[change.page_number] = self.snapshot_builder.build_page_snapshot(
                        self.pages[change.page_number - 1], change.blocks
                    )
            snapshot = {'pages': pages}

        logger.debug(f"Change emitted for pages {[change.page_number for change in changes]}")
        self.config.on_change(snapshot)
        return snapshot

    # Inbound messages

    def dispatch(self, message: Message) -> bool:
        """
        Handle a message from the rendering layer.

        Messages dispatched while another one is being handled (for example
        from an ``on_change`` callback) are queued and run afterwards, so
        each handler sees a settled page list.

        Args:
            message: ContentChanged, Overflow or DeleteRequested

        Returns:
            Result of the handler, or False if the message was queued
        """
        if self._dispatching:
            self._queued_messages.append(message)
            logger.debug(f"Queued {type(message).__name__} for page {message.page_id}")
            return False

        self._dispatching = True
        try:
            result = self._handle(message)
            while self._queued_messages:
                self._handle(self._queued_messages.popleft())
        finally:
            self._dispatching = False
            if self._queued_messages:
                logger.warning(f"Dropping {len(self._queued_messages)} queued messages after a failed dispatch")
                self._queued_messages.clear()
        return result

    def _handle(self, message: Message) -> bool:
        handlers = {
            ContentChanged: self.handle_content_changed,
            Overflow: self.handle_overflow,
            DeleteRequested: self.handle_delete_requested,
        }
        handler = handlers.get(type(message))
        if handler is None:
            logger.error(f"Unrecognized message type {type(message).__name__}")
            return False
        return handler(message)

    def handle_content_changed(self, message: ContentChanged) -> bool:
        """
        Apply edited and removed blocks reported by the surface.

        Removed indices are dropped first (later blocks close the gap), then
        the edited blocks are written in place. A page left without blocks
        is deleted, which for the first page means it gets a placeholder.

        Returns:
            True if the page was found
        """
        page = self.get_page(message.page_id)
        if page is None:
            logger.error(f"Couldn't find page with ID {message.page_id}")
            return False

        edited = normalize_blocks(message.blocks)
        for index in sorted(set(message.removed), reverse=True):
            page.remove_block(index)
        for index, content in edited.items():
            page.blocks[index] = content
        page.recompute_word_count()

        with self.coalesce_changes():
            if len(page) == 0:
                self.delete_page(page)
                return True

            page_number = self.find_page_number(page.id)
            if message.removed:
                self.notify_changes([PageChange(page_number)])
            else:
                self.notify_changes([PageChange(page_number, tuple(sorted(edited)))])
        return True

    def handle_overflow(self, message: Overflow) -> bool:
        """
        Break a page whose content outgrew it.

        If the page still ends with the overflowing blocks they are taken
        off it once they were moved, as long as at least one block stays.
        A rejected move leaves the page untouched.

        Returns:
            True if content was moved
        """
        page = self.get_page(message.page_id)
        if page is None:
            logger.error(f"Couldn't find page with ID {message.page_id}")
            return False

        content = list(message.content)
        tail: List[int] = []
        if content and len(page) > len(content):
            tail = page.indices()[-len(content):]
            if [page.blocks[index] for index in tail] != content:
                tail = []

        with self.coalesce_changes():
            if not self.pagination_engine.handle_overflow(self, page, content):
                return False
            if tail:
                for index in tail:
                    del page.blocks[index]
                page.recompute_word_count()
        return True

    def handle_delete_requested(self, message: DeleteRequested) -> bool:
        """Delete the page the surface asked to remove."""
        return self.delete_page(message.page_id)

    def __repr__(self) -> str:
        return f"Desk(pages={len(self.pages)}, current={self._current_page_number})"
