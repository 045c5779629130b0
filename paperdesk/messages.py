"""
Messages exchanged between a desk and its rendering layer.

Inbound messages describe what happened on the surface (content edited, a
page overflowed, a page asked to be deleted). ``PageChange`` records
describe, outbound, which pages and blocks a mutation touched.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .models.page import normalize_blocks


@dataclass(frozen=True)
class PageChange:
    """A page touched by a mutation; ``blocks`` None means the whole page."""

    page_number: int
    blocks: Optional[Tuple[int, ...]] = None


@dataclass(frozen=True)
class ContentChanged:
    """Blocks of a page were edited or removed on the surface."""

    page_id: str
    blocks: Mapping[int, str] = field(default_factory=dict)
    removed: Tuple[int, ...] = ()


@dataclass(frozen=True)
class Overflow:
    """A page grew past its capacity; ``content`` is the tail that no longer fits."""

    page_id: str
    content: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DeleteRequested:
    """The last block of a page was deleted on the surface."""

    page_id: str


Message = Union[ContentChanged, Overflow, DeleteRequested]


def merge_changes(changes: Iterable[PageChange]) -> List[PageChange]:
    """
    Merge change records per page number.

    Args:
        changes: Change records, possibly repeating pages

    Returns:
        One record per page number, ordered by page number
    """
    merged: Dict[int, Optional[set]] = {}
    for change in changes:
        if change.page_number in merged and merged[change.page_number] is None:
            continue
        if change.blocks is None:
            merged[change.page_number] = None
        else:
            merged.setdefault(change.page_number, set()).update(change.blocks)

    return [
        PageChange(number, None if blocks is None else tuple(sorted(blocks)))
        for number, blocks in sorted(merged.items())
    ]


def message_from_dict(data: Mapping[str, Any]) -> Message:
    """
    Build a message from its JSON form.

    Supported shapes::

        {"type": "content_changed", "page_id": "...", "blocks": {...}, "removed": [...]}
        {"type": "overflow", "page_id": "...", "content": ["...", ...]}
        {"type": "delete", "page_id": "..."}

    Args:
        data: Message record

    Returns:
        Message instance

    Raises:
        ValueError: If the record type is unknown or the page id is missing
    """
    message_type = data.get('type')
    page_id = data.get('page_id')
    if not page_id:
        raise ValueError(f"Message without page_id: {dict(data)!r}")

    if message_type == 'content_changed':
        return ContentChanged(
            page_id=str(page_id),
            blocks=normalize_blocks(data.get('blocks')),
            removed=tuple(int(index) for index in data.get('removed', ())),
        )
    if message_type == 'overflow':
        return Overflow(page_id=str(page_id), content=tuple(str(item) for item in data.get('content', ())))
    if message_type == 'delete':
        return DeleteRequested(page_id=str(page_id))

    raise ValueError(f"Unknown message type: {message_type!r}")
