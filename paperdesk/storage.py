"""
JSON storage for desk documents.

A stored document is either a snapshot (``{"pages": {"1": {...}, ...}}``)
or a plain list of page descriptors. Snapshot page numbers come back from
JSON as strings and are ordered numerically.
"""

from pathlib import Path
from typing import Any, Dict, List, Union
import json
import logging

from .exceptions import StorageError
from .messages import Message, message_from_dict

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_json(path: PathLike) -> Any:
    path = Path(path)
    try:
        with path.open('r', encoding='utf-8') as handle:
            return json.load(handle)
    except OSError as e:
        raise StorageError(f"Cannot read {path}", details=str(e)) from e
    except json.JSONDecodeError as e:
        raise StorageError(f"Invalid JSON in {path}", details=str(e)) from e


def load_pages(path: PathLike) -> List[Dict[str, Any]]:
    """
    Load page descriptors from a snapshot or descriptor list.

    Args:
        path: JSON file path

    Returns:
        Page descriptors in page order

    Raises:
        StorageError: If the file is unreadable or has an unknown shape
    """
    data = _read_json(path)

    if isinstance(data, dict) and isinstance(data.get('pages'), dict):
        try:
            numbered = sorted(data['pages'].items(), key=lambda item: int(item[0]))
        except ValueError as e:
            raise StorageError(f"Invalid page number in {path}", details=str(e)) from e
        pages = [page for _, page in numbered]
    elif isinstance(data, dict) and isinstance(data.get('pages'), list):
        pages = data['pages']
    elif isinstance(data, list):
        pages = data
    else:
        raise StorageError(f"Unrecognized document layout in {path}")

    for page in pages:
        if not isinstance(page, dict):
            raise StorageError(f"Page descriptor must be an object in {path}", details=repr(page))

    logger.debug(f"Loaded {len(pages)} pages from {path}")
    return pages


def load_messages(path: PathLike) -> List[Message]:
    """
    Load a JSON list of message records.

    Args:
        path: JSON file path

    Returns:
        Messages in file order

    Raises:
        StorageError: If the file is unreadable or a record is invalid
    """
    data = _read_json(path)
    if not isinstance(data, list):
        raise StorageError(f"Expected a list of messages in {path}")

    messages: List[Message] = []
    for position, record in enumerate(data):
        if not isinstance(record, dict):
            raise StorageError(f"Message {position} in {path} is not an object")
        try:
            messages.append(message_from_dict(record))
        except ValueError as e:
            raise StorageError(f"Invalid message {position} in {path}", details=str(e)) from e

    logger.debug(f"Loaded {len(messages)} messages from {path}")
    return messages


def dump_snapshot(snapshot: Dict[str, Any], path: PathLike) -> Path:
    """
    Write a snapshot as JSON.

    Args:
        snapshot: Document snapshot
        path: Output path

    Returns:
        Path written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open('w', encoding='utf-8') as handle:
            json.dump(snapshot, handle, ensure_ascii=False, indent=2)
    except OSError as e:
        raise StorageError(f"Cannot write {path}", details=str(e)) from e

    logger.info(f"Snapshot written to {path}")
    return path
