"""
Page id generation.

Provides the default random id generator and a deterministic, prefixed
generator for fixtures and replayed documents.
"""

from typing import Callable, Set
import uuid
import logging

logger = logging.getLogger(__name__)

IdGenerator = Callable[[], str]


def uuid_generator() -> str:
    """
    Generate a version 4 UUID string.

    Returns:
        Fresh random identifier
    """
    return str(uuid.uuid4())


class SequentialIdGenerator:
    """
    Generates prefixed, counter-based ids ("page_1", "page_2", ...).

    Ids handed out by one generator are never repeated, and ids reserved
    through ``reserve`` (for example ids of pages loaded from disk) are skipped.
    """

    def __init__(self, prefix: str = "page"):
        """
        Initialize sequential id generator.

        Args:
            prefix: Prefix for generated ids
        """
        if not prefix or not isinstance(prefix, str):
            raise ValueError("Prefix must be a non-empty string")

        self.prefix = prefix
        self.counter = 0
        self.issued_ids: Set[str] = set()

    def __call__(self) -> str:
        self.counter += 1
        element_id = f"{self.prefix}_{self.counter}"

        # Ensure uniqueness
        while element_id in self.issued_ids:
            self.counter += 1
            element_id = f"{self.prefix}_{self.counter}"

        self.issued_ids.add(element_id)
        return element_id

    def reserve(self, element_id: str) -> bool:
        """
        Mark an externally supplied id as taken.

        Args:
            element_id: Id to reserve

        Returns:
            True if the id was newly reserved, False if already known
        """
        if element_id in self.issued_ids:
            logger.debug(f"ID {element_id} already reserved")
            return False

        self.issued_ids.add(element_id)
        return True
