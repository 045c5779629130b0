"""Utility helpers for paperdesk."""

from .ids import IdGenerator, SequentialIdGenerator, uuid_generator
from .rich_logger import setup_logging

__all__ = [
    "IdGenerator",
    "SequentialIdGenerator",
    "uuid_generator",
    "setup_logging",
]
