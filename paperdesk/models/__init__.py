"""Document models for paperdesk."""

from .page import PLACEHOLDER, Page, normalize_blocks

__all__ = ["PLACEHOLDER", "Page", "normalize_blocks"]
