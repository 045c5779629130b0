"""Custom exceptions for paperdesk."""

from typing import Optional


class PaperdeskError(Exception):
    """Base exception for paperdesk errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigError(PaperdeskError):
    """Exception raised when a desk configuration cannot be built."""

    pass


class HolderNotFoundError(PaperdeskError):
    """Exception raised when the host surface has no holder to attach pages to."""

    pass


class StorageError(PaperdeskError):
    """Exception raised while reading or writing desk documents."""

    pass
