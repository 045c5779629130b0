"""
Desk configuration.

Configuration is an immutable value built once, by merging caller overrides
onto ``DEFAULT_CONFIG`` field by field. Page dimensions, spacing and margins
are opaque to pagination and only travel through to the rendering surface.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union
import logging

from .exceptions import ConfigError
from .utils.ids import IdGenerator, uuid_generator

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[Dict[str, Any]], None]

# Keys used by host applications written against the browser desk
_ALIASES = {
    'blockClass': 'block_class',
    'pageClass': 'page_class',
    'onPage': 'on_page',
    'onChange': 'on_change',
    'saveOnChange': 'save_on_change',
    'genUID': 'gen_uid',
    'sessionKey': 'session_key',
}


def _ignore_change(snapshot: Dict[str, Any]) -> None:
    return None


@dataclass(frozen=True)
class Margins:
    """Page margins in pixels."""

    left: int = 15
    right: int = 15
    top: int = 15
    bottom: int = 15

    def merge(self, value: Union["Margins", Mapping[str, Any]]) -> "Margins":
        """
        Merge margin overrides onto these margins.

        Args:
            value: Margins instance or mapping with any of left/right/top/bottom

        Returns:
            New Margins instance
        """
        if isinstance(value, Margins):
            return value
        if not isinstance(value, Mapping):
            raise ConfigError("Margins must be a mapping", details=repr(value))

        unknown = set(value) - {'left', 'right', 'top', 'bottom'}
        if unknown:
            raise ConfigError("Unknown margin keys", details=", ".join(sorted(unknown)))

        return replace(self, **{key: int(size) for key, size in value.items()})


@dataclass(frozen=True)
class DeskConfig:
    """Immutable desk configuration."""

    holder: str = "desk-editor"
    height: str = "1056px"
    width: str = "815px"
    spacing: str = "20px"
    margins: Margins = field(default_factory=Margins)
    block_class: str = "desk-block"
    page_class: str = "desk-page"
    pages: Tuple[Mapping[str, Any], ...] = ()
    on_page: int = 1
    on_change: ChangeCallback = _ignore_change
    save_on_change: bool = False
    gen_uid: IdGenerator = uuid_generator
    session_key: Optional[str] = None

    def merge(self, overrides: Optional[Mapping[str, Any]] = None) -> "DeskConfig":
        """
        Build a new configuration from this one and caller overrides.

        Keys whose value is None keep the current value. Camel-case keys of
        the browser desk (``saveOnChange``, ``genUID``...) are accepted.

        Args:
            overrides: Mapping of field name to new value

        Returns:
            New DeskConfig

        Raises:
            ConfigError: If a key is unknown or a value has the wrong shape
        """
        if not overrides:
            return self

        known = {f.name for f in fields(self)}
        changes: Dict[str, Any] = {}

        for key, value in overrides.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ConfigError("Unknown configuration key", details=key)
            if value is None:
                continue

            if name == 'margins':
                value = self.margins.merge(value)
            elif name == 'pages':
                value = self._coerce_pages(value)
            elif name in ('on_change', 'gen_uid'):
                if not callable(value):
                    raise ConfigError(f"Configuration value '{name}' must be callable")
            elif name == 'on_page':
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ConfigError(f"Configuration value '{name}' must be an integer",
                                      details=repr(value))
                if value < 1:
                    raise ConfigError("Starting page number must be >= 1", details=str(value))
            elif name == 'save_on_change':
                value = bool(value)

            changes[name] = value

        logger.debug(f"Configuration overrides applied: {sorted(changes)}")
        return replace(self, **changes)

    @staticmethod
    def _coerce_pages(value: Any) -> Tuple[Mapping[str, Any], ...]:
        if isinstance(value, Mapping) or not hasattr(value, '__iter__'):
            raise ConfigError("Initial pages must be a sequence of page descriptors")
        pages = tuple(value)
        for page in pages:
            if not isinstance(page, Mapping):
                raise ConfigError("Page descriptor must be a mapping", details=repr(page))
        return pages


DEFAULT_CONFIG = DeskConfig()


def build_config(overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> DeskConfig:
    """
    Build a configuration from the defaults.

    Args:
        overrides: Mapping of overrides
        **kwargs: Further overrides, applied after ``overrides``

    Returns:
        DeskConfig
    """
    merged: Dict[str, Any] = dict(overrides or {})
    merged.update(kwargs)
    return DEFAULT_CONFIG.merge(merged)
