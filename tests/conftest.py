"""
Pytest configuration for paperdesk
"""

import logging
import sys
from unittest.mock import Mock

import pytest

from paperdesk import Desk, MemorySurface
from paperdesk.utils.ids import SequentialIdGenerator


@pytest.fixture(autouse=True)
def configure_logging():
    """Show only warnings and errors on the console during tests."""
    root_logger = logging.getLogger()
    previous_level = root_logger.level

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.removeHandler(console_handler)
    root_logger.setLevel(previous_level)


@pytest.fixture
def surface():
    """In-memory rendering surface owning the default holder."""
    return MemorySurface()


@pytest.fixture
def id_generator():
    """Deterministic page id generator (page_1, page_2, ...)."""
    return SequentialIdGenerator("page")


@pytest.fixture
def on_change():
    """Change callback recording every snapshot."""
    return Mock()


@pytest.fixture
def make_desk(surface, id_generator, on_change):
    """Factory building a desk from page descriptors."""
    def factory(pages=None, **overrides):
        config = {
            'pages': pages or [],
            'gen_uid': id_generator,
            'on_change': on_change,
            'session_key': 'test-session',
        }
        config.update(overrides)
        return Desk(config, surface=surface)

    return factory


@pytest.fixture
def three_page_desk(make_desk):
    """Desk with pages a, b and c holding one block each."""
    return make_desk([
        {'id': 'a', 'blocks': {0: 'alpha one'}},
        {'id': 'b', 'blocks': {0: 'bravo'}},
        {'id': 'c', 'blocks': {0: 'charlie two three'}},
    ])
