"""Tests for configuration, id generation and logging setup."""

import dataclasses
import logging

import pytest

from paperdesk import ConfigError, DEFAULT_CONFIG, DeskConfig, Margins, build_config
from paperdesk.utils.ids import SequentialIdGenerator, uuid_generator
from paperdesk.utils.rich_logger import setup_logging


class TestDeskConfig:
    """Test cases for DeskConfig."""

    def test_defaults(self):
        """Test the default configuration values."""
        config = DeskConfig()

        assert config.holder == "desk-editor"
        assert config.height == "1056px"
        assert config.width == "815px"
        assert config.spacing == "20px"
        assert config.margins == Margins(15, 15, 15, 15)
        assert config.block_class == "desk-block"
        assert config.page_class == "desk-page"
        assert config.on_page == 1
        assert config.save_on_change is False
        assert config.pages == ()
        assert config.gen_uid is uuid_generator

    def test_config_is_immutable(self):
        """Test a configuration cannot be mutated in place."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.save_on_change = True

    def test_merge_returns_new_config(self):
        """Test merging leaves the defaults untouched."""
        config = DEFAULT_CONFIG.merge({'save_on_change': True, 'holder': 'editor'})

        assert config.save_on_change is True
        assert config.holder == 'editor'
        assert DEFAULT_CONFIG.save_on_change is False
        assert DEFAULT_CONFIG.holder == "desk-editor"

    def test_merge_accepts_camel_case_keys(self):
        """Test browser-style keys map onto fields."""
        config = DEFAULT_CONFIG.merge({'saveOnChange': True, 'onPage': 2, 'pageClass': 'sheet'})

        assert config.save_on_change is True
        assert config.on_page == 2
        assert config.page_class == 'sheet'

    def test_merge_skips_none(self):
        """Test None values keep the current value."""
        config = DEFAULT_CONFIG.merge({'holder': None})

        assert config.holder == "desk-editor"

    def test_merge_margins_field_by_field(self):
        """Test partial margins keep the other sides."""
        config = DEFAULT_CONFIG.merge({'margins': {'left': 40}})

        assert config.margins == Margins(left=40, right=15, top=15, bottom=15)

    def test_merge_pages_to_tuple(self):
        """Test initial pages are stored as a tuple."""
        config = DEFAULT_CONFIG.merge({'pages': [{'id': 'a'}]})

        assert config.pages == ({'id': 'a'},)

    @pytest.mark.parametrize("overrides", [
        {'unknown': 1},
        {'gen_uid': 'not callable'},
        {'on_change': 42},
        {'on_page': 0},
        {'on_page': '2'},
        {'margins': {'middle': 3}},
        {'margins': 5},
        {'pages': {'id': 'a'}},
        {'pages': ['not a mapping']},
    ])
    def test_merge_rejects_invalid(self, overrides):
        """Test invalid overrides raise ConfigError."""
        with pytest.raises(ConfigError):
            DEFAULT_CONFIG.merge(overrides)

    def test_build_config_kwargs_win(self):
        """Test keyword overrides are applied after the mapping."""
        config = build_config({'holder': 'one'}, holder='two', save_on_change=True)

        assert config.holder == 'two'
        assert config.save_on_change is True

    @pytest.mark.parametrize("key", ['debounce_changes', 'debounceChanges'])
    def test_debounce_is_not_accepted(self, key):
        """Test timer based batching is not a configuration option."""
        with pytest.raises(ConfigError):
            build_config({key: 250})

    def test_config_error_message(self):
        """Test the error names the offending key."""
        with pytest.raises(ConfigError) as exc_info:
            build_config(colour='blue')

        assert str(exc_info.value) == "Unknown configuration key: colour"


class TestIdGenerators:
    """Test cases for id generators."""

    def test_uuid_generator(self):
        first, second = uuid_generator(), uuid_generator()

        assert first != second
        assert first.count('-') == 4

    def test_sequential_generator(self):
        generator = SequentialIdGenerator("page")

        assert [generator(), generator()] == ["page_1", "page_2"]

    def test_sequential_generator_skips_reserved(self):
        generator = SequentialIdGenerator("page")

        assert generator.reserve("page_1") is True
        assert generator.reserve("page_1") is False
        assert generator() == "page_2"

    def test_sequential_generator_requires_prefix(self):
        with pytest.raises(ValueError):
            SequentialIdGenerator("")


class TestSetupLogging:
    """Test cases for logging setup."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root_logger = logging.getLogger()
        handlers, level = list(root_logger.handlers), root_logger.level
        yield
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)

    def test_rich_handler_installed(self):
        from rich.logging import RichHandler

        setup_logging("DEBUG")

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert any(isinstance(handler, RichHandler) for handler in root_logger.handlers)

    def test_standard_logging(self):
        setup_logging("ERROR", use_rich=False)

        assert logging.getLogger().level == logging.ERROR

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            setup_logging("LOUD")
