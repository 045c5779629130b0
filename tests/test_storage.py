"""Tests for JSON storage."""

import json

import pytest

from paperdesk import ContentChanged, Desk, Overflow, StorageError
from paperdesk.storage import dump_snapshot, load_messages, load_pages


def write_json(path, data):
    path.write_text(json.dumps(data), encoding='utf-8')
    return path


class TestLoadPages:
    """Test cases for load_pages."""

    def test_snapshot_ordered_numerically(self, tmp_path):
        path = write_json(tmp_path / "doc.json", {
            'pages': {
                '10': {'id': 'ten'},
                '2': {'id': 'two'},
                '1': {'id': 'one'},
            }
        })

        assert [page['id'] for page in load_pages(path)] == ['one', 'two', 'ten']

    def test_descriptor_list(self, tmp_path):
        path = write_json(tmp_path / "doc.json", [{'id': 'a'}, {'blocks': {'0': 'x'}}])

        assert load_pages(path) == [{'id': 'a'}, {'blocks': {'0': 'x'}}]

    def test_pages_list(self, tmp_path):
        path = write_json(tmp_path / "doc.json", {'pages': [{'id': 'a'}]})

        assert load_pages(path) == [{'id': 'a'}]

    def test_missing_file(self, tmp_path):
        with pytest.raises(StorageError):
            load_pages(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "doc.json"
        path.write_text("{not json", encoding='utf-8')

        with pytest.raises(StorageError) as exc_info:
            load_pages(path)

        assert "Invalid JSON" in str(exc_info.value)

    @pytest.mark.parametrize("data", [
        {'title': 'no pages'},
        "a string",
        {'pages': {'first': {'id': 'a'}}},
        [1, 2],
    ])
    def test_unrecognized_layout(self, tmp_path, data):
        path = write_json(tmp_path / "doc.json", data)

        with pytest.raises(StorageError):
            load_pages(path)


class TestLoadMessages:
    """Test cases for load_messages."""

    def test_load(self, tmp_path):
        path = write_json(tmp_path / "messages.json", [
            {'type': 'content_changed', 'page_id': 'a', 'blocks': {'0': 'x'}},
            {'type': 'overflow', 'page_id': 'a', 'content': ['y']},
        ])

        assert load_messages(path) == [ContentChanged('a', {0: 'x'}), Overflow('a', ('y',))]

    @pytest.mark.parametrize("data", [
        {'type': 'overflow'},
        ['not a record'],
        [{'type': 'explode', 'page_id': 'a'}],
    ])
    def test_invalid(self, tmp_path, data):
        path = write_json(tmp_path / "messages.json", data)

        with pytest.raises(StorageError):
            load_messages(path)


class TestDumpSnapshot:
    """Test cases for dump_snapshot."""

    def test_roundtrip_through_desk(self, tmp_path):
        """Test a saved snapshot reloads into the same pages."""
        desk = Desk({'pages': [{'id': 'a', 'blocks': {0: 'one'}}, {'id': 'b', 'blocks': {0: 'two', 1: 'zwei'}}]})

        path = dump_snapshot(desk.save(), tmp_path / "out" / "doc.json")
        reloaded = Desk({'pages': load_pages(path)})

        assert reloaded.save() == desk.save()

    def test_non_ascii_kept(self, tmp_path):
        path = dump_snapshot({'pages': {1: {'id': 'a', 'blocks': {0: 'zażółć'}}}}, tmp_path / "doc.json")

        assert 'zażółć' in path.read_text(encoding='utf-8')
