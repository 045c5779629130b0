"""Tests for SnapshotBuilder."""

import pytest

from paperdesk import Desk, MemorySurface, Page, PLACEHOLDER, SnapshotBuilder, Surface


class MergingSurface(Surface):
    """Surface whose cleaning merges every block into one."""

    placeholder = "&#8203;"

    def __init__(self):
        self.calls = []

    def find_holder(self, holder):
        return holder

    def attach(self, page):
        self.calls.append(('attach', page.id))

    def detach(self, page):
        self.calls.append(('detach', page.id))

    def clean(self, page):
        self.calls.append(('clean', page.id))
        if len(page) > 1:
            page.blocks = {0: " ".join(page.blocks[index] for index in page.indices())}


class TestBuildPageSnapshot:
    """Test cases for build_page_snapshot."""

    def test_all_blocks(self):
        page = Page("p", {0: 'a', 1: 'b'})

        assert SnapshotBuilder().build_page_snapshot(page) == {'id': 'p', 'blocks': {0: 'a', 1: 'b'}}

    def test_selected_blocks(self):
        page = Page("p", {0: 'a', 1: 'b', 2: 'c'})

        snapshot = SnapshotBuilder().build_page_snapshot(page, [2, 0])

        assert snapshot == {'id': 'p', 'blocks': {2: 'c', 0: 'a'}}

    def test_missing_block_omitted(self):
        """Test requested blocks that do not exist are silently left out."""
        page = Page("p", {0: 'a'})

        assert SnapshotBuilder().build_page_snapshot(page, [0, 9])['blocks'] == {0: 'a'}

    def test_empty_selection_means_all(self):
        page = Page("p", {0: 'a', 1: 'b'})

        assert SnapshotBuilder().build_page_snapshot(page, [])['blocks'] == {0: 'a', 1: 'b'}

    def test_placeholder_serialized_empty(self):
        page = Page("p", {0: PLACEHOLDER, 1: '&#8203;', 2: 'text'})

        blocks = SnapshotBuilder("&#8203;").build_page_snapshot(page)['blocks']

        assert blocks == {0: '', 1: '', 2: 'text'}

    def test_cleans_before_reading(self):
        """Test blocks merged away by cleaning are not reported."""
        surface = MergingSurface()
        page = Page("p", {0: 'one', 1: 'two'})
        page.surface = surface

        snapshot = SnapshotBuilder().build_page_snapshot(page, [0, 1])

        assert surface.calls == [('clean', 'p')]
        assert snapshot == {'id': 'p', 'blocks': {0: 'one two'}}

    def test_memory_surface_renumbers_sparse_blocks(self):
        surface = MemorySurface()
        page = Page("p", {0: 'a', 5: 'b'})
        page.surface = surface

        snapshot = SnapshotBuilder().build_page_snapshot(page)

        assert snapshot['blocks'] == {0: 'a', 1: 'b'}


class TestBuildDocumentSnapshot:
    """Test cases for build_document_snapshot."""

    @pytest.fixture
    def desk(self):
        return Desk({'pages': [{'id': 'a', 'blocks': {0: 'x'}}, {'id': 'b', 'blocks': {0: '&#8203;'}}]},
                    surface=MergingSurface())

    def test_all_pages(self, desk):
        snapshot = desk.snapshot_builder.build_document_snapshot(desk)

        assert snapshot == {'pages': {1: {'id': 'a', 'blocks': {0: 'x'}},
                                      2: {'id': 'b', 'blocks': {0: ''}}}}

    def test_one_page(self, desk):
        assert desk.snapshot_builder.build_document_snapshot(desk, 1) == {
            'pages': {1: {'id': 'a', 'blocks': {0: 'x'}}}
        }

    @pytest.mark.parametrize("page_number", [0, 3, "1", 1.5])
    def test_invalid_page(self, desk, page_number):
        assert desk.snapshot_builder.build_document_snapshot(desk, page_number) == {'pages': {}}

    def test_uses_surface_placeholder(self, desk):
        assert desk.snapshot_builder.placeholder == "&#8203;"

    def test_snapshot_cleans_every_page(self, desk):
        desk.surface.calls.clear()

        desk.save()

        assert desk.surface.calls == [('clean', 'a'), ('clean', 'b')]
