"""Tests for the in-memory render surface."""

import pytest

from bugzilla_widget.exceptions import RegionNotFoundError, SurfaceError
from bugzilla_widget.surface import (
    BUG_LIST,
    CATEGORY_COUNT,
    CATEGORY_HEAD,
    CATEGORY_NEW_COUNT,
    TreeSurface,
)


class TestTreeSurface:
    """Tests for TreeSurface."""

    def test_category_box_has_standard_regions(self):
        """Should build head, counts and list regions."""
        surface = TreeSurface()
        surface.add_category("assigned", "Assigned to me")

        for marker in (CATEGORY_HEAD, CATEGORY_COUNT, CATEGORY_NEW_COUNT, BUG_LIST):
            assert surface.region("assigned", marker).has_class(marker)

    def test_bug_list_starts_hidden(self):
        """Should start with the bug list collapsed."""
        surface = TreeSurface()
        surface.add_category("assigned")

        assert surface.region("assigned", BUG_LIST).visible is False

    def test_duplicate_category_raises(self):
        """Should reject a second box with the same name."""
        surface = TreeSurface()
        surface.add_category("assigned")

        with pytest.raises(SurfaceError):
            surface.add_category("assigned")

    def test_unknown_region_raises(self):
        """Should raise RegionNotFoundError for unknown regions."""
        surface = TreeSurface()
        surface.add_category("assigned")

        with pytest.raises(RegionNotFoundError):
            surface.region("reported")
        with pytest.raises(RegionNotFoundError):
            surface.region("assigned", "no-such-marker")

    def test_text_and_children(self):
        """Should set text and manage children."""
        surface = TreeSurface()
        surface.add_category("assigned")
        region = surface.region("assigned", BUG_LIST)

        node = surface.create_node("1 - Crash", ("bug",))
        surface.append_child(region, node)
        assert region.children == [node]

        surface.clear_children(region)
        assert region.children == []

        count = surface.region("assigned", CATEGORY_COUNT)
        surface.set_text(count, 3)
        assert surface.get_text(count) == "3"

    def test_click_calls_handlers(self):
        """Should dispatch clicks to registered handlers."""
        surface = TreeSurface()
        surface.add_category("assigned")
        head = surface.region("assigned", CATEGORY_HEAD)
        calls = []

        surface.on_click(head, lambda: calls.append("a"))
        surface.on_click(head, lambda: calls.append("b"))
        surface.click(head)

        assert calls == ["a", "b"]

    def test_render_text_shows_expanded_lists(self):
        """Should list bugs only for visible lists."""
        surface = TreeSurface()
        surface.add_category("assigned", "Assigned")
        surface.add_category("reported", "Reported")
        assigned = surface.region("assigned", BUG_LIST)
        reported = surface.region("reported", BUG_LIST)
        surface.append_child(assigned, surface.create_node("1 - Crash"))
        surface.append_child(reported, surface.create_node("2 - Hang"))

        surface.set_visible(assigned, True)

        assert surface.render_text().splitlines() == [
            "Assigned 0 (0)",
            "  1 - Crash",
            "Reported 0 (0)",
        ]
