"""
Tests for core/helpers.py.
"""

import pytest

from core.helpers import calculate_pagination, clamp_page


class TestClampPage:
    @pytest.mark.parametrize(
        "page, per_page, expected",
        [
            (None, None, (1, 20)),
            (0, 10, (1, 10)),
            (-3, 10, (1, 10)),
            (4, 500, (4, 100)),
            (2, 0, (2, 1)),
        ],
    )
    def test_normalizes(self, page, per_page, expected):
        assert clamp_page(page, per_page) == expected

    def test_custom_bounds(self):
        assert clamp_page(1, None, default_size=5, max_size=3) == (1, 3)


class TestCalculatePagination:
    def test_middle_page(self):
        meta = calculate_pagination(total=95, page=2, per_page=20)

        assert meta["total_pages"] == 5
        assert meta["has_next"] is True
        assert meta["has_previous"] is True
        assert meta["next_page"] == 3
        assert meta["previous_page"] == 1

    def test_last_page(self):
        meta = calculate_pagination(total=40, page=2, per_page=20)

        assert meta["has_next"] is False
        assert meta["next_page"] is None

    def test_empty(self):
        meta = calculate_pagination(total=0, page=1, per_page=20)

        assert meta["total_pages"] == 0
        assert meta["has_previous"] is False

    def test_zero_page_size(self):
        assert calculate_pagination(total=10, page=1, per_page=0)["total_pages"] == 0
