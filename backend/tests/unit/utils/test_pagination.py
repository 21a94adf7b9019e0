"""
Unit Tests for pagination metadata
"""
import pytest

from app.utils.pagination import pagination_meta


class TestPaginationMeta:

    def test_first_of_several_pages(self):
        meta = pagination_meta(page=1, limit=10, total=25)

        assert meta == {
            "page": 1,
            "limit": 10,
            "total": 25,
            "pages": 3,
            "has_next": True,
            "has_previous": False,
        }

    def test_last_page(self):
        meta = pagination_meta(page=3, limit=10, total=25)

        assert meta["has_next"] is False
        assert meta["has_previous"] is True

    def test_exact_multiple(self):
        assert pagination_meta(page=1, limit=5, total=10)["pages"] == 2

    @pytest.mark.parametrize("page", [1, 2])
    def test_empty_result(self, page):
        meta = pagination_meta(page=page, limit=10, total=0)

        assert meta["pages"] == 0
        assert meta["has_next"] is False
