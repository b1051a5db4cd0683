"""列表检索分页单元测试。"""

import pytest

from src.core.application.pagination import SearchPaginator
from src.core.domain.exceptions import ValidationError


def _item(name: str, description: str, category: str, status: str) -> dict[str, str]:
    return {
        "name": name,
        "description": description,
        "category": category,
        "status": status,
    }


ITEMS = [
    _item("Drip Irrigation Subsidy", "water saving", "Irrigation", "Active"),
    _item("Soil Health Card", "soil testing", "Soil Management", "Active"),
    _item("Tractor Loan", "equipment credit", "Equipment", "Closed"),
    _item("Solar Pump", "pumps for irrigation", "Irrigation", "Active"),
    _item("Crop Insurance", "weather risk", "Crop Insurance", "Active"),
]


@pytest.fixture
def paginator() -> SearchPaginator:
    return SearchPaginator()


class TestFilter:
    def test_query_matches_any_text_field(self, paginator):
        result = paginator.filter(ITEMS, query="IRRIGATION")
        assert [i["name"] for i in result] == ["Drip Irrigation Subsidy", "Solar Pump"]

    def test_blank_query_returns_everything(self, paginator):
        assert paginator.filter(ITEMS, query="   ") == ITEMS

    def test_filters_are_anded(self, paginator):
        result = paginator.filter(
            ITEMS, filters={"category": "irrigation", "status": "active"}
        )
        assert len(result) == 2

        result = paginator.filter(
            ITEMS, filters={"category": "equipment", "status": "active"}
        )
        assert result == []

    def test_empty_filter_values_ignored(self, paginator):
        assert paginator.filter(ITEMS, filters={"category": None, "status": ""}) == ITEMS


class TestPaginate:
    def test_pagination_metadata(self, paginator):
        page = paginator.paginate(ITEMS, page=2, page_size=2)

        assert [i["name"] for i in page.items] == ["Tractor Loan", "Solar Pump"]
        assert page.pagination.current_page == 2
        assert page.pagination.total_pages == 3
        assert page.pagination.total_results == 5
        assert page.pagination.has_next_page is True
        assert page.pagination.has_prev_page is True

    def test_pages_concatenate_to_filtered_list(self, paginator):
        expected = paginator.filter(ITEMS, filters={"status": "active"})
        collected = []
        page_number = 1
        while True:
            page = paginator.paginate(
                ITEMS, filters={"status": "active"}, page=page_number, page_size=3
            )
            collected.extend(page.items)
            if not page.pagination.has_next_page:
                break
            page_number += 1

        assert collected == expected

    def test_page_beyond_range_is_empty(self, paginator):
        page = paginator.paginate(ITEMS, page=10, page_size=2)

        assert page.items == []
        assert page.pagination.has_next_page is False

    def test_no_results(self, paginator):
        page = paginator.paginate(ITEMS, query="nothing-matches")

        assert page.pagination.total_results == 0
        assert page.pagination.total_pages == 0
        assert page.pagination.has_prev_page is False

    def test_page_below_one_treated_as_first(self, paginator):
        page = paginator.paginate(ITEMS, page=0, page_size=2)
        assert page.pagination.current_page == 1

    def test_invalid_page_size_rejected(self, paginator):
        with pytest.raises(ValidationError):
            paginator.paginate(ITEMS, page_size=0)
