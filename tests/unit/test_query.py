import pytest

from src.domain.query import build_list_params, normalize_page


class TestBuildListParams:
    def test_minimal(self):
        assert build_list_params(1, 10) == {"page": 1, "limit": 10}

    def test_blank_search_dropped(self):
        assert "search" not in build_list_params(1, 10, search="   ")

    def test_search_is_trimmed(self):
        assert build_list_params(1, 10, search=" abebe ")["search"] == "abebe"

    def test_all_sentinel_and_empty_filters_dropped(self):
        params = build_list_params(2, 12, filters={"city": "All", "status": "", "faculty": None, "type": "sick"})
        assert params == {"page": 2, "limit": 12, "type": "sick"}

    def test_schema_sentinel(self):
        from src.rules.models import FilterRule, ResourceSchema

        schema = ResourceSchema(
            title="X",
            path="/x",
            filters=[FilterRule(name="status", label="Status", choices=["any", "open"], all_value="any")],
        )
        assert build_list_params(1, 10, filters={"status": "any"}, schema=schema) == {"page": 1, "limit": 10}
        assert build_list_params(1, 10, filters={"status": "open"}, schema=schema)["status"] == "open"

    def test_page_floor(self):
        assert build_list_params(0, 10)["page"] == 1


class TestNormalizePage:
    def test_top_level_items_key(self):
        page = normalize_page({"students": [{"_id": "1"}], "totalPages": 4, "currentPage": 2, "total": 31}, "students")
        assert page.items == [{"_id": "1"}]
        assert (page.total_pages, page.current_page, page.total) == (4, 2, 31)

    def test_nested_data_with_pagination(self):
        payload = {
            "success": True,
            "data": {
                "departments": [{"_id": "d1"}],
                "pagination": {"currentPage": 1, "totalPages": 2, "totalItems": 13},
            },
        }
        page = normalize_page(payload, "departments")
        assert page.items == [{"_id": "d1"}]
        assert page.total_pages == 2
        assert page.total == 13

    def test_data_list(self):
        page = normalize_page({"success": True, "data": [{"_id": "a"}, {"_id": "b"}]}, "registrations", page=3)
        assert len(page.items) == 2
        assert page.total_pages == 1
        assert page.current_page == 3

    def test_bare_list(self):
        page = normalize_page([{"_id": "a"}], "courses")
        assert page.total == 1

    def test_missing_key_falls_back_to_items(self):
        assert normalize_page({"items": [{"_id": "x"}]}, "courses").items == [{"_id": "x"}]

    def test_none_is_empty(self):
        page = normalize_page(None, "courses")
        assert page.items == []
        assert page.total_pages == 1

    def test_unexpected_payload(self):
        with pytest.raises(ValueError):
            normalize_page("<html>", "courses")
