# Roo Client Unit Tests - Query Construction

import pytest

from roo_client.query import (
    build_batch_query,
    build_inventory_query,
    build_query,
    serialize_query,
)


class TestBuildQuery:

    @pytest.mark.query
    def test_empty_and_default_values_are_omitted(self):
        """
        SCENARIO: Every option at its "no filter" value
        EXPECTED: No keys at all
        """
        config = {"search": "", "category": "", "status": "all", "sort": None, "active": None}
        assert build_query(config) == []
        assert build_query(None) == []
        assert build_query({}) == []

    @pytest.mark.query
    def test_canonical_order(self):
        a = build_query({"active": True, "sort": "name", "search": "tea", "category": "2", "status": "active"})
        b = build_query({"search": "tea", "status": "active", "category": "2", "active": True, "sort": "name"})

        assert a == b
        assert serialize_query(a) == "search=tea&category=2&status=active&sort=name&active=true"

    @pytest.mark.query
    def test_active_false_is_sent(self):
        assert build_query({"active": False}) == [("active", "false")]

    @pytest.mark.query
    @pytest.mark.parametrize("status", ["all", "ALL", "archived", ""])
    def test_status_outside_active_inactive_is_dropped(self, status):
        assert build_query({"status": status}) == []

    @pytest.mark.query
    def test_whitespace_search_is_dropped(self):
        assert build_query({"search": "   "}) == []

    @pytest.mark.query
    def test_unknown_keys_ignored(self):
        assert build_query({"page": 2, "search": "oil"}) == [("search", "oil")]

    @pytest.mark.query
    def test_input_not_mutated(self):
        config = {"search": " tea ", "status": "all", "active": True}
        snapshot = dict(config)
        build_query(config)
        assert config == snapshot

    @pytest.mark.query
    def test_serialization_escapes_values(self):
        assert serialize_query([("search", "a&b c")]) in ("search=a%26b+c", "search=a%26b%20c")
        assert serialize_query([]) == ""


class TestInventoryAndBatchQueries:

    @pytest.mark.query
    def test_inventory_status_passes_verbatim(self):
        pairs = build_inventory_query({"status": "Low Stock", "sortOrder": "desc", "category": "", "sortBy": "name"})
        assert pairs == [("status", "Low Stock"), ("sortBy", "name"), ("sortOrder", "desc")]

    @pytest.mark.query
    def test_inventory_all_status_dropped(self):
        assert build_inventory_query({"status": "all", "search": ""}) == []

    @pytest.mark.query
    def test_batch_query(self):
        assert build_batch_query() == []
        assert build_batch_query(include_expired=True, sort_by="expiry_date", limit=5) == [
            ("includeExpired", "true"),
            ("sortBy", "expiry_date"),
            ("limit", "5"),
        ]
