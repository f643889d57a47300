"""Unit tests for the query translator: no store, no I/O."""

import pytest
from pymongo import ASCENDING, DESCENDING

from app.services.errors import InvalidQueryError
from app.services.query_translator import (
    SEARCH_FILTER_FIELDS,
    MovieQuery,
    build_filter,
    build_pagination,
    build_sort,
    translate,
)


class TestFilter:
    def test_no_params_matches_everything(self):
        assert build_filter({}) == {}

    def test_string_fields(self):
        f = build_filter({"genre": "Sci-Fi", "director": "Christopher Nolan"})
        assert f == {"genre": "Sci-Fi", "director": "Christopher Nolan"}

    def test_numeric_fields_coerced(self):
        f = build_filter({"releaseYear": "2010", "rating": "9"})
        assert f == {"releaseYear": 2010, "rating": 9}

    def test_non_numeric_value_dropped(self):
        f = build_filter({"releaseYear": "twenty-ten", "genre": "Drama"})
        assert f == {"genre": "Drama"}

    def test_empty_value_ignored(self):
        assert build_filter({"genre": "", "rating": None}) == {}

    def test_unknown_params_ignored(self):
        assert build_filter({"title": "Inception", "foo": "bar"}) == {}

    def test_search_fields_exclude_director(self):
        f = build_filter({"director": "Nolan", "rating": "8"}, SEARCH_FILTER_FIELDS)
        assert f == {"rating": 8}

    @pytest.mark.parametrize("raw", ["1_000", "\u0663", "12abc", str(2**63)])
    def test_non_decimal_or_out_of_range_dropped(self, raw):
        assert build_filter({"releaseYear": raw}) == {}

    def test_signed_values_parsed(self):
        assert build_filter({"rating": "+5", "releaseYear": " -3 "}) == {"rating": 5, "releaseYear": -3}

    def test_strict_rejects_non_numeric(self):
        with pytest.raises(InvalidQueryError):
            build_filter({"rating": "high"}, strict=True)


class TestSort:
    def test_absent(self):
        assert build_sort(None) is None
        assert build_sort("") is None

    def test_ascending(self):
        s = build_sort("releaseYear")
        assert s.field == "releaseYear"
        assert s.direction == ASCENDING
        assert not s.descending

    def test_descending_prefix_stripped(self):
        s = build_sort("-rating")
        assert s.field == "rating"
        assert s.direction == DESCENDING
        assert s.descending

    def test_id_maps_to_store_key(self):
        assert build_sort("-id").field == "_id"

    def test_unknown_field_ignored(self):
        assert build_sort("-budget") is None

    def test_strict_rejects_unknown_field(self):
        with pytest.raises(InvalidQueryError):
            build_sort("budget", strict=True)


class TestPagination:
    def test_defaults(self):
        assert build_pagination(None, None) == (1, 10)

    def test_explicit_values(self):
        assert build_pagination("3", "25") == (3, 25)

    @pytest.mark.parametrize("raw", ["0", "-2", "abc", "1.5", ""])
    def test_invalid_falls_back(self, raw):
        assert build_pagination(raw, raw) == (1, 10)

    def test_limit_zero_means_default(self):
        assert build_pagination("1", "0") == (1, 10)

    def test_strict_rejects_non_positive(self):
        with pytest.raises(InvalidQueryError):
            build_pagination("0", None, strict=True)

    def test_strict_rejects_non_numeric_limit(self):
        with pytest.raises(InvalidQueryError):
            build_pagination(None, "lots", strict=True)

    def test_value_beyond_int64_falls_back(self):
        assert build_pagination(str(10**20), str(2**63)) == (1, 10)

    def test_strict_rejects_value_beyond_int64(self):
        with pytest.raises(InvalidQueryError):
            build_pagination(str(10**20), None, strict=True)

    def test_large_limit_not_capped(self):
        assert build_pagination("1", "100000") == (1, 100000)


class TestTranslate:
    def test_empty(self):
        q = translate({})
        assert q == MovieQuery()
        assert q.skip == 0

    def test_skip_computed_from_page_and_limit(self):
        q = translate({"page": "2", "limit": "5"})
        assert (q.page, q.limit, q.skip) == (2, 5, 5)

    def test_full_query(self):
        q = translate({
            "genre": "Sci-Fi",
            "rating": "9",
            "sort": "-releaseYear",
            "page": "3",
            "limit": "4",
            "unknown": "x",
        })
        assert q.filter == {"genre": "Sci-Fi", "rating": 9}
        assert q.sort.field == "releaseYear"
        assert q.sort.descending
        assert q.skip == 8

    def test_window_beyond_int64_resets_page(self):
        q = translate({"page": str(2**62), "limit": "10"})
        assert q.page == 1
        assert q.skip == 0

    def test_strict_rejects_window_beyond_int64(self):
        with pytest.raises(InvalidQueryError):
            translate({"page": str(2**62), "limit": "10"}, strict=True)

    def test_to_dict(self):
        d = translate({"sort": "title", "limit": "20"}).to_dict()
        assert d == {
            "filter": {},
            "sort": {"field": "title", "direction": ASCENDING},
            "page": 1,
            "limit": 20,
            "skip": 0,
        }

    def test_strict_passes_valid_params(self):
        q = translate({"genre": "Drama", "page": "2", "sort": "-rating"}, strict=True)
        assert q.page == 2
        assert q.filter == {"genre": "Drama"}
