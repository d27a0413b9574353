"""
Tests for query compilation.
"""

import logging

import pytest

from datamagic.core.exceptions import (
    FieldTypeLookupError,
    GeocodingError,
    InvalidValueError,
    QueryError,
    RangeParseError,
)
from datamagic.query import CompiledQuery, QueryCompiler, from_params


DEFAULT_META = {"from": 0, "size": 20, "_source": {"exclude": ["_*"]}}


def metadata_of(body):
    return {k: v for k, v in body.items() if k != "query"}


class TestQueries:
    """Query sections for the supported parameter forms."""

    def test_blank_query(self, compiler):
        """Test that no params match everything."""
        body = compiler.compile({}).to_dict()

        assert body["query"] == {"match_all": {}}
        assert metadata_of(body) == DEFAULT_META

    def test_exact_match(self, compiler):
        """Test a plain field."""
        body = compiler.compile({"zipcode": "35762"}).to_dict()

        assert body["query"] == {"match": {"zipcode": {"query": "35762"}}}
        assert metadata_of(body) == DEFAULT_META

    def test_nested_field(self, compiler):
        """Test a dotted field path."""
        body = compiler.compile({"school.zip": "35762"}).to_dict()

        assert body["query"] == {"match": {"school.zip": {"query": "35762"}}}

    def test_name_field(self, compiler):
        """Test case-insensitive prefix matching on a name field."""
        body = compiler.compile({"city": "new YORK"}).to_dict()

        assert body["query"] == {"wildcard": {"_city": {"value": "new* york*"}}}

    def test_integer_list(self, compiler):
        """Test matching from a list of integers."""
        body = compiler.compile({"age": "10,20,40"}).to_dict()

        assert body["query"] == {"filtered": {
            "query": {"match_all": {}},
            "filter": {"terms": {"age": [10, 20, 40]}},
        }}

    @pytest.mark.parametrize("expression,bounds", [
        ("10..", [{"gte": 10}]),
        ("..10", [{"lte": 10}]),
        ("10..20", [{"gte": 10, "lte": 20}]),
        ("10..20,30..40", [{"gte": 10, "lte": 20}, {"gte": 30, "lte": 40}]),
    ])
    def test_range(self, compiler, expression, bounds):
        """Test open, closed and multiple ranges."""
        body = compiler.compile({"age__range": expression}).to_dict()

        assert body["query"] == {"filtered": {
            "query": {"match_all": {}},
            "filter": {"or": [{"range": {"age": bound}} for bound in bounds]},
        }}

    def test_range_values_are_numbers(self, compiler):
        """Test that range bounds are converted from text."""
        body = compiler.compile({"population__range": "1000.."}).to_dict()

        assert body["query"]["filtered"]["filter"] == {
            "or": [{"range": {"population": {"gte": 1000}}}]
        }

    @pytest.mark.parametrize("key", ["state__ne", "state__not"])
    def test_negation(self, compiler, key):
        """Test both negation suffixes."""
        body = compiler.compile({key: "CA"}).to_dict()

        assert body["query"] == {
            "bool": {"must_not": [{"match": {"state": {"query": "CA"}}}]}
        }

    def test_match_and_negation(self, compiler):
        """Test matching one field and negating another."""
        body = compiler.compile({"name": "San Francisco", "state__ne": "CA"}).to_dict()

        assert body["query"] == {"bool": {
            "must": [{"match": {"name": {"query": "San Francisco"}}}],
            "must_not": [{"match": {"state": {"query": "CA"}}}],
        }}

    def test_several_matches(self, compiler):
        """Test that several positive fields are all required."""
        body = compiler.compile({"name": "Boston", "state": "MA"}).to_dict()

        assert body["query"] == {"bool": {"must": [
            {"match": {"name": {"query": "Boston"}}},
            {"match": {"state": {"query": "MA"}}},
        ]}}

    def test_negation_with_range(self, compiler):
        """Test negation combined with a filter."""
        body = compiler.compile({"state__ne": "CA", "age__range": "10.."}).to_dict()

        assert body["query"] == {"filtered": {
            "query": {"bool": {"must_not": [{"match": {"state": {"query": "CA"}}}]}},
            "filter": {"or": [{"range": {"age": {"gte": 10}}}]},
        }}

    def test_filters_on_different_fields_are_ored(self, compiler):
        """Test cross-field filters share one or list in param order."""
        body = compiler.compile({"age": "5", "population__range": "..100"}).to_dict()

        assert body["query"]["filtered"]["filter"] == {"or": [
            {"terms": {"age": [5]}},
            {"range": {"population": {"lte": 100}}},
        ]}


class TestLocation:
    """Zip code and distance searches."""

    def test_location(self, compiler):
        """Test a geo-distance filter."""
        body = compiler.compile({}, {"zip": "94132", "distance": "30mi"}).to_dict()

        assert body["query"] == {"filtered": {
            "query": {"match_all": {}},
            "filter": {"geo_distance": {
                "distance": "30mi",
                "location": {"lat": 37.7211, "lon": -122.4754},
            }},
        }}
        assert metadata_of(body) == DEFAULT_META

    def test_location_comes_after_other_filters(self, compiler):
        """Test geo ordering."""
        body = compiler.compile(
            {"age__range": "1..2"}, {"zip": "94132", "distance": "1km"}
        ).to_dict()

        filters = body["query"]["filtered"]["filter"]["or"]
        assert "range" in filters[0]
        assert "geo_distance" in filters[1]

    def test_zip_without_distance_is_ignored(self, compiler):
        """Test that a zip alone does not filter."""
        assert compiler.compile({}, {"zip": "94132"}).query == {"match_all": {}}

    def test_unknown_zip(self, compiler):
        """Test a zip code missing from the table."""
        with pytest.raises(GeocodingError, match="00000"):
            compiler.compile({}, {"zip": "00000", "distance": "1mi"})

    def test_no_geocoder(self, data_config):
        """Test location search without a geocoder."""
        with pytest.raises(GeocodingError):
            QueryCompiler(data_config).compile({}, {"zip": "94132", "distance": "1mi"})


class TestMetadata:
    """Pagination, projection and sort."""

    def test_pagination(self, compiler):
        """Test page offsets."""
        body = compiler.compile({}, {"page": 3, "per_page": 11}).to_dict()

        assert metadata_of(body) == {"from": 33, "size": 11, "_source": {"exclude": ["_*"]}}

    def test_page_size_limit(self, compiler):
        """Test the maximum page size."""
        body = compiler.compile({}, {"page": 0, "per_page": 2000}).to_dict()

        assert metadata_of(body) == {"from": 0, "size": 100, "_source": {"exclude": ["_*"]}}

    def test_fields(self, compiler):
        """Test choosing fields to return."""
        body = compiler.compile({}, {"fields": ["id", "school.name"]}).to_dict()

        assert metadata_of(body) == {
            "from": 0,
            "size": 20,
            "_source": False,
            "fields": ["id", "school.name"],
        }

    def test_sort(self, compiler):
        """Test a single sort field."""
        body = compiler.compile({}, {"sort": "population:asc"}).to_dict()

        assert body["sort"] == [{"population": {"order": "asc"}}]

    def test_sort_multiple(self, compiler):
        """Test sorting by several fields."""
        body = compiler.compile({}, {"sort": "state:desc, population:asc,name"}).to_dict()

        assert body["sort"] == [
            {"state": {"order": "desc"}},
            {"population": {"order": "asc"}},
            {"name": {"order": "asc"}},
        ]

    def test_compiled_query_fields(self, compiler):
        """Test the CompiledQuery attributes."""
        compiled = compiler.compile({}, {"page": 1, "per_page": 5, "sort": "name"})

        assert isinstance(compiled, CompiledQuery)
        assert compiled.from_ == 5
        assert compiled.size == 5
        assert compiled.fields is None
        assert compiled.sort == [{"name": {"order": "asc"}}]

    def test_configured_default_page_size(self, data_config):
        """Test a compiler with its own page size limits."""
        compiler = QueryCompiler(data_config, default_per_page=7, max_per_page=9)

        assert compiler.compile({}).size == 7
        assert compiler.compile({}, {"per_page": 50}).size == 9


class TestCompilerProperties:
    """General behavior of compilation."""

    def test_deterministic(self, compiler):
        """Test that equal input gives equal output."""
        params = {"city": "Boston", "age__range": "1..5", "state__ne": "CA"}
        options = {"page": 2, "sort": "name:desc"}

        assert compiler.compile(params, options).to_dict() == compiler.compile(params, options).to_dict()

    def test_inputs_not_mutated(self, compiler):
        """Test that params and options are left as given."""
        params = {"age__range": "1..5"}
        options = {"fields": ["id"]}

        compiler.compile(params, options)

        assert params == {"age__range": "1..5"}
        assert options == {"fields": ["id"]}

    def test_symbol_like_keys(self, compiler):
        """Test that non-string keys compile like their text form."""
        from enum import Enum

        class Key(Enum):
            ZIPCODE = "zipcode"

        assert compiler.compile({Key.ZIPCODE: "1"}).query == compiler.compile({"zipcode": "1"}).query

    def test_every_request_has_metadata(self, compiler):
        """Test that from, size and _source are always present."""
        body = compiler.compile({"state__ne": "CA"}, {"sort": "name"}).to_dict()

        assert {"query", "from", "size", "_source"} <= set(body)

    def test_logs_compiled_query(self, compiler, caplog):
        """Test debug logging of the compiled request."""
        with caplog.at_level(logging.DEBUG, logger="datamagic"):
            compiler.compile({"zipcode": "1"})

        assert any("Compiled query" in record.message for record in caplog.records)


class TestErrors:
    """Compilation failures."""

    def test_bad_range(self, compiler):
        """Test a malformed range."""
        with pytest.raises(RangeParseError):
            compiler.compile({"age__range": "ten..twenty"})

    def test_bad_integer_list(self, compiler):
        """Test a non-numeric integer list."""
        with pytest.raises(InvalidValueError):
            compiler.compile({"age": "ten"})

    def test_bad_page(self, compiler):
        """Test non-numeric pagination."""
        with pytest.raises(QueryError):
            compiler.compile({}, {"page": "first"})

    def test_lookup_failure(self):
        """Test that a failing type lookup surfaces."""

        class Broken:
            def field_type(self, name):
                raise RuntimeError("config unavailable")

        with pytest.raises(FieldTypeLookupError):
            QueryCompiler(Broken()).compile({"city": "Boston"})


class TestFromParams:
    """The functional entry point."""

    def test_returns_mapping(self, data_config):
        """Test the plain-mapping result."""
        body = from_params({"age": "10,20"}, {}, data_config)

        assert body["query"]["filtered"]["filter"] == {"terms": {"age": [10, 20]}}
        assert body["size"] == 20

    def test_uses_default_geocoder(self):
        """Test geocoding without an explicit geocoder."""
        body = from_params({}, {"zip": "94110", "distance": "30mi"})

        location = body["query"]["filtered"]["filter"]["geo_distance"]["location"]
        assert location["lat"] == pytest.approx(37.75, abs=0.1)
        assert location["lon"] == pytest.approx(-122.41, abs=0.1)

    def test_no_config(self):
        """Test that every field is a default field without a config."""
        assert from_params({"city": "Boston"})["query"] == {"match": {"city": {"query": "Boston"}}}
