"""Tests for projecting engine results into the response contract."""

from fulltext_gateway.schemas.fulltext import SearchRequest
from fulltext_gateway.search.engine import EngineResponse
from fulltext_gateway.search.pagination import PointInTime
from fulltext_gateway.search.request_normalizer import normalize_search_request
from fulltext_gateway.search.response_projector import (
    project_facets,
    project_hit,
    project_response,
    project_timeline,
)
from tests.helpers.es_fakes import make_aggregations, make_hit, make_search_response


def _normalized(config, **fields):
    return normalize_search_request(SearchRequest.model_validate(fields), config)


class TestProjectHit:
    """Test hit field extraction."""

    def test_whitelisted_fields(self):
        """Test every normalized field is mapped."""
        hit = project_hit(make_hit("doc#42", 1700000000000, snippet="<em>timeout</em> after 30s"))

        assert hit.id == "doc#42"
        assert hit.sort == [1700000000000, "doc#42"]
        assert hit.timestamp == 1700000000000
        assert hit.level == "error"
        assert hit.service == "payments-api"
        assert hit.error_code == "E_TIMEOUT"
        assert hit.host == "node-1"
        assert hit.path == "/v1/charge"
        assert hit.message == "upstream timeout after 30s"
        assert hit.snippet == "<em>timeout</em> after 30s"
        assert hit.score == 1.5

    def test_missing_highlight_and_code(self):
        """Test optional fields stay empty."""
        hit = project_hit(make_hit("a", 1, code=None))
        assert hit.snippet is None
        assert hit.error_code is None

    def test_flattened_error_code(self):
        """Test a dotted error.code key in the source."""
        raw = make_hit("a", 1, code=None)
        raw["_source"]["error.code"] = "E_DNS"
        assert project_hit(raw).error_code == "E_DNS"

    def test_non_string_source_values_pass_through(self):
        """Test ECS-style object fields and numeric levels are copied as stored."""
        raw = make_hit("a", 1)
        raw["_source"]["host"] = {"name": "node-1", "ip": ["10.0.0.7"]}
        raw["_source"]["level"] = 3

        hit = project_hit(raw)

        assert hit.host == {"name": "node-1", "ip": ["10.0.0.7"]}
        assert hit.level == 3
        dumped = hit.model_dump(by_alias=True, mode="json")
        assert dumped["host"]["name"] == "node-1"
        assert dumped["level"] == 3

    def test_serialized_alias(self):
        """Test errorCode is the wire name."""
        dumped = project_hit(make_hit("a", 1)).model_dump(by_alias=True)
        assert dumped["errorCode"] == "E_TIMEOUT"


class TestProjectResponse:
    """Test page-level projection."""

    def test_next_cursor_is_last_sort(self, test_settings):
        """Test nextCursor equals the last hit's sort values."""
        response = EngineResponse.from_raw(
            make_search_response([make_hit("b", 2), make_hit("a", 1)], total=10)
        )
        result = project_response(response, PointInTime("pit-1", "1m"), _normalized(test_settings))

        assert result.ok is True
        assert result.total == 10
        assert result.next_cursor == [1, "a"]
        assert [hit.id for hit in result.hits] == ["b", "a"]

    def test_empty_page_has_null_cursor(self, test_settings):
        """Test nextCursor is null with no hits."""
        response = EngineResponse.from_raw(make_search_response([]))
        result = project_response(response, PointInTime("pit-1", "1m"), _normalized(test_settings))

        payload = result.to_payload()
        assert payload["nextCursor"] is None
        assert payload["hits"] == []

    def test_pit_copied(self, test_settings):
        """Test the current PIT is returned."""
        response = EngineResponse.from_raw(make_search_response([]))
        result = project_response(response, PointInTime("pit-2", "3m"), _normalized(test_settings))
        assert result.to_payload()["pit"] == {"id": "pit-2", "keep_alive": "3m"}

    def test_facets_and_timeline_included(self, test_settings):
        """Test both sections when requested and returned."""
        response = EngineResponse.from_raw(make_search_response([], aggregations=make_aggregations()))
        payload = project_response(
            response, PointInTime("pit-1", "1m"), _normalized(test_settings)
        ).to_payload()

        assert payload["facets"]["services"] == [{"key": "payments-api", "doc_count": 7}]
        assert payload["facets"]["levels"][1] == {"key": "warn", "doc_count": 2}
        assert payload["facets"]["errorCodes"] == [{"key": "E_TIMEOUT", "doc_count": 4}]
        assert len(payload["timeline"]) == 2

    def test_sections_omitted_when_not_requested(self, test_settings):
        """Test toggles gate the sections even if the engine returned data."""
        response = EngineResponse.from_raw(make_search_response([], aggregations=make_aggregations()))
        request = _normalized(test_settings, includeFacets=False, includeTimeline=False)
        payload = project_response(response, PointInTime("pit-1", "1m"), request).to_payload()

        assert "facets" not in payload
        assert "timeline" not in payload

    def test_sections_omitted_when_engine_returned_none(self, test_settings):
        """Test requested sections are absent without aggregation data."""
        response = EngineResponse.from_raw(make_search_response([]))
        payload = project_response(
            response, PointInTime("pit-1", "1m"), _normalized(test_settings)
        ).to_payload()

        assert "facets" not in payload
        assert "timeline" not in payload


class TestAggregationProjection:
    """Test facet/timeline extraction helpers."""

    def test_timeline_without_facets(self):
        """Test a timeline-only aggregation result."""
        aggs = make_aggregations(facets=False)
        assert project_facets(aggs) is None
        assert project_timeline(aggs)[0]["doc_count"] == 3

    def test_facets_without_timeline(self):
        """Test a facets-only aggregation result."""
        aggs = make_aggregations(timeline=False)
        assert project_timeline(aggs) is None
        assert project_facets(aggs).services[0]["key"] == "payments-api"
