"""Tests for the Elasticsearch client factory and engine adapter."""

from unittest.mock import MagicMock, patch

import pytest

from fulltext_gateway.core.app_exceptions import UpstreamError
from fulltext_gateway.core.config import Settings
from fulltext_gateway.search.engine import EngineResponse, SearchEngine
from fulltext_gateway.search.es_client import create_es_client, ping
from tests.helpers.es_fakes import (
    make_api_error,
    make_connection_error,
    make_hit,
    make_search_response,
)


class TestESClient:
    """Test Elasticsearch client construction."""

    def test_create_client_with_auth(self):
        """Test credentials and timeout are passed to the client."""
        config = Settings(
            ENV="test",
            ELASTICSEARCH_URL="https://es.internal:9200",
            ELASTICSEARCH_USERNAME="gateway",
            ELASTICSEARCH_PASSWORD="secret",
            ELASTICSEARCH_REQUEST_TIMEOUT_MS=2500,
        )
        with patch("fulltext_gateway.search.es_client.Elasticsearch") as mock_es:
            create_es_client(config)

        args, kwargs = mock_es.call_args
        assert args == (["https://es.internal:9200"],)
        assert kwargs["basic_auth"] == ("gateway", "secret")
        assert kwargs["request_timeout"] == 2.5
        assert kwargs["max_retries"] == 0
        assert kwargs["verify_certs"] is False

    def test_create_client_without_auth(self):
        """Test no auth when credentials are absent."""
        with patch("fulltext_gateway.search.es_client.Elasticsearch") as mock_es:
            create_es_client(Settings(ENV="test"))
        assert mock_es.call_args.kwargs["basic_auth"] is None

    def test_half_configured_credentials_rejected(self):
        """Test username without password fails fast."""
        with pytest.raises(ValueError):
            Settings(ENV="test", ELASTICSEARCH_USERNAME="gateway")

    def test_ping_missing_client(self):
        """Test ping returns False without a client."""
        assert ping(None) is False

    def test_ping_handles_exceptions(self):
        """Test ping handles exceptions gracefully."""
        client = MagicMock()
        client.ping.side_effect = make_connection_error()
        assert ping(client) is False

        client.ping.side_effect = RuntimeError("unexpected")
        assert ping(client) is False

    def test_ping_succeeds(self):
        """Test ping returns True when the engine answers."""
        client = MagicMock()
        client.ping.return_value = True
        assert ping(client) is True


class TestEngineResponse:
    """Test response envelope normalization."""

    def test_from_dict(self):
        """Test a plain dict body."""
        raw = make_search_response([make_hit("a", 2), make_hit("b", 1)], total=42, pit_id="pit-9")
        response = EngineResponse.from_raw(raw)

        assert response.total == 42
        assert [hit["_id"] for hit in response.hits] == ["a", "b"]
        assert response.pit_id == "pit-9"
        assert response.aggregations is None

    def test_from_api_response_object(self):
        """Test an object exposing .body (client ApiResponse)."""
        raw = MagicMock()
        raw.body = make_search_response([], pit_id=None, aggregations={"timeline": {"buckets": []}})
        response = EngineResponse.from_raw(raw)

        assert response.total == 0
        assert response.hits == []
        assert response.pit_id is None
        assert response.aggregations == {"timeline": {"buckets": []}}

    def test_integer_total(self):
        """Test legacy integer totals."""
        assert EngineResponse.from_raw({"hits": {"total": 5, "hits": []}}).total == 5


class TestSearchEngine:
    """Test error translation in the engine adapter."""

    def test_search_passes_body(self, engine, es_client):
        """Test the composed body is sent as-is."""
        body = {"size": 1, "pit": {"id": "pit-1", "keep_alive": "1m"}}
        engine.search(body)
        es_client.search.assert_called_once_with(body=body)

    def test_engine_status_propagated(self, engine, es_client):
        """Test an engine error keeps its status and structured error."""
        error = {
            "type": "search_phase_execution_exception",
            "reason": "all shards failed",
            "root_cause": [{"type": "query_shard_exception", "reason": "Failed to parse query"}],
        }
        es_client.search.side_effect = make_api_error(400, error)

        with pytest.raises(UpstreamError) as excinfo:
            engine.search({"size": 1})

        assert excinfo.value.status_code == 400
        assert excinfo.value.error == error

    def test_unreachable_engine_is_500(self, engine, es_client):
        """Test transport failures map to 500 with a generic message."""
        es_client.search.side_effect = make_connection_error()

        with pytest.raises(UpstreamError) as excinfo:
            engine.search({"size": 1})

        assert excinfo.value.status_code == 500
        assert excinfo.value.error == "Search error"

    def test_open_pit_failure(self, engine, es_client):
        """Test open-PIT errors use their own fallback message."""
        es_client.open_point_in_time.side_effect = make_connection_error()

        with pytest.raises(UpstreamError) as excinfo:
            engine.open_point_in_time("logs-*", "1m")

        assert excinfo.value.error == "Open PIT error"

    def test_close_pit_fallback_message(self, engine, es_client):
        """Test close-PIT errors without a body use the fallback."""
        es_client.close_point_in_time.side_effect = make_connection_error()

        with pytest.raises(UpstreamError) as excinfo:
            engine.close_point_in_time("pit-1")

        assert excinfo.value.error == "Close PIT error"

    def test_open_pit_returns_id(self, engine):
        """Test the PIT id is extracted."""
        assert engine.open_point_in_time("logs-*", "1m") == "pit-1"

    def test_ping_delegates(self, engine, es_client):
        """Test engine ping."""
        es_client.ping.return_value = False
        assert engine.ping() is False
