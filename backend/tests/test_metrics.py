"""Tests for Prometheus-compatible metrics endpoint and collection."""

import pytest

from entity_encoder.metrics import Metrics


# --- Unit tests for Metrics class ---

class TestMetricsClass:
    def setup_method(self):
        self.m = Metrics()

    def test_record_request_increments_counter(self):
        self.m.record_request("POST", "/api/encode", 200, 0.002)
        self.m.record_request("POST", "/api/encode", 200, 0.003)
        export = self.m.export()
        assert 'ee_http_requests_total{method="POST",path="/api/encode",status="200"} 2' in export

    def test_record_request_different_statuses(self):
        self.m.record_request("POST", "/api/encode", 200, 0.002)
        self.m.record_request("POST", "/api/encode", 413, 0.001)
        export = self.m.export()
        assert 'status="200"} 1' in export
        assert 'status="413"} 1' in export

    def test_duration_histogram_buckets(self):
        self.m.record_request("GET", "/api/health", 200, 0.0005)
        export = self.m.export()
        assert 'le="0.001"} 1' in export
        assert 'le="0.005"} 1' in export  # cumulative
        assert 'le="+Inf"} 1' in export

    def test_slow_request_only_in_inf_bucket(self):
        self.m.record_request("GET", "/api/health", 200, 30.0)
        export = self.m.export()
        assert 'le="5.0"} 0' in export
        assert 'le="+Inf"} 1' in export

    def test_duration_sum_and_count(self):
        self.m.record_request("POST", "/api/encode", 200, 0.1)
        self.m.record_request("POST", "/api/encode", 200, 0.2)
        export = self.m.export()
        assert 'ee_http_request_duration_seconds_sum{method="POST",path="/api/encode"} 0.3' in export
        assert 'ee_http_request_duration_seconds_count{method="POST",path="/api/encode"} 2' in export

    def test_normalize_path_collapses_entity_keys(self):
        assert Metrics._normalize_path("/api/entities/Delta") == "/api/entities/{key}"
        assert Metrics._normalize_path("/api/entities/916") == "/api/entities/{key}"
        assert Metrics._normalize_path("/api/entities") == "/api/entities"
        assert Metrics._normalize_path("/api/encode") == "/api/encode"

    def test_record_encode(self):
        self.m.record_encode(3, 10)
        self.m.record_encode(2, 2)
        export = self.m.export()
        assert "ee_encoded_texts_total 2" in export
        assert 'ee_encoded_chars_total{direction="in"} 5' in export
        assert 'ee_encoded_chars_total{direction="out"} 12' in export

    def test_set_gauge(self):
        self.m.set_gauge("ee_entity_table_size", 253.0, "Number of named entities")
        export = self.m.export()
        assert "# HELP ee_entity_table_size Number of named entities" in export
        assert "# TYPE ee_entity_table_size gauge" in export
        assert "ee_entity_table_size 253.0" in export

    def test_set_gauge_updates_value(self):
        self.m.set_gauge("ee_test", 1.0)
        self.m.set_gauge("ee_test", 5.0)
        export = self.m.export()
        assert "ee_test 5.0" in export
        assert "ee_test 1.0" not in export

    def test_reset_clears_all(self):
        self.m.record_request("GET", "/api/health", 200, 0.01)
        self.m.record_encode(1, 1)
        self.m.set_gauge("ee_test", 42.0)
        self.m.reset()
        export = self.m.export()
        assert "ee_http_requests_total" not in export
        assert "ee_test" not in export
        assert "ee_encoded_texts_total 0" in export


# --- Endpoint tests ---

class TestMetricsEndpoint:

    @pytest.mark.asyncio
    async def test_metrics_content_type(self, client):
        resp = await client.get("/api/metrics")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")

    @pytest.mark.asyncio
    async def test_metrics_include_gauges(self, client):
        resp = await client.get("/api/metrics")
        assert "ee_uptime_seconds" in resp.text
        assert "ee_entity_table_size 253.0" in resp.text

    @pytest.mark.asyncio
    async def test_requests_recorded(self, client):
        await client.get("/api/health")
        await client.get("/api/entities/Delta")
        resp = await client.get("/api/metrics")
        assert 'ee_http_requests_total{method="GET",path="/api/health",status="200"} 1' in resp.text
        assert 'path="/api/entities/{key}",status="200"} 1' in resp.text

    @pytest.mark.asyncio
    async def test_metrics_endpoint_not_self_recorded(self, client):
        await client.get("/api/metrics")
        resp = await client.get("/api/metrics")
        assert 'path="/api/metrics"' not in resp.text
