"""Integration tests for the health check endpoints."""

from tests.fixtures import TEST_API_KEY, UPSTREAM_BASE_URL


class TestHealthEndpoints:
    """Integration tests for health checks."""

    def test_health_endpoint_basic(self, make_test_client, jon_snow_upstream, upstream_calls):
        client = make_test_client(jon_snow_upstream)

        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert data["uptime_seconds"] >= 0
        assert data["upstream"] == UPSTREAM_BASE_URL
        assert data["credential_configured"] is True
        assert "timestamp" in data
        assert TEST_API_KEY not in response.text
        assert upstream_calls == []

    def test_health_without_credential(self, make_test_client, jon_snow_upstream):
        client = make_test_client(jon_snow_upstream, api_key=None)

        response = client.get("/health")

        assert response.json()["credential_configured"] is False

    def test_ready_endpoint(self, make_test_client, jon_snow_upstream, upstream_calls):
        client = make_test_client(jon_snow_upstream)

        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}
        assert upstream_calls == []

    def test_not_ready_after_upstream_client_closed(self, make_test_client, jon_snow_upstream):
        client = make_test_client(jon_snow_upstream)
        client.portal.call(client.app.state.upstream_client.close)

        response = client.get("/health/ready")

        assert response.status_code == 503

    def test_unknown_route_is_404(self, make_test_client, jon_snow_upstream, upstream_calls):
        client = make_test_client(jon_snow_upstream)

        response = client.get("/characters/1")

        assert response.status_code == 404
        assert upstream_calls == []
