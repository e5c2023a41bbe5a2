from fastapi.testclient import TestClient

from survey_api.main import app
from survey_api.services.providers import get_analytics_aggregator, get_submission_pipeline
from survey_api.services.submission_pipeline import SubmissionPipeline
from survey_api.services.analytics_service import AnalyticsAggregator


class DownStore:
    def put(self, key, record):
        raise OSError("connection refused: internal-db-host:8000")

    def get(self, key):
        return None

    def query(self, predicate=None):
        raise OSError("connection refused: internal-db-host:8000")


def test_health_endpoint(client):
    """Test the health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == "2.0.0"
    assert data["service"]
    assert data["timestamp"]


def test_submit_valid_survey(client, store, submission_payload):
    """Test survey submission with a complete payload"""
    response = client.post("/api/submit", json=submission_payload)
    assert response.status_code == 201

    data = response.json()
    assert data["success"] is True
    assert data["score"] == 24
    assert data["qualificationLevel"] == "critical"
    assert set(data) == {"success", "id", "qualificationLevel", "score", "insights", "timestamp"}
    assert data["insights"]["insights"] == []
    assert store.get(data["id"]) is not None


def test_submit_overrides_client_score(client, submission_payload):
    """Test that an inflated client score is replaced by the server score"""
    submission_payload["score"] = 99
    del submission_payload["answers"]["q5"]

    response = client.post("/api/submit", json=submission_payload)
    assert response.status_code == 201
    assert response.json()["score"] == 19
    assert response.json()["qualificationLevel"] == "high"


def test_submit_unknown_qualifier(client, submission_payload):
    """Test that an unrecognised qualify value does not reject the submission"""
    submission_payload["answers"]["q1"]["qualify"] = "very-high"

    response = client.post("/api/submit", json=submission_payload)
    assert response.status_code == 201
    assert response.json()["score"] == 24


def test_submit_invalid_email(client, store, submission_payload):
    """Test survey submission with a malformed email"""
    submission_payload["answers"]["contact"]["email"] = "not-an-email"

    response = client.post("/api/submit", json=submission_payload)
    assert response.status_code == 400

    data = response.json()
    assert data["success"] is False
    assert data["error"] == "Invalid request data"
    assert "email" in data["details"]
    assert len(store) == 0


def test_submit_invalid_json(client):
    """Test survey submission with a body that is not JSON"""
    response = client.post(
        "/api/submit", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_submit_store_unavailable(submission_payload):
    """Test that store failures become a generic 500"""
    app.dependency_overrides[get_submission_pipeline] = lambda: SubmissionPipeline(store=DownStore())
    try:
        response = TestClient(app).post("/api/submit", json=submission_payload)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    data = response.json()
    assert data == {"success": False, "error": "Failed to store survey response"}
    assert "internal-db-host" not in response.text


def test_analytics_endpoint(client, submission_payload):
    """Test the analytics dashboard endpoint"""
    client.post("/api/submit", json=submission_payload)

    response = client.get("/api/analytics")
    assert response.status_code == 200

    data = response.json()
    assert data["summary"]["totalResponses"] == 1
    assert data["summary"]["avgScore"] == 24
    assert data["qualificationDistribution"] == [{"qualificationLevel": "critical", "count": 1}]
    assert data["challengeDistribution"] == [{"primaryChallenge": "nphies-compliance", "count": 1}]
    assert data["monthlyTrends"][0]["month"] == "2026-10"


def test_analytics_store_unavailable():
    """Test analytics endpoint when the store is down"""
    app.dependency_overrides[get_analytics_aggregator] = lambda: AnalyticsAggregator(store=DownStore())
    try:
        response = TestClient(app).get("/api/analytics")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to fetch analytics"


def test_recommendations_endpoint(client, submission_payload):
    """Test organization benchmarks endpoint"""
    client.post("/api/submit", json=submission_payload)

    response = client.get("/api/recommendations/large")
    assert response.status_code == 200

    data = response.json()
    assert data["organizationType"] == "large"
    assert data["benchmarks"][0]["count"] == 1
    assert data["benchmarks"][0]["avgFinancialImpact"] == 800000
    assert len(data["advisoryList"]) == 4
    assert "generatedAt" in data


def test_unknown_route_returns_json_404(client):
    """Test the catch-all not found response"""
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found", "message": "API endpoint not found"}


def test_unknown_route_head_returns_404(client):
    """Test HEAD on an unknown path is not a 405"""
    assert client.head("/api/does-not-exist").status_code == 404


def test_options_preflight(client):
    """Test CORS preflight on an arbitrary path"""
    response = client.options("/api/submit")
    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"


def test_browser_preflight(client):
    """Test a browser-style CORS preflight"""
    response = client.options(
        "/api/submit",
        headers={
            "Origin": "https://survey.example.org",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
