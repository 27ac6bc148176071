"""Tests for the FastAPI submit-bug endpoint."""

import httpx
import pytest
from fastapi.testclient import TestClient

from bug_relay.api.main import create_app
from bug_relay.core.config import Settings
from bug_relay.integrations import GitHubIssueClient, MockIssueTrackerClient

CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "POST, OPTIONS",
    "access-control-allow-headers": "Content-Type",
}

VALID_REPORT = {
    "email": "a@b.com",
    "title": "Crash",
    "description": "App crashes on launch",
    "priority": "critical",
    "userAgent": "Mozilla/5.0",
    "platform": "web",
}


def assert_cors(response: httpx.Response) -> None:
    for name, value in CORS.items():
        assert response.headers[name] == value


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_REPO", raising=False)
    return Settings(_env_file=None, ISSUE_TRACKER="mock")


@pytest.fixture
def tracker():
    return MockIssueTrackerClient(base_url="https://github.com/acme/insync/issues")


@pytest.fixture
def client(settings, tracker):
    app = create_app(settings=settings, client=tracker)
    with TestClient(app) as test_client:
        yield test_client


def github_app(handler, token="ghp_test", repo="acme/insync"):
    """App backed by a GitHub client whose traffic goes to handler."""
    settings = Settings(_env_file=None, GITHUB_TOKEN=token, GITHUB_REPO=repo)
    github = GitHubIssueClient(
        token=token,
        repo=repo,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return create_app(settings=settings, client=github)


class TestSubmitBug:
    """Test suite for POST /submit-bug."""

    def test_submit_success(self, client, tracker):
        response = client.post("/submit-bug", json=VALID_REPORT)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert_cors(response)
        assert response.json() == {
            "success": True,
            "issueNumber": 1,
            "issueUrl": "https://github.com/acme/insync/issues/1",
            "message": "Bug report submitted successfully",
        }

        draft = tracker.issues[1]
        assert draft.title == "[Bug] Crash"
        assert draft.labels == ["bug", "user-reported", "priority-high"]

    def test_api_prefixed_route(self, client):
        response = client.post("/api/submit-bug", json=VALID_REPORT)

        assert response.status_code == 200
        assert response.json()["success"] is True

    @pytest.mark.parametrize("field", ["email", "title", "description"])
    def test_missing_required_field(self, client, tracker, field):
        payload = {k: v for k, v in VALID_REPORT.items() if k != field}

        response = client.post("/submit-bug", json=payload)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Missing required fields"}
        assert_cors(response)
        assert tracker.issues == {}

    def test_empty_body_is_missing_fields(self, client):
        response = client.post("/submit-bug", content=b"")

        assert response.status_code == 400

    def test_malformed_json(self, client, tracker):
        response = client.post(
            "/submit-bug",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to submit bug report"}
        assert tracker.issues == {}

    def test_duplicate_submissions_create_two_issues(self, client, tracker):
        first = client.post("/submit-bug", json=VALID_REPORT).json()
        second = client.post("/submit-bug", json=VALID_REPORT).json()

        assert first["issueNumber"] != second["issueNumber"]
        assert len(tracker.issues) == 2

    def test_request_id_header(self, client):
        response = client.post(
            "/submit-bug",
            json=VALID_REPORT,
            headers={"X-Request-ID": "req-123"},
        )

        assert response.headers["X-Request-ID"] == "req-123"


class TestMethods:
    """Test suite for preflight and method handling."""

    def test_options_preflight(self, client):
        response = client.options("/submit-bug")

        assert response.status_code == 200
        assert response.content == b""
        assert_cors(response)

    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    def test_other_methods_not_allowed(self, client, method):
        response = client.request(method, "/submit-bug")

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}
        assert_cors(response)

    def test_head_not_allowed(self, client):
        response = client.head("/submit-bug")

        assert response.status_code == 405
        assert_cors(response)

    @pytest.mark.parametrize("path", ["/submit-bug", "/api/submit-bug"])
    @pytest.mark.parametrize("method", ["TRACE", "PROPFIND"])
    def test_unrouted_methods_not_allowed(self, client, tracker, method, path):
        """Methods the router rejects still get the submit-bug 405 body."""
        response = client.request(method, path)

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}
        assert_cors(response)
        assert tracker.issues == {}

    def test_405_elsewhere_keeps_error_response(self, client):
        response = client.post("/health")

        assert response.status_code == 405
        assert response.json()["error"] == "http_error"
        assert "access-control-allow-origin" not in response.headers


class TestGitHubBackend:
    """End-to-end submissions through GitHubIssueClient."""

    def test_github_validation_failed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, json={"message": "Validation Failed"})

        with TestClient(github_app(handler)) as client:
            response = client.post("/submit-bug", json=VALID_REPORT)

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "GitHub API error: Validation Failed",
        }

    def test_github_success(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["Authorization"] == "Bearer ghp_test"
            return httpx.Response(
                201,
                json={"number": 99, "html_url": "https://github.com/acme/insync/issues/99"},
            )

        with TestClient(github_app(handler)) as client:
            response = client.post("/submit-bug", json=VALID_REPORT)

        assert response.status_code == 200
        assert response.json()["issueNumber"] == 99
        assert response.json()["issueUrl"] == "https://github.com/acme/insync/issues/99"

    def test_unconfigured_github_fails_submission(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("GitHub must not be called")

        with TestClient(github_app(handler, token=None, repo=None)) as client:
            invalid = client.post("/submit-bug", json={"title": "x"})
            valid = client.post("/submit-bug", json=VALID_REPORT)

        assert invalid.status_code == 400
        assert valid.status_code == 500
        assert valid.json() == {
            "success": False,
            "error": "GitHub integration is not configured",
        }


class TestServiceEndpoints:
    """Test suite for health and root endpoints."""

    def test_health_mock_tracker(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["tracker"] == "mock"
        assert body["tracker_configured"] is True

    def test_health_degraded_without_github_config(self):
        with TestClient(github_app(lambda r: httpx.Response(500), token=None)) as client:
            body = client.get("/health").json()

        assert body["status"] == "degraded"
        assert body["tracker"] == "github"
        assert body["tracker_configured"] is False

    def test_root(self, client):
        body = client.get("/").json()

        assert body["name"] == "BugRelay"
        assert body["submit_url"] == "/submit-bug"

    def test_unknown_route_uses_error_response(self, client):
        response = client.get("/nope")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "http_error"
        assert body["request_id"]
