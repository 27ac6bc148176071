"""Tests for the GitHub issue client."""

import json

import httpx
import pytest

from bug_relay.core.exceptions import UpstreamError
from bug_relay.integrations.github import GITHUB_ACCEPT, GitHubIssueClient
from bug_relay.models.bug_report import IssueDraft

DRAFT = IssueDraft(
    title="[Bug] Crash",
    body="## Bug Report",
    labels=["bug", "user-reported", "priority-high"],
)


def make_client(handler, token="ghp_test", repo="acme/insync", **kwargs) -> GitHubIssueClient:
    """GitHubIssueClient whose HTTP traffic goes to handler."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GitHubIssueClient(token=token, repo=repo, http_client=http_client, **kwargs)


@pytest.mark.asyncio
async def test_create_issue_request_and_response():
    """One POST with bearer auth, v3 accept header and the draft as JSON."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            201,
            json={"number": 42, "html_url": "https://github.com/acme/insync/issues/42"},
        )

    client = make_client(handler)
    issue = await client.create_issue(DRAFT)

    assert issue.number == 42
    assert issue.url == "https://github.com/acme/insync/issues/42"

    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.github.com/repos/acme/insync/issues"
    assert request.headers["Authorization"] == "Bearer ghp_test"
    assert request.headers["Accept"] == GITHUB_ACCEPT
    assert json.loads(request.content) == {
        "title": "[Bug] Crash",
        "body": "## Bug Report",
        "labels": ["bug", "user-reported", "priority-high"],
    }


@pytest.mark.asyncio
async def test_custom_api_url():
    urls = []

    def handler(request: httpx.Request) -> httpx.Response:
        urls.append(str(request.url))
        return httpx.Response(201, json={"number": 1, "html_url": "u"})

    client = make_client(handler, api_url="https://ghe.example.com/api/v3/")
    await client.create_issue(DRAFT)

    assert urls == ["https://ghe.example.com/api/v3/repos/acme/insync/issues"]


@pytest.mark.asyncio
async def test_error_status_surfaces_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"message": "Validation Failed", "errors": []})

    client = make_client(handler)

    with pytest.raises(UpstreamError) as exc_info:
        await client.create_issue(DRAFT)

    assert exc_info.value.message == "GitHub API error: Validation Failed"
    assert exc_info.value.status_code == 422
    assert exc_info.value.payload["message"] == "Validation Failed"


@pytest.mark.asyncio
async def test_error_status_without_json_uses_reason_phrase():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    client = make_client(handler)

    with pytest.raises(UpstreamError) as exc_info:
        await client.create_issue(DRAFT)

    assert exc_info.value.message == "GitHub API error: Bad Gateway"
    assert exc_info.value.payload is None


@pytest.mark.asyncio
async def test_network_error_raises_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(UpstreamError) as exc_info:
        await client.create_issue(DRAFT)

    assert exc_info.value.message.startswith("GitHub API request failed")
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_unexpected_success_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json={"id": 1})

    client = make_client(handler)

    with pytest.raises(UpstreamError, match="unexpected response"):
        await client.create_issue(DRAFT)


@pytest.mark.asyncio
@pytest.mark.parametrize("token,repo", [(None, "acme/insync"), ("ghp_test", None), (None, None)])
async def test_missing_configuration_fails_without_request(token, repo):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(201, json={"number": 1, "html_url": "u"})

    client = make_client(handler, token=token, repo=repo)

    with pytest.raises(UpstreamError, match="not configured"):
        await client.create_issue(DRAFT)

    assert calls == []


@pytest.mark.asyncio
async def test_injected_http_client_is_not_closed():
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(204)))

    async with GitHubIssueClient("ghp_test", "acme/insync", http_client=http_client):
        pass

    assert http_client.is_closed is False
    await http_client.aclose()


@pytest.mark.asyncio
async def test_owned_http_client_is_closed():
    client = GitHubIssueClient("ghp_test", "acme/insync")

    async with client:
        pass

    assert client.client.is_closed is True
