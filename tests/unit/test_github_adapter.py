"""Unit tests for the GitHubKitAdapter class and related GitHub operations."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from githubkit import GitHub
from githubkit.auth import UnauthAuthStrategy
from githubkit.exception import RequestFailed

from github_file_sync.github.adapter import GitHubKitAdapter, handle_github_422
from github_file_sync.utils.constants import RAW_CONTENT_MEDIA_TYPE


class DummyResponse:
    """A dummy response object to mock GitHub API responses."""

    def __init__(self, status_code: int = 200, parsed_data: object = None, content: bytes = b"") -> None:
        """Initialize the dummy response with a status code, parsed data and raw content."""
        self.status_code: int = status_code
        self.parsed_data = parsed_data
        self.content = content


@pytest.mark.asyncio
async def test_get_raw_file_content_requests_raw_media_type() -> None:
    """Test that file content is requested in the raw media type at the given ref."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.repos.async_get_content = AsyncMock(return_value=DummyResponse(content=b"a = 1\r\n"))
    await adapter.get_raw_file_content("config/settings.toml", "v1.2.0")
    adapter.client.rest.repos.async_get_content.assert_awaited_once_with(
        owner="owner",
        repo="repo",
        path="config/settings.toml",
        ref="v1.2.0",
        headers={"Accept": RAW_CONTENT_MEDIA_TYPE},
    )


@pytest.mark.asyncio
async def test_get_raw_file_content_returns_bytes_unchanged() -> None:
    """Test that the response body is returned byte-for-byte."""
    content = b"\xef\xbb\xbfkey = 'value'  \r\n\x00"
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.repos.async_get_content = AsyncMock(return_value=DummyResponse(content=content))
    assert await adapter.get_raw_file_content("file.bin", "main") == content


@pytest.mark.asyncio
async def test_get_raw_file_content_propagates_request_failure() -> None:
    """Test that a failed request is not swallowed by the adapter."""
    response = MagicMock()
    response.status_code = 404
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.repos.async_get_content = AsyncMock(side_effect=RequestFailed(response))
    with pytest.raises(RequestFailed):
        await adapter.get_raw_file_content("missing.txt", "main")


@pytest.mark.asyncio
async def test_list_pull_requests_single_page() -> None:
    """Test listing pull requests when everything fits on one page."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.pulls.async_list = AsyncMock(return_value=DummyResponse(parsed_data=["pr1", "pr2"]))
    result = await adapter.list_pull_requests(state="open", head="owner:sync", base="main")
    assert result == ["pr1", "pr2"]
    adapter.client.rest.pulls.async_list.assert_awaited_once_with(
        owner="owner", repo="repo", state="open", per_page=100, page=1, head="owner:sync", base="main"
    )


@pytest.mark.asyncio
async def test_list_pull_requests_paginates() -> None:
    """Test that list_pull_requests keeps requesting pages until a short page is returned."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.pulls.async_list = AsyncMock(
        side_effect=[DummyResponse(parsed_data=["pr1", "pr2"]), DummyResponse(parsed_data=["pr3"])]
    )
    result = await adapter.list_pull_requests(state="open", per_page=2)
    assert result == ["pr1", "pr2", "pr3"]
    assert adapter.client.rest.pulls.async_list.await_count == 2


@pytest.mark.asyncio
async def test_list_pull_requests_empty() -> None:
    """Test that an empty first page yields no pull requests."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.pulls.async_list = AsyncMock(return_value=DummyResponse(parsed_data=[]))
    assert await adapter.list_pull_requests(state="open") == []


@pytest.mark.asyncio
async def test_create_pull_request_returns_response() -> None:
    """Test that create_pull_request returns the full response so the status can be checked."""
    response = DummyResponse(status_code=201, parsed_data=MagicMock(number=7))
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.pulls.async_create = AsyncMock(return_value=response)
    result = await adapter.create_pull_request(title="Sync", head="sync", base="main", body="Body")
    assert result is response
    adapter.client.rest.pulls.async_create.assert_awaited_once_with(owner="owner", repo="repo", title="Sync", head="sync", base="main", body="Body")


@pytest.mark.asyncio
async def test_create_pull_request_omits_null_parameters() -> None:
    """Test that optional parameters left as None are not sent."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.pulls.async_create = AsyncMock(return_value=DummyResponse(status_code=201))
    await adapter.create_pull_request(title="Sync", head="sync", base="main")
    kwargs = adapter.client.rest.pulls.async_create.await_args.kwargs
    assert "body" not in kwargs
    assert "draft" not in kwargs
    assert "maintainer_can_modify" not in kwargs


@pytest.mark.asyncio
async def test_create_pull_request_sends_quotes_and_backslashes_as_json() -> None:
    """Test that a title and body with quotes and backslashes reach GitHub as valid, unaltered JSON."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(201, json={})

    client = GitHub(auth=UnauthAuthStrategy(), base_url="https://api.github.com", async_transport=httpx.MockTransport(handler))
    adapter = GitHubKitAdapter(client, "acme", "widgets")
    title = 'Sync "settings" \\ v2'
    body = 'Copied from C:\\config\\"quoted"\n'

    response = await adapter.create_pull_request(title=title, head="sync/settings", base="main", body=body)

    assert response.status_code == 201
    assert len(requests) == 1
    assert requests[0].method == "POST"
    assert requests[0].url.path.endswith("/repos/acme/widgets/pulls")
    payload = json.loads(requests[0].content)
    assert payload["title"] == title
    assert payload["body"] == body
    assert payload["head"] == "sync/settings"
    assert payload["base"] == "main"


@pytest.mark.asyncio
async def test_create_pull_request_422_raises_value_error() -> None:
    """Test that a 422 response is turned into a ValueError carrying GitHub's message."""
    response = MagicMock()
    response.status_code = 422
    response.json.return_value = {"message": "Validation Failed", "errors": [{"message": "A pull request already exists"}]}
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.pulls.async_create = AsyncMock(side_effect=RequestFailed(response))
    with pytest.raises(ValueError, match=r"Validation Failed \(A pull request already exists\)"):
        await adapter.create_pull_request(title="Sync", head="sync", base="main")


@pytest.mark.asyncio
async def test_handle_github_422_reraises_other_statuses() -> None:
    """Test that the 422 handler leaves other failures untouched."""
    response = MagicMock()
    response.status_code = 500

    @handle_github_422
    async def failing() -> None:
        raise RequestFailed(response)

    with pytest.raises(RequestFailed):
        await failing()
