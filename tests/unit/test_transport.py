"""
主题列表请求传输测试（httpx.MockTransport）
"""
import httpx
import pytest

from client.transport import TopicListingClient, TopicListingError


def _client(handler):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://forum.test")
    return TopicListingClient(client=http_client), http_client


async def test_sends_tag_filter_params():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"topics": [], "total_count": 0, "filter": {"tag_ids": [1, 2], "match": "all"}})

    listing_client, http_client = _client(handler)
    async with http_client:
        payload = await listing_client.fetch_topics([1, 2], "all", page=2, page_size=10)

    assert seen["path"] == "/api/topics"
    assert seen["params"] == {"page": "2", "page_size": "10", "tag_ids": "1,2", "match": "all"}
    assert payload["filter"]["tag_ids"] == [1, 2]


async def test_no_tag_params_without_tags():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"topics": []})

    listing_client, http_client = _client(handler)
    async with http_client:
        await listing_client.fetch_topics([], "all")

    assert seen["params"] == {"page": "1"}


async def test_error_response_raises_with_server_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "database is locked"})

    listing_client, http_client = _client(handler)
    async with http_client:
        with pytest.raises(TopicListingError) as exc_info:
            await listing_client.fetch_topics([1], "any")

    assert exc_info.value.message == "database is locked"
    assert exc_info.value.status_code == 400


async def test_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    listing_client, http_client = _client(handler)
    async with http_client:
        with pytest.raises(TopicListingError):
            await listing_client.fetch_topics([1], "any")


async def test_non_object_body_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[1, 2, 3])

    listing_client, http_client = _client(handler)
    async with http_client:
        with pytest.raises(TopicListingError):
            await listing_client.fetch_topics([], "any")
