"""Unit tests for YouTubeSource: mocked HTTP via httpx.MockTransport."""
import httpx
import pytest

from finder.config import FinderConfig
from finder.errors import SourceError
from finder.models import SourceKind
from finder.sources.youtube import YouTubeSource

pytestmark = pytest.mark.anyio

CONFIG = FinderConfig(youtube_api_key="fake-key")


def _search_payload():
    return {
        "kind": "youtube#searchListResponse",
        "items": [
            {
                "id": {"kind": "youtube#video", "videoId": "abc123"},
                "snippet": {
                    "title": "React Hooks &amp; State in 10 minutes",
                    "channelTitle": "Fireship",
                    "description": "Learn the hooks you&#39;ll use daily",
                    "publishedAt": "2024-03-01T12:00:00Z",
                },
            },
            {
                # A channel hit has no videoId and is skipped.
                "id": {"kind": "youtube#channel", "channelId": "UC1"},
                "snippet": {"title": "Some Channel"},
            },
            {
                "id": {"kind": "youtube#video", "videoId": "def456"},
                "snippet": {"title": "useEffect explained"},
            },
        ],
    }


def _source(handler):
    return YouTubeSource(CONFIG, transport=httpx.MockTransport(handler))


async def test_normalizes_search_results():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=_search_payload())

    records = await _source(handler).fetch_resources("React hooks", 5)

    assert seen["params"] == {
        "part": "snippet",
        "type": "video",
        "q": "React hooks",
        "maxResults": "5",
        "key": "fake-key",
    }
    assert [r.url for r in records] == [
        "https://www.youtube.com/watch?v=abc123",
        "https://www.youtube.com/watch?v=def456",
    ]
    first = records[0]
    assert first.title == "React Hooks & State in 10 minutes"
    assert first.author == "Fireship"
    assert first.description == "Learn the hooks you'll use daily"
    assert first.published_at == "2024-03-01T12:00:00Z"
    assert first.popularity is None
    assert first.source_kind is SourceKind.VIDEO
    # Fields absent upstream stay absent.
    assert records[1].author is None
    assert records[1].description is None


async def test_http_error_carries_status_and_api_message():
    def handler(request):
        return httpx.Response(403, json={"error": {"code": 403, "message": "API key not valid."}})

    with pytest.raises(SourceError) as excinfo:
        await _source(handler).fetch_resources("React hooks", 5)
    assert excinfo.value.source_kind is SourceKind.VIDEO
    assert excinfo.value.cause == "HTTP 403: API key not valid."


async def test_server_error_without_json_body():
    def handler(request):
        return httpx.Response(500, text="Internal Server Error")

    with pytest.raises(SourceError, match="HTTP 500"):
        await _source(handler).fetch_resources("React hooks", 5)


async def test_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SourceError, match="network error"):
        await _source(handler).fetch_resources("React hooks", 5)


async def test_timeout():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(SourceError, match="timed out"):
        await _source(handler).fetch_resources("React hooks", 5)


async def test_invalid_json_body():
    def handler(request):
        return httpx.Response(200, text="<html>not json</html>")

    with pytest.raises(SourceError, match="not valid JSON"):
        await _source(handler).fetch_resources("React hooks", 5)


@pytest.mark.parametrize("payload", [[], {"kind": "youtube#searchListResponse"}, {"items": "nope"}])
async def test_unexpected_payload_shape(payload):
    def handler(request):
        return httpx.Response(200, json=payload)

    with pytest.raises(SourceError, match="unexpected payload shape"):
        await _source(handler).fetch_resources("React hooks", 5)


def test_missing_key_is_reported_before_any_call():
    assert YouTubeSource(FinderConfig()).missing_config() == "YOUTUBE_API_KEY is not set"
    assert YouTubeSource(CONFIG).missing_config() is None
