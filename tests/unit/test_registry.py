"""Unit tests for ToolRegistry dispatch and error classification."""
import json

import pytest

from finder.aggregator import Aggregator
from finder.catalog import SEARCH_LEARNING_RESOURCES, SEARCH_LEARNING_RESOURCES_TOOL
from finder.errors import InvalidArgumentError, SourceError, UnknownToolError
from finder.models import SourceKind
from finder_server.handlers import SearchLearningResourcesHandler
from finder_server.registry import ToolRegistry, classify_error

pytestmark = pytest.mark.anyio

VIDEO, ARTICLE = SourceKind.VIDEO, SourceKind.ARTICLE


def _registry(*sources):
    registry = ToolRegistry()
    registry.register(SearchLearningResourcesHandler(Aggregator(sources)))
    return registry


def test_catalog_is_the_registered_descriptors(fake_source):
    registry = _registry(fake_source(VIDEO))
    assert registry.catalog() == [SEARCH_LEARNING_RESOURCES_TOOL]


def test_duplicate_registration_is_rejected(fake_source):
    registry = _registry(fake_source(VIDEO))
    with pytest.raises(ValueError, match=SEARCH_LEARNING_RESOURCES):
        registry.register(SearchLearningResourcesHandler(Aggregator([])))


async def test_unknown_tool(fake_source):
    with pytest.raises(UnknownToolError) as excinfo:
        await _registry(fake_source(VIDEO)).dispatch("does_not_exist", {})
    assert excinfo.value.tool_name == "does_not_exist"
    assert str(excinfo.value) == "Unknown tool: does_not_exist"


async def test_missing_topic_is_a_request_error(fake_source):
    with pytest.raises(InvalidArgumentError, match="topic"):
        await _registry(fake_source(VIDEO)).dispatch(SEARCH_LEARNING_RESOURCES, {"maxResults": 3})


async def test_success_envelope_holds_pretty_json(fake_source, records):
    registry = _registry(
        fake_source(VIDEO, error=SourceError(VIDEO, "HTTP 500")),
        fake_source(ARTICLE, records(ARTICLE, 3)),
    )

    envelope = await registry.dispatch(
        SEARCH_LEARNING_RESOURCES, {"topic": "React hooks", "maxResults": 2}
    )

    assert envelope.is_error is False
    assert len(envelope.content) == 1
    text = envelope.content[0]["text"]
    assert text.startswith("{\n  ")
    body = json.loads(text)
    assert body["topic"] == "React hooks"
    assert len(body["by_source_kind"]["article"]) == 2
    assert "video" not in body["by_source_kind"]
    assert body["partial_failures"] == [{"source_kind": "video", "message": "HTTP 500"}]


async def test_total_failure_is_an_error_envelope(fake_source):
    registry = _registry(
        fake_source(VIDEO, error=SourceError(VIDEO, "HTTP 500")),
        fake_source(ARTICLE, error=SourceError(ARTICLE, "HTTP 503")),
    )

    envelope = await registry.dispatch(SEARCH_LEARNING_RESOURCES, {"topic": "React hooks"})

    assert envelope.is_error is True
    assert envelope.text_content.startswith("Error: All sources failed for 'React hooks'")
    assert "HTTP 503" in envelope.text_content


async def test_handler_bug_becomes_error_envelope(fake_source):
    class Broken(SearchLearningResourcesHandler):
        async def invoke(self, arguments):
            raise KeyError("oops")

    registry = ToolRegistry()
    registry.register(Broken(Aggregator([fake_source(VIDEO)])))

    envelope = await registry.dispatch(SEARCH_LEARNING_RESOURCES, {"topic": "go"})

    assert envelope.is_error
    assert "internal error (KeyError" in envelope.text_content


def test_classify_error_shapes():
    assert classify_error(SourceError(VIDEO, "HTTP 500")).to_dict() == {
        "content": [{"type": "text", "text": "Error: video: HTTP 500"}],
        "isError": True,
    }
    assert classify_error(ZeroDivisionError("division by zero")).is_error
