# =============================================================================
# finder_server/handlers.py  —  Tool Handlers
# =============================================================================
#
# One class per advertised tool.  A handler is deliberately thin: parse the
# arguments into a core type, call the core, serialize the result.
# =============================================================================

import json
import logging
from typing import Any

from finder.aggregator import Aggregator
from finder.catalog import SEARCH_LEARNING_RESOURCES_TOOL
from finder.models import SearchQuery, ToolDescriptor, ToolResponseEnvelope
from finder_server.registry import ToolHandler

logger = logging.getLogger(__name__)


class SearchLearningResourcesHandler(ToolHandler):
    """search_learning_resources: videos and articles on one topic.

    On success the single text block holds the AggregatedResult as
    pretty-printed JSON, partial failures included.  When every source
    fails the AllSourcesFailedError propagates to the registry, which turns
    it into an isError response.
    """

    def __init__(self, aggregator: Aggregator):
        self._aggregator = aggregator

    def describe(self) -> ToolDescriptor:
        return SEARCH_LEARNING_RESOURCES_TOOL

    async def invoke(self, arguments: dict[str, Any]) -> ToolResponseEnvelope:
        query = SearchQuery.from_arguments(arguments)
        result = await self._aggregator.aggregate(query)
        for failure in result.partial_failures:
            logger.info("Partial failure for %r: %s: %s",
                        query.topic, failure.source_kind.value, failure.message)
        return ToolResponseEnvelope.text(
            json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
        )
