# =============================================================================
# finder/aggregator.py  —  Concurrent Fan-out & Merge
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Runs every source adapter against the same SearchQuery at the same time,
#   waits for ALL of them to settle, and merges the outcomes into one
#   AggregatedResult.
#
# THE RULES:
#   1. Never short-circuit.  One source failing (or hanging until its
#      timeout) does not cancel or discard the others.  Each fetch is
#      wrapped so it always RETURNS an outcome instead of raising.
#   2. Output order is fixed by SOURCE_PRIORITY, not by who finished first.
#      Sources are sorted before launch and asyncio.gather() returns results
#      in launch order, so completion order can't leak into the output.
#   3. Per-source records keep upstream order and are cut to
#      max_results_per_source.
#   4. Some sources succeeded → (possibly partial) success.  Every source
#      failed → AllSourcesFailedError, never a silently empty result.
#
# UNCONFIGURED SOURCES:
#   A source whose missing_config() gives a reason is not launched at all.
#   It shows up in partial_failures as "not configured (...)" and counts as
#   failed when deciding whether the whole request failed.
# =============================================================================

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from finder.config import DEFAULT_SOURCE_TIMEOUT
from finder.errors import AllSourcesFailedError, SourceError
from finder.models import (
    SOURCE_PRIORITY,
    AggregatedResult,
    ResourceRecord,
    SearchQuery,
    SourceFailure,
)
from finder.sources.base import ResourceSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Outcome:
    """What one source produced: records on success, a failure otherwise."""

    source: ResourceSource
    result: Union[list[ResourceRecord], SourceFailure]


def _priority(source: ResourceSource) -> int:
    try:
        return SOURCE_PRIORITY.index(source.kind)
    except ValueError:
        return len(SOURCE_PRIORITY)


class Aggregator:
    """Fans one query out to a fixed set of sources."""

    def __init__(
        self,
        sources: Iterable[ResourceSource],
        source_timeout: Optional[float] = DEFAULT_SOURCE_TIMEOUT,
    ):
        # sorted() is stable: same-priority sources keep registration order.
        self.sources = sorted(sources, key=_priority)
        self.source_timeout = source_timeout

    async def aggregate(self, query: SearchQuery) -> AggregatedResult:
        """Query all sources concurrently and merge their outcomes.

        Args:
            query: The validated topic and per-source result bound.

        Returns:
            The merged result.  ``partial_failures`` lists exactly the
            sources that contributed nothing.

        Raises:
            AllSourcesFailedError: No source succeeded.
        """
        outcomes = await asyncio.gather(
            *(self._settle(source, query) for source in self.sources)
        )

        result = AggregatedResult(topic=query.topic)
        for outcome in outcomes:
            if isinstance(outcome.result, SourceFailure):
                result.partial_failures.append(outcome.result)
            else:
                records = outcome.result[: query.max_results_per_source]
                result.by_source_kind.setdefault(outcome.source.kind, []).extend(records)

        if not result.by_source_kind:
            raise AllSourcesFailedError(query.topic, result.partial_failures)

        logger.info(
            "Aggregated %d records for %r (%d of %d sources failed)",
            result.total_records,
            query.topic,
            len(result.partial_failures),
            len(self.sources),
        )
        return result

    async def _settle(self, source: ResourceSource, query: SearchQuery) -> _Outcome:
        """Run one source to completion; always returns, never raises."""
        reason = source.missing_config()
        if reason:
            logger.info("Skipping %s: %s", source.name, reason)
            return _Outcome(source, SourceFailure(source.kind, f"not configured ({reason})"))

        fetch = source.fetch_resources(query.topic, query.max_results_per_source)
        try:
            if self.source_timeout is None:
                records = await fetch
            else:
                records = await asyncio.wait_for(fetch, timeout=self.source_timeout)
        except asyncio.TimeoutError:
            message = f"timed out after {self.source_timeout:g}s"
        except SourceError as exc:
            message = exc.cause
        except Exception as exc:
            # An adapter bug must not take its siblings down with it.
            logger.exception("Source %s raised unexpectedly", source.name)
            message = f"internal error: {exc}"
        else:
            return _Outcome(source, list(records))

        logger.warning("Source %s failed: %s", source.name, message)
        return _Outcome(source, SourceFailure(source.kind, message))
