# =============================================================================
# finder/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the *shape* of every piece of information that
# flows through one "search learning resources" request:
#
#     arguments → SearchQuery → ResourceRecord(s) → AggregatedResult
#                                                 → ToolResponseEnvelope
#
# Each request builds its own instances and throws them away after the
# response is written.  Nothing here is shared between requests, and the
# frozen dataclasses cannot be mutated once built.
#
# DESIGN PRINCIPLE — "No Phantom Fields":
#   Optional fields (author, popularity, ...) are None when the upstream
#   doesn't provide them, and to_dict() drops them.  An adapter never
#   invents a value just to fill a slot.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from finder.errors import InvalidArgumentError


DEFAULT_MAX_RESULTS = 5
MAX_RESULTS_CAP = 50   # YouTube's search endpoint refuses anything larger


class SourceKind(str, Enum):
    """What kind of learning resource an upstream produces."""

    VIDEO = "video"
    ARTICLE = "article"


# Output order of the source groups.  Completion order of the concurrent
# fetches never changes this.
SOURCE_PRIORITY: tuple[SourceKind, ...] = (SourceKind.VIDEO, SourceKind.ARTICLE)


# -----------------------------------------------------------------------------
# SearchQuery — the validated tool arguments
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class SearchQuery:
    """A topic plus the per-source result bound (always >= 1)."""

    topic: str
    max_results_per_source: int = DEFAULT_MAX_RESULTS

    @classmethod
    def from_arguments(cls, arguments: Optional[dict[str, Any]]) -> "SearchQuery":
        """Build a query from the raw ``tools/call`` arguments.

        Args:
            arguments: The argument map sent by the host.  ``topic`` is
                required; ``maxResults`` defaults to 5.

        Raises:
            InvalidArgumentError: ``topic`` is missing or blank, or
                ``maxResults`` is not an integer between 1 and 50.
        """
        arguments = arguments or {}

        if "topic" not in arguments or arguments["topic"] is None:
            raise InvalidArgumentError("topic", "is required")
        topic = arguments["topic"]
        if not isinstance(topic, str) or not topic.strip():
            raise InvalidArgumentError("topic", "must be a non-empty string")

        return cls(
            topic=topic.strip(),
            max_results_per_source=_parse_max_results(arguments.get("maxResults")),
        )


def _parse_max_results(value: Any) -> int:
    if value is None:
        return DEFAULT_MAX_RESULTS
    # bool is an int subclass; `true` is not a count.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError("maxResults", "must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidArgumentError("maxResults", "must be an integer")
        value = int(value)
    if not 1 <= value <= MAX_RESULTS_CAP:
        raise InvalidArgumentError(
            "maxResults", f"must be between 1 and {MAX_RESULTS_CAP}"
        )
    return value


# -----------------------------------------------------------------------------
# ResourceRecord — one normalized learning item
# -----------------------------------------------------------------------------
# Every adapter maps its upstream's fields into this one shape, so the host
# sees the same keys whether the item came from YouTube or Dev.to.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ResourceRecord:
    """A single video or article."""

    title: str
    url: str                           # Absolute http(s) URL
    source_kind: SourceKind
    author: Optional[str] = None       # Channel name for videos
    popularity: Optional[int] = None   # Reactions, views, ... as the upstream counts them
    description: Optional[str] = None
    published_at: Optional[str] = None # ISO 8601, as returned upstream

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "title": self.title,
            "url": self.url,
            "source_kind": self.source_kind.value,
        }
        for key in ("author", "popularity", "description", "published_at"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class SourceFailure:
    """Why one source contributed nothing to a result."""

    source_kind: SourceKind
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"source_kind": self.source_kind.value, "message": self.message}


# -----------------------------------------------------------------------------
# AggregatedResult — the merged answer for one request
# -----------------------------------------------------------------------------
@dataclass
class AggregatedResult:
    """Records grouped by source kind, plus the sources that failed.

    Only kinds whose source succeeded appear in ``by_source_kind``; a source
    that succeeded with zero hits still gets an (empty) entry.
    """

    topic: str
    by_source_kind: dict[SourceKind, list[ResourceRecord]] = field(default_factory=dict)
    partial_failures: list[SourceFailure] = field(default_factory=list)

    @property
    def total_records(self) -> int:
        return sum(len(records) for records in self.by_source_kind.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "topic": self.topic,
            "by_source_kind": {
                kind.value: [record.to_dict() for record in records]
                for kind, records in self.by_source_kind.items()
            },
            "partial_failures": [failure.to_dict() for failure in self.partial_failures],
        }


# -----------------------------------------------------------------------------
# ToolDescriptor / ToolResponseEnvelope — the host-facing contract
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolDescriptor:
    """Name, description and JSON schema of one advertised tool."""

    name: str
    description: str
    input_schema: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(frozen=True)
class ToolResponseEnvelope:
    """What a tool call hands back: typed content blocks and an error flag."""

    content: tuple[dict[str, str], ...]
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> "ToolResponseEnvelope":
        return cls(content=({"type": "text", "text": text},))

    @classmethod
    def error(cls, message: str) -> "ToolResponseEnvelope":
        return cls(content=({"type": "text", "text": message},), is_error=True)

    @property
    def text_content(self) -> str:
        """All text blocks joined, in order."""
        return "\n".join(block["text"] for block in self.content if block.get("type") == "text")

    def to_dict(self) -> dict[str, Any]:
        return {"content": [dict(block) for block in self.content], "isError": self.is_error}
