# =============================================================================
# finder/errors.py  —  Error Taxonomy
# =============================================================================
#
# Every failure the finder can produce has a class here, and each class
# belongs to exactly one scope:
#
#   SourceError            one upstream failed.  Local to that source; it
#                          becomes a partial_failures entry, never an abort.
#   AllSourcesFailedError  every source failed for one request.  Reported as
#                          an isError tool response; the session lives on.
#   RequestError           the host sent a bad call (unknown tool, missing
#                          or malformed argument).  Becomes an error reply
#                          for that one request.
#   ConfigError            the environment is unusable at startup.
#   TransportFatalError    stdio could not be bound or broke.  The only
#                          error allowed to end the process.
# =============================================================================

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from finder.models import SourceFailure, SourceKind


class FinderError(Exception):
    """Base class for all learning resource finder errors."""


class SourceError(FinderError):
    """One source adapter failed to produce records."""

    def __init__(self, source_kind: "SourceKind", cause: str):
        self.source_kind = source_kind
        self.cause = cause
        super().__init__(f"{source_kind.value}: {cause}")


class AllSourcesFailedError(FinderError):
    """No source produced records for a request."""

    def __init__(self, topic: str, causes: Sequence["SourceFailure"]):
        self.topic = topic
        self.causes = list(causes)
        if self.causes:
            detail = "; ".join(f"{c.source_kind.value}: {c.message}" for c in self.causes)
        else:
            detail = "no sources are registered"
        super().__init__(f"All sources failed for '{topic}': {detail}")


class RequestError(FinderError):
    """The host's request cannot be served as sent."""


class UnknownToolError(RequestError):
    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")


class InvalidArgumentError(RequestError):
    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid argument '{field}': {reason}")


class ConfigError(FinderError):
    """The environment holds an unusable setting."""


class TransportFatalError(FinderError):
    """The stdio stream could not be established or broke irrecoverably."""
