# =============================================================================
# finder_server/registry.py  —  Tool Registry & Error Classification
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Maps tool names to handler objects.  Adding a tool means registering
#   another ToolHandler; nothing here branches on tool names.
#
# ERROR CLASSIFICATION (the only place it happens):
#   RequestError (UnknownToolError, InvalidArgumentError)
#       → re-raised.  The protocol layer sends it back as an error reply
#         for this one request.
#   AllSourcesFailedError / SourceError
#       → ToolResponseEnvelope(isError=True) carrying the message.
#   anything else a handler raises
#       → logged with traceback, then an isError envelope.  A bug in one
#         call must never end the session.
# =============================================================================

from abc import ABC, abstractmethod
import logging
from typing import Any, Optional

from finder.errors import FinderError, RequestError, UnknownToolError
from finder.models import ToolDescriptor, ToolResponseEnvelope

logger = logging.getLogger(__name__)


class ToolHandler(ABC):
    """A tool: what it looks like (describe) and what it does (invoke)."""

    @abstractmethod
    def describe(self) -> ToolDescriptor:
        ...

    @abstractmethod
    async def invoke(self, arguments: dict[str, Any]) -> ToolResponseEnvelope:
        """Run the tool.

        Raise RequestError for bad arguments; any other exception is
        classified by the registry.
        """


def classify_error(exc: Exception) -> ToolResponseEnvelope:
    """Turn a handler failure into the envelope the host receives."""
    if isinstance(exc, FinderError):
        return ToolResponseEnvelope.error(f"Error: {exc}")
    return ToolResponseEnvelope.error(f"Error: internal error ({type(exc).__name__}: {exc})")


class ToolRegistry:
    """Name → handler mapping consumed by the protocol layer."""

    def __init__(self):
        self._handlers: dict[str, ToolHandler] = {}

    def register(self, handler: ToolHandler) -> ToolHandler:
        name = handler.describe().name
        if name in self._handlers:
            raise ValueError(f"Tool already registered: {name}")
        self._handlers[name] = handler
        return handler

    def catalog(self) -> list[ToolDescriptor]:
        """Descriptors of every registered tool, in registration order."""
        return [handler.describe() for handler in self._handlers.values()]

    async def dispatch(self, name: str, arguments: Optional[dict[str, Any]]) -> ToolResponseEnvelope:
        """Invoke the named tool and always come back with an envelope.

        Raises:
            UnknownToolError: ``name`` is not registered.
            InvalidArgumentError: The handler rejected the arguments.
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise UnknownToolError(name)

        try:
            return await handler.invoke(arguments or {})
        except RequestError:
            raise
        except FinderError as exc:
            logger.warning("Tool %s failed: %s", name, exc)
            return classify_error(exc)
        except Exception as exc:
            logger.exception("Tool %s raised unexpectedly", name)
            return classify_error(exc)
