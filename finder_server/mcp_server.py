# =============================================================================
# finder_server/mcp_server.py  —  FastMCP Protocol Server
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Puts the tool registry on a FastMCP server.  Every registered handler
#   becomes one MCP tool: its descriptor is what "tools/list" advertises,
#   and "tools/call" lands in ToolRegistry.dispatch().
#
# HOW IT WORKS (the flow):
#   1. The host spawns this process and talks MCP over stdin/stdout
#   2. "tools/list" → FastMCP lists the RegistryTool objects built from the
#      catalog (schema advertised verbatim, no signature introspection)
#   3. "tools/call" → RegistryTool.run() → FinderServer.call_tool()
#      → ToolRegistry.dispatch() → handler → Aggregator
#   4. The envelope comes back: a success becomes a ToolResult; an error
#      envelope or a rejected request is raised as ToolError, which FastMCP
#      sends as an isError reply.  The session stays open either way.
#   Unknown tool names never reach us: FastMCP answers those itself.
#
# SERVER STATES:
#   uninitialized → connected (stdio bound) → serving (first request of any
#   kind, list or call)
#   → closed (host hung up, or stdio broke)
#
# RUNNING THIS SERVER:
#   python main.py               (or the learning-resource-finder script)
# =============================================================================

from enum import Enum
import json
import logging
import sys
from typing import Any, Optional, Sequence

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import PrivateAttr

from finder.aggregator import Aggregator
from finder.config import FinderConfig
from finder.errors import RequestError, TransportFatalError
from finder.models import ToolDescriptor, ToolResponseEnvelope
from finder.sources import build_sources
from finder.sources.base import ResourceSource
from finder_server.handlers import SearchLearningResourcesHandler
from finder_server.registry import ToolRegistry

SERVER_NAME = "learning-resource-finder"
SERVER_VERSION = "1.0.0"

logger = logging.getLogger(__name__)

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the MCP server talks to the host over STDOUT.
# A log line on stdout would corrupt the JSON-RPC stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + arguments)
#     - GREEN for response JSON
#     - YELLOW for intermediate status messages
# =============================================================================

_CYAN = "\033[36m"     # Requests
_GREEN = "\033[32m"    # Responses
_YELLOW = "\033[33m"   # Status
_RESET = "\033[0m"


def configure_logging(level: str = "INFO") -> None:
    """Send all logging to stderr at the configured level."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    # httpx logs every request URL at INFO, and the YouTube URL carries the key.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _log_request(tool_name: str, arguments: dict[str, Any]) -> None:
    param_str = ", ".join(f"{k}={v!r}" for k, v in arguments.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, envelope: ToolResponseEnvelope) -> ToolResponseEnvelope:
    logger.info(
        f"{_GREEN}  ← {tool_name} response: "
        f"{json.dumps(envelope.to_dict(), separators=(',', ':'), ensure_ascii=False)}{_RESET}"
    )
    return envelope


class ServerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    CONNECTED = "connected"
    SERVING = "serving"
    CLOSED = "closed"


# =============================================================================
# RegistryTool — one FastMCP tool backed by a registry entry
# =============================================================================
# FastMCP normally builds tools from decorated functions and derives the
# schema from the signature.  Our schema is declared in finder/catalog.py,
# so we subclass Tool directly: parameters = the declared schema, run() =
# hand the raw arguments to the registry.
# =============================================================================
class RegistryTool(Tool):
    _server: Any = PrivateAttr()

    @classmethod
    def bind(cls, server: "FinderServer", descriptor: ToolDescriptor) -> "RegistryTool":
        tool = cls(
            name=descriptor.name,
            description=descriptor.description,
            parameters=dict(descriptor.input_schema),
        )
        tool._server = server
        return tool

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        try:
            envelope = await self._server.call_tool(self.name, arguments)
        except RequestError as exc:
            raise ToolError(str(exc)) from exc

        if envelope.is_error:
            raise ToolError(envelope.text_content)
        return ToolResult(content=[
            TextContent(type="text", text=block["text"])
            for block in envelope.content
            if block.get("type") == "text"
        ])


class _SessionStateMiddleware(Middleware):
    """Moves the server to SERVING when the first request is read."""

    def __init__(self, server: "FinderServer"):
        self._server = server

    async def on_request(self, context: MiddlewareContext, call_next):
        self._server.state = ServerState.SERVING
        return await call_next(context)


class FinderServer:
    """The registry, its FastMCP binding, and the session state."""

    def __init__(self, registry: ToolRegistry):
        self.registry = registry
        self.state = ServerState.UNINITIALIZED
        self.mcp = FastMCP(SERVER_NAME, version=SERVER_VERSION)
        self.mcp.add_middleware(_SessionStateMiddleware(self))
        for descriptor in registry.catalog():
            self.mcp.add_tool(RegistryTool.bind(self, descriptor))

    async def call_tool(self, name: str, arguments: Optional[dict[str, Any]]) -> ToolResponseEnvelope:
        """Handle one "tools/call": log it, dispatch it, log the envelope.

        Raises:
            RequestError: Unknown tool or invalid arguments.
        """
        self.state = ServerState.SERVING
        arguments = arguments or {}
        _log_request(name, arguments)
        try:
            envelope = await self.registry.dispatch(name, arguments)
        except RequestError as exc:
            _log_status(f"Rejected: {exc}")
            raise
        if envelope.is_error:
            _log_status("Returning error response")
        return _log_response(name, envelope)

    async def run_stdio(self) -> None:
        """Serve MCP over stdin/stdout until the host disconnects.

        Raises:
            TransportFatalError: stdio could not be bound or broke.
        """
        self.state = ServerState.CONNECTED
        logger.info("Server started and listening on stdio")
        try:
            await self.mcp.run_async(transport="stdio")
        except Exception as exc:
            # A closed or missing stdin surfaces as AttributeError, or as an
            # ExceptionGroup from the transport task group.
            raise TransportFatalError(f"stdio transport failed: {exc!r}") from exc
        finally:
            self.state = ServerState.CLOSED
            logger.info("Server closed")


def build_server(
    config: FinderConfig,
    sources: Optional[Sequence[ResourceSource]] = None,
) -> FinderServer:
    """Wire config → sources → aggregator → handlers → FastMCP.

    Args:
        config: Startup configuration.
        sources: Adapters to use instead of the real ones (tests).

    Raises:
        ConfigError: A required source is not configured.
    """
    if sources is None:
        sources = build_sources(config)
    aggregator = Aggregator(sources, source_timeout=config.source_timeout)

    registry = ToolRegistry()
    registry.register(SearchLearningResourcesHandler(aggregator))
    for source in aggregator.sources:
        reason = source.missing_config()
        if reason:
            _log_status(f"Source {source.name} disabled: {reason}")
    return FinderServer(registry)
