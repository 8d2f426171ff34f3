# =============================================================================
# finder_server/app.py  —  Process Entry Point
# =============================================================================
#
# WHAT HAPPENS:
#   1. Loads .env into the environment (YOUTUBE_API_KEY, ...)
#   2. Reads the environment ONCE into a FinderConfig
#   3. Builds sources → aggregator → registry → FastMCP server
#   4. Serves MCP over stdio until the host disconnects
#
# EXIT CODES:
#   0  the host closed the stream (or Ctrl-C)
#   1  startup failed: bad configuration, stdio could not be bound, or any
#      other error while starting
# =============================================================================

import asyncio
import logging

from dotenv import load_dotenv

from finder.config import FinderConfig
from finder.errors import ConfigError, TransportFatalError
from finder_server.mcp_server import build_server, configure_logging

logger = logging.getLogger(__name__)


def main() -> int:
    load_dotenv()

    try:
        config = FinderConfig.from_env()
    except ConfigError as exc:
        configure_logging()
        logger.error("Failed to start server: %s", exc)
        return 1
    configure_logging(config.log_level)

    try:
        server = build_server(config)
        asyncio.run(server.run_stdio())
    except KeyboardInterrupt:
        return 0
    except (ConfigError, TransportFatalError) as exc:
        logger.error("Failed to start server: %s", exc)
        return 1
    except Exception as exc:
        logger.exception("Failed to start server: %s", exc)
        return 1
    return 0
