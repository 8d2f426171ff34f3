# =============================================================================
# main.py  —  Entry Point for the Learning Resource Finder MCP server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# The host (an MCP client such as Claude Desktop) normally starts this
# script itself and talks to it over stdin/stdout.  Register it with:
#
#   {"command": "uv", "args": ["run", "python", "/path/to/main.py"]}
#
# See finder_server/app.py for what happens at startup.
# =============================================================================

from finder_server.app import main

if __name__ == "__main__":
    raise SystemExit(main())
