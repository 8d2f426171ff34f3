# =============================================================================
# finder_server/__init__.py
# =============================================================================
# This package is the Protocol Server: it puts the finder/ logic on the
# MCP wire.
#
# ARCHITECTURAL ROLE:
#   finder_server/ is the "translation layer" between the host and the
#   core search logic.  It:
#     1. Keeps a registry of tool handlers (registry.py, handlers.py)
#     2. Binds that registry to a FastMCP server (mcp_server.py)
#     3. Turns results and errors into tool responses (one place only:
#        registry.classify_error)
#     4. Owns the stdio loop, logging and process exit codes (app.py)
#
# WHAT IT DOES NOT DO:
#   - No source-specific logic (that's in finder/sources/)
#   - No merging or ordering decisions (that's finder/aggregator.py)
# =============================================================================
