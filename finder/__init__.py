# =============================================================================
# finder/__init__.py
# =============================================================================
# This package contains ALL search logic for the learning resource finder.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any protocol framework.
#   Every module here is plain Python plus httpx for the upstream calls, so
#   the aggregation rules can be tested without an MCP session.
#
# Why?  The "brains" (source adapters, merging, failure isolation) should be
# testable and reusable.  The MCP server is just the wiring; this is the
# engine.
# =============================================================================
