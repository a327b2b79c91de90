# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL the analytics logic behind the Lcontext MCP server:
# argument schemas, the backend HTTP client, the report formatters, the tool
# catalog, and the dispatcher that ties them together.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any other protocol framework.
#   The dispatcher takes a tool name and an argument dict and returns a plain
#   ToolResult; tools/mcp_server.py is the only place that knows about MCP.
#
# The formatters are pure functions (dict in, str out).  You can import them
# in a bare REPL with no network and no API key and they will work.
# =============================================================================
