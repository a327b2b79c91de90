# =============================================================================
# tools/mcp_server.py  —  FastMCP Server (all tools and the guide prompt)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the tool catalog and the analytics guide over MCP.  Every tool
#   is a thin wrapper: the schema comes from core/catalog.py and the call
#   goes straight to core/dispatcher.py.  No report logic lives here.
#
# HOW IT WORKS (the flow):
#   1. The coding agent lists tools and picks one (e.g. "get_page_context")
#   2. FastMCP routes the call to that tool's CatalogTool.run()
#   3. run() hands name + raw arguments to Dispatcher.call_tool()
#   4. A success envelope comes back as text content; an error envelope is
#      raised as ToolError, which FastMCP returns with isError: true
#
# TOOL REGISTRATION:
#   The advertised schema is the hand-written catalog entry, not one derived
#   from a Python signature, and argument validation happens in the
#   dispatcher.  Each tool is therefore a Tool subclass carrying the catalog
#   schema as its `parameters`.
#
# RUNNING THIS SERVER:
#   lcontext-mcp           (console script, see main.py)
#   python main.py         stdio transport; stdout carries the MCP stream
# =============================================================================

import logging
import sys
from typing import Any, Optional

import httpx
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import Tool, ToolResult as MCPToolResult
from pydantic import PrivateAttr

from core.catalog import list_tools
from core.client import AnalyticsClient
from core.config import Settings
from core.dispatcher import Dispatcher
from core.guide import GUIDE_PROMPT, get_prompt
from core.models import ToolDefinition

SERVER_NAME = "lcontext-mcp"

# =============================================================================
# Logging Setup
# =============================================================================
# Logs go to STDERR: stdout is the MCP transport, and anything else written
# there corrupts the JSON-RPC stream.
#
# ANSI colours:
#   CYAN    incoming tool calls (name + argument keys)
#   GREEN   responses (summarised by length, never dumped)
#   YELLOW  status/progress messages
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(tool_name: str, arguments: dict) -> None:
    keys = ", ".join(sorted(arguments)) or "no arguments"
    logging.info(f"{_CYAN}{tool_name} called with: {keys}{_RESET}")


def _log_status(message: str) -> None:
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str, is_error: bool) -> None:
    outcome = "error" if is_error else "response"
    logging.info(f"{_GREEN}  ← {tool_name} {outcome}: {len(text)} chars{_RESET}")


# =============================================================================
# CatalogTool — one catalog entry as a FastMCP tool
# =============================================================================
class CatalogTool(Tool):
    """FastMCP tool whose schema comes from the catalog and whose body is the dispatcher."""

    _dispatcher: Dispatcher = PrivateAttr()

    @classmethod
    def from_definition(cls, definition: ToolDefinition, dispatcher: Dispatcher) -> "CatalogTool":
        manifest = definition.to_dict()
        tool = cls(
            name=manifest["name"],
            description=manifest["description"],
            parameters=manifest["inputSchema"],
        )
        tool._dispatcher = dispatcher
        return tool

    async def run(self, arguments: dict[str, Any]) -> MCPToolResult:
        _log_request(self.name, arguments or {})
        result = await self._dispatcher.call_tool(self.name, arguments)
        _log_response(self.name, result.text, result.is_error)
        if result.is_error:
            raise ToolError(result.text)
        return MCPToolResult(content=result.text)


# =============================================================================
# Server factory
# =============================================================================
def create_server(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastMCP:
    """Build the MCP server: nine catalog tools and the analytics-guide prompt.

    Args:
        settings: Loaded configuration (API key, base URL, timeout).
        transport: Optional httpx transport for the backend client; tests pass
            an httpx.MockTransport here.
    """
    mcp = FastMCP(SERVER_NAME)
    dispatcher = Dispatcher(AnalyticsClient(settings, transport=transport))

    for definition in list_tools():
        mcp.add_tool(CatalogTool.from_definition(definition, dispatcher))
    _log_status(f"Registered {len(list_tools())} tools")

    @mcp.prompt(name=GUIDE_PROMPT.name, description=GUIDE_PROMPT.description)
    def analytics_guide() -> str:
        return get_prompt(GUIDE_PROMPT.name)

    return mcp
