"""
Tests for the FastMCP server wiring (tools/mcp_server.py).

Tests cover:
- Tool listing with catalog schemas
- Tool execution (success and error envelopes)
- Prompt listing and retrieval

The server runs in memory through fastmcp.Client; the backend is an
httpx.MockTransport.
"""

import pytest
from fastmcp import Client

from core.catalog import TOOL_DEFINITIONS
from core.guide import ANALYTICS_GUIDE
from tools.mcp_server import create_server


# ============================================================================
# Tool listing
# ============================================================================

@pytest.mark.asyncio
async def test_lists_catalog_tools(settings, backend):
    transport, _ = backend({})
    mcp = create_server(settings, transport=transport)

    async with Client(mcp) as client:
        tools = await client.list_tools()

    assert sorted(t.name for t in tools) == sorted(d.name for d in TOOL_DEFINITIONS)
    by_name = {t.name: t for t in tools}
    session_schema = by_name["get_session_detail"].inputSchema
    assert session_schema["required"] == ["sessionId"]
    assert session_schema["properties"]["sessionId"]["type"] == "integer"


# ============================================================================
# Tool execution
# ============================================================================

@pytest.mark.asyncio
async def test_call_returns_report_text(settings, backend):
    transport, seen = backend({"flows": [], "total": 0, "_dataRetention": {"days": 30}})
    mcp = create_server(settings, transport=transport)

    async with Client(mcp) as client:
        result = await client.call_tool("get_user_flows", {}, raise_on_error=False)

    assert not result.is_error
    text = result.content[0].text
    assert text.startswith("## User Journey Patterns")
    assert "last 30 days" in text
    assert seen[0].url.path == "/api/mcp/flows"


@pytest.mark.asyncio
async def test_precondition_failure_is_error_result(settings, backend):
    transport, seen = backend({})
    mcp = create_server(settings, transport=transport)

    async with Client(mcp) as client:
        result = await client.call_tool("get_element_context", {}, raise_on_error=False)

    assert result.is_error
    assert "Either elementLabel or elementId is required" in result.content[0].text
    assert seen == []


@pytest.mark.asyncio
async def test_backend_failure_is_error_result(settings, backend):
    transport, _ = backend(status=500, body="upstream exploded")
    mcp = create_server(settings, transport=transport)

    async with Client(mcp) as client:
        result = await client.call_tool("get_app_context", {"periodType": "week"}, raise_on_error=False)

    assert result.is_error
    assert "Error: API request failed (500): upstream exploded" in result.content[0].text


# ============================================================================
# Prompts
# ============================================================================

@pytest.mark.asyncio
async def test_guide_prompt(settings, backend):
    transport, _ = backend({})
    mcp = create_server(settings, transport=transport)

    async with Client(mcp) as client:
        prompts = await client.list_prompts()
        guide = await client.get_prompt("analytics-guide")

    assert [p.name for p in prompts] == ["analytics-guide"]
    assert guide.messages[0].role == "user"
    assert guide.messages[0].content.text == ANALYTICS_GUIDE
