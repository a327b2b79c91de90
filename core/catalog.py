# =============================================================================
# core/catalog.py  —  Tool Catalog
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Declares the nine read-only tools: name, description, and the JSON
#   Schema the calling agent sees.  The catalog is built once at import and
#   is identical on every list_tools() call.
#
# KEEP IN SYNC:
#   Each input schema here must describe the same fields, enums and defaults
#   as the matching pydantic model in core/schemas.py.  tests/test_catalog.py
#   checks the property names; descriptions and defaults are checked by eye.
#
# TOOL NAMING:
#   get_*   read one thing (or one filtered list)
#   list_*  discovery listing
#   Every tool here is read-only and idempotent.
# =============================================================================

from typing import Optional

from core.models import ToolDefinition, freeze

_PERIOD_TYPE = {
    "type": "string",
    "enum": ["day", "week"],
    "description": "Period type for stats aggregation (default: 'day')",
}


def _tool(name: str, description: str, properties: dict, required: Optional[list] = None) -> ToolDefinition:
    schema: dict = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return ToolDefinition(name=name, description=description, input_schema=freeze(schema))


TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    _tool(
        "get_page_context",
        "Get comprehensive analytics context for a page including stats, visitor metrics, "
        "and all interactive elements with their engagement data. Use this when analyzing "
        "user behavior on a specific page.",
        {
            "path": {
                "type": "string",
                "description": "The page path to get context for (e.g., '/products', '/checkout')",
            },
            "startDate": {
                "type": "string",
                "description": "Start date for stats (ISO format, e.g., '2025-01-01')",
            },
            "endDate": {
                "type": "string",
                "description": "End date for stats (ISO format, e.g., '2025-01-13')",
            },
            "periodType": _PERIOD_TYPE,
        },
        required=["path"],
    ),
    _tool(
        "list_pages",
        "List all tracked pages for your website. Use this to discover available pages "
        "before getting detailed context.",
        {
            "limit": {
                "type": "integer",
                "minimum": 0,
                "description": "Maximum number of pages to return (default: 50, max: 200)",
            },
            "search": {
                "type": "string",
                "description": "Search filter for page paths (e.g., '/product' to find all product pages)",
            },
        },
    ),
    _tool(
        "get_element_context",
        "Get detailed analytics for a specific interactive element by its label or ID. "
        "Use this to understand how users interact with buttons, links, or forms. "
        "Provide elementLabel or elementId (at least one).",
        {
            "elementLabel": {
                "type": "string",
                "description": "The element's label text or aria-label to search for",
            },
            "elementId": {
                "type": "string",
                "description": "The element's HTML ID to search for",
            },
            "pagePath": {
                "type": "string",
                "description": "Optional page path to filter elements",
            },
        },
    ),
    _tool(
        "get_app_context",
        "Get application-wide analytics context including total sessions, visitors, page "
        "views, engagement metrics, and AI-generated insights. Use this to understand "
        "overall app performance and trends.",
        {
            "periodType": _PERIOD_TYPE,
            "limit": {
                "type": "integer",
                "minimum": 0,
                "description": "Number of periods to return (default: 7, max: 30)",
            },
        },
    ),
    _tool(
        "get_visitors",
        "Get a list of visitors with their AI-generated profiles, interests, engagement "
        "trends, and segment assignments. Use this to understand who is using your application.",
        {
            "limit": {
                "type": "integer",
                "minimum": 0,
                "description": "Maximum number of visitors to return (default: 20, max: 100)",
            },
            "offset": {
                "type": "integer",
                "minimum": 0,
                "description": "Offset for pagination (default: 0)",
            },
            "segmentId": {"type": "integer", "description": "Filter by segment ID"},
            "search": {
                "type": "string",
                "description": "Search in visitor ID, title, summary, interests, goals, action, evidence",
            },
            "firstVisitAfter": {
                "type": "string",
                "description": "Filter visitors who first visited after this date (ISO format)",
            },
            "firstVisitBefore": {
                "type": "string",
                "description": "Filter visitors who first visited before this date (ISO format)",
            },
            "lastVisitAfter": {
                "type": "string",
                "description": "Filter visitors who last visited after this date (ISO format)",
            },
            "lastVisitBefore": {
                "type": "string",
                "description": "Filter visitors who last visited before this date (ISO format)",
            },
            "engagementTrend": {
                "type": "string",
                "enum": ["increasing", "stable", "decreasing"],
                "description": "Filter by engagement trend",
            },
            "overallSentiment": {
                "type": "string",
                "enum": ["positive", "negative", "neutral", "mixed"],
                "description": "Filter by overall sentiment",
            },
        },
    ),
    _tool(
        "get_visitor_detail",
        "Get detailed profile and recent sessions for a specific visitor. Use this to "
        "understand individual user behavior and journey.",
        {
            "visitorId": {
                "type": "string",
                "description": "The visitor's unique identifier",
            },
        },
        required=["visitorId"],
    ),
    _tool(
        "get_sessions",
        "Get a list of user sessions with AI-generated summaries, titles, and sentiment "
        "analysis. Use this to understand user activity patterns.",
        {
            "limit": {
                "type": "integer",
                "minimum": 0,
                "description": "Maximum number of sessions to return (default: 20, max: 100)",
            },
            "offset": {
                "type": "integer",
                "minimum": 0,
                "description": "Offset for pagination (default: 0)",
            },
            "visitorId": {"type": "string", "description": "Filter sessions by visitor ID"},
            "sentiment": {
                "type": "string",
                "enum": ["positive", "negative", "neutral"],
                "description": "Filter by session sentiment",
            },
            "startDate": {
                "type": "string",
                "description": "Start date for filtering (ISO format, e.g., '2025-01-01')",
            },
            "endDate": {
                "type": "string",
                "description": "End date for filtering (ISO format, e.g., '2025-01-15')",
            },
            "search": {"type": "string", "description": "Search in session title and description"},
            "minDuration": {
                "type": "integer",
                "minimum": 0,
                "description": "Filter sessions with duration >= this value (seconds)",
            },
            "maxDuration": {
                "type": "integer",
                "minimum": 0,
                "description": "Filter sessions with duration <= this value (seconds)",
            },
            "minEventsCount": {
                "type": "integer",
                "minimum": 0,
                "description": "Filter sessions with events count >= this value",
            },
            "maxEventsCount": {
                "type": "integer",
                "minimum": 0,
                "description": "Filter sessions with events count <= this value",
            },
            "pagePath": {
                "type": "string",
                "description": "Filter sessions that visited a specific page path",
            },
        },
    ),
    _tool(
        "get_session_detail",
        "Get detailed information about a specific session including full event data and "
        "visitor context. Use this to investigate specific user interactions.",
        {
            "sessionId": {
                "type": "integer",
                "minimum": 0,
                "description": "The session's numeric ID",
            },
        },
        required=["sessionId"],
    ),
    _tool(
        "get_user_flows",
        "Get automatically detected user journey patterns showing how users navigate through "
        "the application. Each flow represents a common page sequence with engagement metrics, "
        "drop-off points, and sentiment data. Use this to understand conversion funnels, "
        "identify friction points, and discover popular navigation paths.",
        {
            "limit": {
                "type": "integer",
                "minimum": 0,
                "description": "Maximum flows to return (default: 10, max: 50)",
            },
            "category": {
                "type": "string",
                "enum": ["conversion", "exploration", "onboarding", "support", "engagement", "other"],
                "description": "Filter by flow category",
            },
            "minSessions": {
                "type": "integer",
                "minimum": 0,
                "description": "Minimum session count for a flow to be included",
            },
        },
    ),
)

_BY_NAME = {tool.name: tool for tool in TOOL_DEFINITIONS}


def list_tools() -> tuple[ToolDefinition, ...]:
    return TOOL_DEFINITIONS


def get_tool(name: str) -> Optional[ToolDefinition]:
    return _BY_NAME.get(name)
