# =============================================================================
# core/dispatcher.py  —  Tool Call Dispatcher
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns (tool name, raw arguments) into a ToolResult.  Every call runs the
#   same pipeline:
#
#     validate  -> pydantic model from core/schemas.py
#     check     -> optional semantic precondition (no network on failure)
#     endpoint  -> /api/mcp/... path, path segments percent-encoded
#     fetch     -> AnalyticsClient.fetch (one GET, JSON body)
#     format    -> markdown report from the matching core/<report>.py
#
# ERROR BOUNDARY:
#   call_tool never raises.  Failures are caught once, here, and become
#   error envelopes:
#
#     unknown tool          "Unknown tool: <name>"
#     precondition failed   "<message>"            (no "Error:" prefix)
#     anything else         "Error: <message>"
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional
from urllib.parse import quote, urlencode

from core.app_context import format_app_context
from core.client import AnalyticsClient
from core.elements import format_element_context
from core.errors import PreconditionError, UnknownToolError
from core.flows import format_user_flows
from core.models import ToolResult
from core.pages import format_page_context, format_page_list
from core.schemas import (
    GetAppContextArgs,
    GetElementContextArgs,
    GetPageContextArgs,
    GetSessionDetailArgs,
    GetSessionsArgs,
    GetUserFlowsArgs,
    GetVisitorDetailArgs,
    GetVisitorsArgs,
    ListPagesArgs,
    ToolArguments,
    validate_arguments,
)
from core.sessions import format_session_detail, format_sessions
from core.visitors import format_visitor_detail, format_visitors

logger = logging.getLogger(__name__)

API_PREFIX = "/api/mcp"


# -----------------------------------------------------------------------------
# Endpoint construction
# -----------------------------------------------------------------------------

def segment(value: Any) -> str:
    """Percent-encode one path segment ("/" included)."""
    return quote(str(value), safe="")


def with_query(path: str, args: ToolArguments) -> str:
    """Append the argument query string; no "?" when there is nothing to send."""
    params = args.query_params()
    if not params:
        return path
    return f"{path}?{urlencode(params)}"


def _collection(resource: str) -> Callable[[ToolArguments], str]:
    def build(args: ToolArguments) -> str:
        return with_query(f"{API_PREFIX}/{resource}", args)
    return build


def _item(resource: str, key: str) -> Callable[[ToolArguments], str]:
    def build(args: ToolArguments) -> str:
        return with_query(f"{API_PREFIX}/{resource}/{segment(getattr(args, key))}", args)
    return build


def require_element_selector(args: GetElementContextArgs) -> None:
    if not args.elementLabel and not args.elementId:
        raise PreconditionError("Either elementLabel or elementId is required")


# -----------------------------------------------------------------------------
# Routing table
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ToolRoute:
    schema: type[ToolArguments]
    endpoint: Callable[[Any], str]
    formatter: Callable[[Any], str]
    precondition: Optional[Callable[[Any], None]] = None


ROUTES: dict[str, ToolRoute] = {
    "get_page_context": ToolRoute(GetPageContextArgs, _item("pages", "path"), format_page_context),
    "list_pages": ToolRoute(ListPagesArgs, _collection("pages"), format_page_list),
    "get_element_context": ToolRoute(
        GetElementContextArgs,
        _collection("elements"),
        format_element_context,
        precondition=require_element_selector,
    ),
    "get_app_context": ToolRoute(GetAppContextArgs, _collection("app-context"), format_app_context),
    "get_visitors": ToolRoute(GetVisitorsArgs, _collection("visitors"), format_visitors),
    "get_visitor_detail": ToolRoute(
        GetVisitorDetailArgs, _item("visitors", "visitorId"), format_visitor_detail
    ),
    "get_sessions": ToolRoute(GetSessionsArgs, _collection("sessions"), format_sessions),
    "get_session_detail": ToolRoute(
        GetSessionDetailArgs, _item("sessions", "sessionId"), format_session_detail
    ),
    "get_user_flows": ToolRoute(GetUserFlowsArgs, _collection("flows"), format_user_flows),
}


# -----------------------------------------------------------------------------
# Dispatcher
# -----------------------------------------------------------------------------

class Dispatcher:
    """Runs tool calls against one AnalyticsClient.

    Holds no per-call state, so any number of calls may be in flight at once.
    """

    def __init__(self, client: AnalyticsClient, routes: Optional[dict[str, ToolRoute]] = None):
        self._client = client
        self._routes = ROUTES if routes is None else routes

    async def call_tool(self, name: str, arguments: Any = None) -> ToolResult:
        keys = sorted(arguments) if isinstance(arguments, dict) else []
        logger.info("Tool call: %s %s", name, keys)
        try:
            text = await self._run(name, arguments)
        except UnknownToolError as exc:
            logger.warning("%s", exc)
            return ToolResult.error(str(exc))
        except PreconditionError as exc:
            logger.warning("%s rejected: %s", name, exc)
            return ToolResult.error(str(exc))
        except Exception as exc:
            logger.warning("%s failed: %s", name, exc)
            return ToolResult.error(f"Error: {exc}")
        return ToolResult.success(text)

    async def _run(self, name: str, arguments: Any) -> str:
        route = self._routes.get(name)
        if route is None:
            raise UnknownToolError(name)

        args = validate_arguments(name, route.schema, arguments)
        if route.precondition is not None:
            route.precondition(args)

        data = await self._client.fetch(route.endpoint(args))
        return route.formatter(data)
