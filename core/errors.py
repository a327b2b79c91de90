# =============================================================================
# core/errors.py  —  Error Taxonomy
# =============================================================================
#
# Every failure a tool call can hit has a class here.  The dispatcher catches
# them all at one boundary and turns the message into an error envelope, so
# the message text is what the calling agent actually reads.
#
#   LcontextError
#   ├── ConfigError            missing/invalid environment (fatal at startup)
#   ├── InvalidArgumentsError  arguments failed schema validation
#   ├── PreconditionError      schema-valid arguments that break a tool rule
#   ├── UnknownToolError       no tool with that name
#   ├── UnknownPromptError     no prompt with that name
#   └── ApiError               anything that went wrong talking to the backend
#       ├── AuthError          no API key configured (never hits the network)
#       ├── TransportError     the request did not complete
#       ├── HttpError          non-2xx response
#       └── DecodeError        response body is not JSON
# =============================================================================

from typing import Optional


class LcontextError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(LcontextError):
    """Required configuration is missing or malformed."""


class InvalidArgumentsError(LcontextError):
    """Tool arguments failed schema validation."""

    def __init__(self, tool_name: str, problems: list[str]):
        self.tool_name = tool_name
        self.problems = problems
        super().__init__(
            f"Invalid arguments for {tool_name}: " + "; ".join(problems)
        )


class PreconditionError(LcontextError):
    """Arguments are structurally valid but violate a tool-specific rule."""


class UnknownToolError(LcontextError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class UnknownPromptError(LcontextError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown prompt: {name}")


class ApiError(LcontextError):
    """Base class for backend request failures."""


class AuthError(ApiError):
    pass


class TransportError(ApiError):
    pass


class HttpError(ApiError):
    """The backend answered with a non-success status."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"API request failed ({status}): {body}")


class DecodeError(ApiError):
    """The backend answered 2xx but the body was not valid JSON."""

    SNIPPET_LIMIT = 200

    def __init__(self, body: str, snippet: Optional[str] = None):
        if snippet is None:
            snippet = body[: self.SNIPPET_LIMIT]
            if len(body) > self.SNIPPET_LIMIT:
                snippet += "..."
        self.snippet = snippet
        super().__init__(f"Invalid JSON response from API: {snippet}")
