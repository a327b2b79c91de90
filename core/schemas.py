# =============================================================================
# core/schemas.py  —  Tool Argument Schemas
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   One pydantic model per tool.  Each model declares the accepted fields,
#   their types and defaults, plus the closed set of legal values for
#   enumerated fields.
#
# VALIDATION RULES:
#   - strict typing: "5" is not a number, true is not an integer;
#     whole floats such as 10.0 count as integers, as in JSON Schema
#   - unknown enum values are rejected
#   - counts and offsets are never negative
#   - unknown keys are ignored (agents sometimes send extras)
#   - no cross-field checks (start-before-end is the backend's call)
#
#   The "elementLabel or elementId" rule for get_element_context is NOT here;
#   it is a semantic precondition enforced by the dispatcher.
# =============================================================================

from typing import Annotated, Any, ClassVar, Literal, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from core.errors import InvalidArgumentsError

PeriodType = Literal["day", "week"]
EngagementTrend = Literal["increasing", "stable", "decreasing"]
VisitorSentiment = Literal["positive", "negative", "neutral", "mixed"]
SessionSentiment = Literal["positive", "negative", "neutral"]
FlowCategory = Literal[
    "conversion", "exploration", "onboarding", "support", "engagement", "other"
]


def _whole_float_to_int(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


WholeNumber = Annotated[int, BeforeValidator(_whole_float_to_int)]


class ToolArguments(BaseModel):
    """Base for every tool's argument set."""

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    # Fields that go into the URL path rather than the query string.
    path_fields: ClassVar[tuple[str, ...]] = ()

    def query_params(self) -> dict[str, str]:
        """Fields to send as query parameters, in declaration order.

        None and empty strings are omitted; path fields are never included.
        """
        params: dict[str, str] = {}
        for name in type(self).model_fields:
            if name in self.path_fields:
                continue
            value = getattr(self, name)
            if value is None or value == "":
                continue
            params[name] = str(value)
        return params


class GetPageContextArgs(ToolArguments):
    path_fields: ClassVar[tuple[str, ...]] = ("path",)

    path: str
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    periodType: PeriodType = "day"


class ListPagesArgs(ToolArguments):
    limit: WholeNumber = Field(default=50, ge=0)
    search: Optional[str] = None


class GetElementContextArgs(ToolArguments):
    elementLabel: Optional[str] = None
    elementId: Optional[str] = None
    pagePath: Optional[str] = None


class GetAppContextArgs(ToolArguments):
    periodType: PeriodType = "day"
    limit: WholeNumber = Field(default=7, ge=0)


class GetVisitorsArgs(ToolArguments):
    limit: WholeNumber = Field(default=20, ge=0)
    offset: WholeNumber = Field(default=0, ge=0)
    segmentId: Optional[WholeNumber] = None
    search: Optional[str] = None
    firstVisitAfter: Optional[str] = None
    firstVisitBefore: Optional[str] = None
    lastVisitAfter: Optional[str] = None
    lastVisitBefore: Optional[str] = None
    engagementTrend: Optional[EngagementTrend] = None
    overallSentiment: Optional[VisitorSentiment] = None


class GetVisitorDetailArgs(ToolArguments):
    path_fields: ClassVar[tuple[str, ...]] = ("visitorId",)

    visitorId: str


class GetSessionsArgs(ToolArguments):
    limit: WholeNumber = Field(default=20, ge=0)
    offset: WholeNumber = Field(default=0, ge=0)
    visitorId: Optional[str] = None
    sentiment: Optional[SessionSentiment] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    search: Optional[str] = None
    minDuration: Optional[WholeNumber] = Field(default=None, ge=0)
    maxDuration: Optional[WholeNumber] = Field(default=None, ge=0)
    minEventsCount: Optional[WholeNumber] = Field(default=None, ge=0)
    maxEventsCount: Optional[WholeNumber] = Field(default=None, ge=0)
    pagePath: Optional[str] = None


class GetSessionDetailArgs(ToolArguments):
    path_fields: ClassVar[tuple[str, ...]] = ("sessionId",)

    sessionId: WholeNumber = Field(ge=0)


class GetUserFlowsArgs(ToolArguments):
    limit: Optional[WholeNumber] = Field(default=None, ge=0)
    category: Optional[FlowCategory] = None
    minSessions: Optional[WholeNumber] = Field(default=None, ge=0)


ArgsT = TypeVar("ArgsT", bound=ToolArguments)


def validate_arguments(tool_name: str, model: type[ArgsT], raw: Any) -> ArgsT:
    """Validate and default a raw argument bag.

    A missing bag (None) is treated as {}.

    Raises:
        InvalidArgumentsError: one entry per violated field/constraint.
    """
    try:
        return model.model_validate({} if raw is None else raw)
    except ValidationError as exc:
        problems = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err["loc"]) or "arguments"
            problems.append(f"{location}: {err['msg']}")
        raise InvalidArgumentsError(tool_name, problems) from exc
