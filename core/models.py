# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shapes that cross the boundary between the
# core and the protocol layer: what a tool IS (ToolDefinition), what a prompt
# IS (PromptDefinition), and what a tool call RETURNS (ToolResult).
#
# Remote payloads are NOT modelled here.  The backend schema is
# loose and evolving, so each formatter reads the fields it needs with an
# explicit fallback instead of trusting a typed shape.
#
# Tool arguments live in core/schemas.py (pydantic), since they need real
# validation rather than just structure.
# =============================================================================

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


# -----------------------------------------------------------------------------
# ToolDefinition — one entry in the tool catalog
# -----------------------------------------------------------------------------
# Built once at import time, never mutated.  input_schema is the JSON Schema
# advertised to the calling agent; it must describe the same fields as the
# tool's pydantic model in core/schemas.py.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolDefinition:
    """A named, schema-described operation the assistant can call."""

    name: str
    description: str
    input_schema: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({"type": "object", "properties": {}})
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": _thaw(self.input_schema),
        }


# -----------------------------------------------------------------------------
# PromptDefinition — one entry in the prompt catalog
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class PromptDefinition:
    name: str
    description: str
    title: str = ""


# -----------------------------------------------------------------------------
# ToolResult — the envelope every tool call returns
# -----------------------------------------------------------------------------
# Exactly one of two shapes ever leaves the dispatcher:
#   success: {"content": [{"type": "text", "text": ...}]}
#   failure: {"isError": true, "content": [{"type": "text", "text": ...}]}
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolResult:
    text: str
    is_error: bool = False

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(text=text, is_error=False)

    @classmethod
    def error(cls, text: str) -> "ToolResult":
        return cls(text=text, is_error=True)

    def to_dict(self) -> dict[str, Any]:
        envelope: dict[str, Any] = {"content": [{"type": "text", "text": self.text}]}
        if self.is_error:
            envelope = {"isError": True, **envelope}
        return envelope


def freeze(value: Any) -> Any:
    """Recursively wrap dicts in read-only proxies and lists in tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value
