"""
Tests for the tool catalog (core/catalog.py) and its agreement with the
argument models the dispatcher validates against.
"""

import pytest

from core.catalog import TOOL_DEFINITIONS, get_tool, list_tools
from core.dispatcher import ROUTES

EXPECTED_TOOLS = [
    "get_page_context",
    "list_pages",
    "get_element_context",
    "get_app_context",
    "get_visitors",
    "get_visitor_detail",
    "get_sessions",
    "get_session_detail",
    "get_user_flows",
]


def test_catalog_lists_nine_tools_in_order():
    assert [tool.name for tool in list_tools()] == EXPECTED_TOOLS


def test_catalog_is_stable():
    assert list_tools() is list_tools()
    assert [t.to_dict() for t in list_tools()] == [t.to_dict() for t in list_tools()]


def test_every_tool_has_a_route():
    assert set(ROUTES) == set(EXPECTED_TOOLS)


@pytest.mark.parametrize("tool", TOOL_DEFINITIONS, ids=lambda t: t.name)
def test_schema_matches_argument_model(tool):
    schema = tool.to_dict()["inputSchema"]
    model = ROUTES[tool.name].schema

    assert schema["type"] == "object"
    assert set(schema["properties"]) == set(model.model_fields)
    required = sorted(name for name, info in model.model_fields.items() if info.is_required())
    assert sorted(schema.get("required", [])) == required


@pytest.mark.parametrize("tool", TOOL_DEFINITIONS, ids=lambda t: t.name)
def test_every_property_is_described(tool):
    for name, prop in tool.to_dict()["inputSchema"]["properties"].items():
        assert prop.get("description"), f"{tool.name}.{name} has no description"


def test_enum_values_match_models():
    flows = get_tool("get_user_flows").to_dict()["inputSchema"]["properties"]
    assert "other" in flows["category"]["enum"]
    visitors = get_tool("get_visitors").to_dict()["inputSchema"]["properties"]
    assert visitors["overallSentiment"]["enum"] == ["positive", "negative", "neutral", "mixed"]


def test_get_tool_unknown():
    assert get_tool("drop_tables") is None


def test_definitions_are_read_only():
    tool = get_tool("list_pages")
    with pytest.raises(TypeError):
        tool.input_schema["properties"]["limit"] = {}
