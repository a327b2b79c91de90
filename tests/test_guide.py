"""
Tests for the analytics guide prompt (core/guide.py).
"""

import pytest

from core.errors import UnknownPromptError
from core.guide import ANALYTICS_GUIDE, GUIDE_PROMPT, get_prompt, list_prompts


def test_single_prompt_listed():
    assert [p.name for p in list_prompts()] == ["analytics-guide"]
    assert "decision trees" in GUIDE_PROMPT.description


def test_guide_text():
    text = get_prompt("analytics-guide")
    assert text is ANALYTICS_GUIDE
    assert "## Analysis Workflow" in text
    assert "## Decision Trees" in text
    assert "## Connecting Findings to Code" in text


def test_guide_mentions_every_tool():
    for name in (
        "get_app_context",
        "list_pages",
        "get_page_context",
        "get_element_context",
        "get_visitors",
        "get_visitor_detail",
        "get_sessions",
        "get_session_detail",
        "get_user_flows",
    ):
        assert name in ANALYTICS_GUIDE


def test_unknown_prompt():
    with pytest.raises(UnknownPromptError) as excinfo:
        get_prompt("other")
    assert str(excinfo.value) == "Unknown prompt: other"
