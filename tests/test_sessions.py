"""
Tests for the session reports and event timeline rendering (core/sessions.py).
"""

from core.sessions import format_session_detail, format_sessions, render_event


# ============================================================================
# get_sessions
# ============================================================================

def test_session_list():
    out = format_sessions({
        "sessions": [
            {
                "id": 42,
                "visitorId": "v-123",
                "startTime": "2025-01-10T10:15:00Z",
                "duration": 95,
                "eventsCount": 4,
                "sentiment": "negative",
                "pageCount": 2,
                "pagesVisited": ["/cart", "/checkout"],
                "title": "Checkout abandoned",
            }
        ],
        "total": 3,
        "limit": 20,
        "offset": 0,
    })
    assert "Showing 1 of 3 sessions (limit: 20, offset: 0):" in out
    assert "### Session 42 - 2025-01-10 10:15:00 [negative]" in out
    assert "- **Visitor:** v-123" in out
    assert "- **Pages Visited:** 2 (/cart, /checkout)" in out
    assert "- **Title:** Checkout abandoned" in out


def test_empty_session_list_with_notice():
    out = format_sessions({"sessions": [], "total": 0, "limit": 20, "offset": 0, "_dataRetention": {"days": 30}})
    assert "No sessions found matching the criteria." in out
    assert out.endswith("Upgrade for full history.*")


# ============================================================================
# get_session_detail
# ============================================================================

def test_session_detail_header(session_payload):
    out = format_session_detail(session_payload)
    assert out.startswith("## Session 42 [negative]\n**Date:** 2025-01-10 10:15:00\n**Duration:** 95s")
    assert "**Location:** Lisbon, Lisbon, PT" in out
    assert "### Visitor Context" in out
    assert "**Browser/OS:** Safari / iOS" in out
    assert "### Session Description\nThe visitor tried to pay twice and left." in out


def test_event_summary_in_first_seen_order(session_payload):
    out = format_session_detail(session_payload)
    assert "### Events Timeline (4 events)\n**Event Summary:** click: 1, web_vital: 2, custom: 1" in out


def test_click_event_line(session_payload):
    out = format_session_detail(session_payload)
    assert '- **click** (10:15:30) "Buy" <BUTTON> #buy-btn on /checkout' in out


def test_web_vital_lines(session_payload):
    out = format_session_detail(session_payload)
    assert "- **web_vital** (10:15:31) LCP=2400ms on /checkout" in out
    assert "- **web_vital** (10:15:32) CLS=0.120" in out


def test_unknown_event_dumps_sorted_json(session_payload):
    out = format_session_detail(session_payload)
    assert '- **custom** (10:15:40) {"a": "x", "b": 1}' in out


def test_session_detail_notice_last(session_payload):
    out = format_session_detail(session_payload)
    assert out.endswith("*Note: Data limited to last 30 days (free plan). Upgrade for full history.*")


# ============================================================================
# render_event
# ============================================================================

def test_render_page_view():
    event = {"type": "page_view", "data": {"path": "/pricing", "title": "Pricing", "referrer": "google.com"}}
    assert render_event(event) == '- **page_view** /pricing "Pricing" (referrer: google.com)'


def test_render_form_submit():
    event = {
        "type": "form_submit",
        "data": {"id": "signup", "name": "signup", "method": "POST", "destinationUrl": "/welcome", "sourcePath": "/join"},
    }
    assert render_event(event) == '- **form_submit** <FORM> #signup name="signup" method=POST → /welcome on /join'


def test_render_scroll_depth():
    event = {"type": "scroll_depth", "data": {"depth": 75, "sourcePath": "/blog"}}
    assert render_event(event) == "- **scroll_depth** 75% on /blog"


def test_render_click_without_tag():
    assert render_event({"type": "click", "data": {"label": "Go"}}) == '- **click** "Go" <UNKNOWN>'


def test_event_without_data():
    assert render_event({"type": "page_view"}) == "- **page_view**"


def test_render_web_vital_with_malformed_source_url():
    event = {"type": "web_vital", "data": {"metric": "LCP", "value": 1200, "sourceUrl": "http://[bad"}}
    assert render_event(event) == "- **web_vital** LCP=1200ms on http://[bad"
