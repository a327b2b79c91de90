# =============================================================================
# core/sessions.py  —  Session Reports (get_sessions, get_session_detail)
# =============================================================================
#
#   GET /api/mcp/sessions      -> {sessions[], total, limit, offset}
#   GET /api/mcp/sessions/{id} -> {session{..., events[]}, visitor?}
#
# EVENT TIMELINE:
#   The detail report lists every event on one line.  Five event kinds have
#   a bespoke rendering that surfaces their most diagnostic fields:
#
#     page_view     /path "Title" (referrer: ...)
#     click         "Label" <TAG> #id [selector] → dest on /source
#     form_submit   <FORM> #id name="..." method=POST → dest on /source
#     scroll_depth  75% on /source
#     web_vital     LCP=1234ms on /path   (CLS is a ratio: CLS=0.120)
#
#   Any other kind dumps its raw data as compact JSON.
# =============================================================================

import json
from typing import Any
from urllib.parse import urlparse

from core.report import (
    Report,
    as_dict,
    as_list,
    fmt_date,
    fmt_time,
    is_number,
    join_present,
    pick,
    text,
)


# -----------------------------------------------------------------------------
# get_sessions
# -----------------------------------------------------------------------------

def format_sessions(data: Any) -> str:
    sessions = [s for s in as_list(pick(data, "sessions")) if isinstance(s, dict)]

    report = Report(data)
    report.add("## Sessions")
    report.add(
        f"Showing {len(sessions)} of {text(pick(data, 'total'), '?')} sessions "
        f"(limit: {text(pick(data, 'limit'), '?')}, offset: {text(pick(data, 'offset'), '0')}):"
    )

    if not sessions:
        report.add("No sessions found matching the criteria.")
        return report.render()

    for session in sessions:
        report.add(*_session_block(session))
    return report.render()


def _session_block(session: dict) -> list:
    started = session.get("startTime")
    sentiment = f" [{session['sentiment']}]" if session.get("sentiment") else ""

    pages_line = None
    if session.get("pageCount"):
        pages_line = f"- **Pages Visited:** {text(session['pageCount'])}"
        visited = session.get("pagesVisited")
        if isinstance(visited, list):
            pages_line += f" ({', '.join(str(p) for p in visited)})"

    return [
        f"### Session {text(session.get('id'))} - {fmt_date(started)} {fmt_time(started)}{sentiment}",
        f"- **Visitor:** {text(session.get('visitorId'))}",
        f"- **Duration:** {text(session.get('duration'), '0')}s",
        f"- **Events:** {text(session.get('eventsCount'), '0')}",
        f"- **Device:** {session['deviceType']}" if session.get("deviceType") else None,
        f"- **Entry Page:** {session['entryPage']}" if session.get("entryPage") else None,
        f"- **Exit Page:** {session['exitPage']}" if session.get("exitPage") else None,
        pages_line,
        f"- **Title:** {session['title']}" if session.get("title") else None,
        f"- **Description:** {session['description']}" if session.get("description") else None,
    ]


# -----------------------------------------------------------------------------
# get_session_detail
# -----------------------------------------------------------------------------

def format_session_detail(data: Any) -> str:
    """One session with its visitor context and full event timeline."""
    session = as_dict(pick(data, "session"))
    visitor = pick(data, "visitor")
    started = session.get("startTime")
    sentiment = f" [{session['sentiment']}]" if session.get("sentiment") else ""

    report = Report(data)

    location = None
    if session.get("region") or session.get("city"):
        location = join_present([session.get("city"), session.get("region"), session.get("country")], ", ")
    report.add(
        f"## Session {text(session.get('id'))}{sentiment}",
        f"**Date:** {fmt_date(started)} {fmt_time(started)}",
        f"**Duration:** {text(session.get('duration'), '0')}s",
        f"**Events:** {text(session.get('eventsCount'), '0')}",
        f"**Device:** {session['deviceType']}" if session.get("deviceType") else None,
        f"**Location:** {location}" if location else None,
        f"**Title:** {session['title']}" if session.get("title") else None,
    )

    if isinstance(visitor, dict):
        report.add(*_visitor_context(visitor))

    if session.get("description"):
        report.add("### Session Description", str(session["description"]))

    events = [e for e in as_list(session.get("events")) if isinstance(e, dict)]
    if events:
        report.add(f"### Events Timeline ({len(events)} events)", _event_summary(events))
        report.add(*(render_event(event) for event in events))

    return report.render()


def _visitor_context(visitor: dict) -> list:
    browser_os = join_present([visitor.get("browser"), visitor.get("os")], " / ")
    location = join_present([visitor.get("city"), visitor.get("region")], ", ")
    return [
        "### Visitor Context",
        f"**Visitor ID:** {text(visitor.get('visitorId'))}",
        f"**Browser/OS:** {browser_os}" if browser_os else None,
        f"**Device Type:** {visitor['deviceType']}" if visitor.get("deviceType") else None,
        f"**Location:** {location}" if location else None,
        f"**Profile:** {visitor['profileTitle']}" if visitor.get("profileTitle") else None,
        f"**Summary:** {visitor['profileSummary']}" if visitor.get("profileSummary") else None,
        f"**Overall Sentiment:** {visitor['overallSentiment']}" if visitor.get("overallSentiment") else None,
        f"**Engagement Trend:** {visitor['engagementTrend']}" if visitor.get("engagementTrend") else None,
        f"**Segment:** {visitor['segmentName']}" if visitor.get("segmentName") else None,
    ]


def _event_summary(events: list[dict]) -> str:
    counts: dict[str, int] = {}
    for event in events:
        kind = str(event.get("type") or "unknown")
        counts[kind] = counts.get(kind, 0) + 1
    return "**Event Summary:** " + ", ".join(f"{kind}: {n}" for kind, n in counts.items())


def render_event(event: dict) -> str:
    """One timeline line for an event."""
    kind = str(event.get("type") or "unknown")
    line = f"- **{kind}**"
    if event.get("timestamp"):
        line += f" ({fmt_time(event['timestamp'])})"

    data = event.get("data")
    if not data:
        return line

    renderer = _EVENT_RENDERERS.get(kind)
    if renderer is None or not isinstance(data, dict):
        return line + " " + json.dumps(data, sort_keys=True, ensure_ascii=False, default=str)
    return line + renderer(data)


def _render_page_view(data: dict) -> str:
    out = f" {data.get('path') or '/'}"
    if data.get("title"):
        out += f' "{data["title"]}"'
    if data.get("referrer"):
        out += f" (referrer: {data['referrer']})"
    return out


def _render_click(data: dict) -> str:
    out = ""
    if data.get("label"):
        out += f' "{data["label"]}"'
    out += f" <{data.get('tagName') or 'UNKNOWN'}>"
    if data.get("id"):
        out += f" #{data['id']}"
    if data.get("selector"):
        out += f" [{data['selector']}]"
    return out + _destination(data)


def _render_form_submit(data: dict) -> str:
    out = " <FORM>"
    if data.get("id"):
        out += f" #{data['id']}"
    if data.get("name"):
        out += f' name="{data["name"]}"'
    if data.get("method"):
        out += f" method={data['method']}"
    return out + _destination(data)


def _render_scroll_depth(data: dict) -> str:
    out = f" {text(data.get('depth'), '?')}%"
    if data.get("sourcePath"):
        out += f" on {data['sourcePath']}"
    return out


def _render_web_vital(data: dict) -> str:
    metric = data.get("metric") or "?"
    value = data.get("value")
    if metric == "CLS":
        out = f" {metric}={value:.3f}" if is_number(value) else f" {metric}={text(value, '?')}"
    else:
        out = f" {metric}={text(value, '?')}ms"
    source = data.get("sourceUrl")
    if isinstance(source, str) and source:
        out += f" on {_source_path(source)}"
    return out


def _source_path(url: str) -> str:
    try:
        return urlparse(url).path or "/"
    except ValueError:
        return url


def _destination(data: dict) -> str:
    out = ""
    if data.get("destinationUrl"):
        out += f" → {data['destinationUrl']}"
    if data.get("sourcePath"):
        out += f" on {data['sourcePath']}"
    return out


_EVENT_RENDERERS = {
    "page_view": _render_page_view,
    "click": _render_click,
    "form_submit": _render_form_submit,
    "scroll_depth": _render_scroll_depth,
    "web_vital": _render_web_vital,
}
