# =============================================================================
# core/visitors.py  —  Visitor Reports (get_visitors, get_visitor_detail)
# =============================================================================
#
#   GET /api/mcp/visitors             -> {visitors[], total, limit, offset}
#   GET /api/mcp/visitors/{visitorId} -> {visitor, recentSessions[]}
#
#   (both may also carry _dataRetention)
#
# Visitors carry AI-generated profile fields (title, summary, interests,
# goals, recommended action, evidence).  All of them are optional; a visitor
# with none of them still renders its identity and visit dates.
# =============================================================================

from typing import Any, Optional

from core.report import (
    TOP_LIST_CAP,
    Report,
    as_dict,
    as_list,
    capped_lines,
    first_text,
    fmt_date,
    join_present,
    pick,
    text,
)


def _location(visitor: dict) -> Optional[str]:
    parts = join_present([visitor.get("city"), visitor.get("region"), visitor.get("firstCountry")], ", ")
    return parts or None


def _strings(value: Any) -> list[str]:
    return [str(v) for v in as_list(value) if v not in (None, "")]


# -----------------------------------------------------------------------------
# get_visitors
# -----------------------------------------------------------------------------

def format_visitors(data: Any) -> str:
    visitors = [v for v in as_list(pick(data, "visitors")) if isinstance(v, dict)]

    report = Report(data)
    report.add("## Visitors")
    report.add(
        f"Showing {len(visitors)} of {text(pick(data, 'total'), '?')} visitors "
        f"(limit: {text(pick(data, 'limit'), '?')}, offset: {text(pick(data, 'offset'), '0')}):"
    )

    if not visitors:
        report.add("No visitors found matching the criteria.")
        return report.render()

    for visitor in visitors:
        report.add(*_visitor_block(visitor))
    return report.render()


def _visitor_block(visitor: dict) -> list:
    sessions_line = f"- **Sessions:** {text(visitor.get('sessionCount'), '0')}"
    if visitor.get("overallSentiment"):
        sessions_line += f" | {visitor['overallSentiment']}"
    if visitor.get("engagementTrend"):
        sessions_line += f" | Trend: {visitor['engagementTrend']}"
    if visitor.get("segmentName"):
        sessions_line += f" | Segment: {visitor['segmentName']} (ID: {text(visitor.get('segmentId'))})"

    device = join_present([visitor.get("deviceType"), visitor.get("browser"), visitor.get("os")], " / ")
    location = _location(visitor)
    referrer = visitor.get("firstReferer")
    interests = _strings(visitor.get("primaryInterests"))
    goals = _strings(visitor.get("goalsInferred"))
    evidence = _strings(visitor.get("evidence"))

    return [
        f"### {first_text(visitor.get('profileTitle'), visitor.get('visitorId'), default='Unknown visitor')}",
        f"- **Visitor ID:** {text(visitor.get('visitorId'))}",
        sessions_line,
        f"- **First Visit:** {fmt_date(visitor.get('firstVisitAt'))}",
        f"- **Last Visit:** {fmt_date(visitor.get('lastVisitAt'))}",
        f"- **Device:** {device}" if device else None,
        f"- **Location:** {location}" if location else None,
        f"- **Referrer:** {referrer}" if referrer and referrer != "direct" else None,
        f"- **Profile:** {visitor['profileSummary']}" if visitor.get("profileSummary") else None,
        f"- **Interests:** {', '.join(interests)}" if interests else None,
        f"- **Inferred Goals:** {', '.join(goals)}" if goals else None,
        f"- **Recommended Action:** {visitor['recommendedAction']}" if visitor.get("recommendedAction") else None,
        f"- **Evidence:** {'; '.join(evidence)}" if evidence else None,
    ]


# -----------------------------------------------------------------------------
# get_visitor_detail
# -----------------------------------------------------------------------------

def format_visitor_detail(data: Any) -> str:
    """Full profile of one visitor plus their recent sessions."""
    visitor = as_dict(pick(data, "visitor"))
    sessions = [s for s in as_list(pick(data, "recentSessions")) if isinstance(s, dict)]

    report = Report(data)
    report.add(
        f"## Visitor Profile: {first_text(visitor.get('profileTitle'), visitor.get('visitorId'))}",
    )
    report.add(
        f"**Visitor ID:** {text(visitor.get('visitorId'))}",
        f"**First Visit:** {fmt_date(visitor.get('firstVisitAt'))}",
        f"**Last Visit:** {fmt_date(visitor.get('lastVisitAt'))}",
    )

    if visitor.get("deviceType") or visitor.get("browser") or visitor.get("os"):
        report.add(
            "### Device Info",
            f"- **Device Type:** {visitor['deviceType']}" if visitor.get("deviceType") else None,
            f"- **Browser:** {visitor['browser']}" if visitor.get("browser") else None,
            f"- **OS:** {visitor['os']}" if visitor.get("os") else None,
        )

    location = _location(visitor)
    referrer = visitor.get("firstReferer")
    report.add(
        f"**Location:** {location}" if location else None,
        f"**Referrer:** {referrer}" if referrer and referrer != "direct" else None,
        f"**Segment:** {visitor['segmentName']}" if visitor.get("segmentName") else None,
        f"**Overall Sentiment:** {visitor['overallSentiment']}" if visitor.get("overallSentiment") else None,
        f"**Engagement Trend:** {visitor['engagementTrend']}" if visitor.get("engagementTrend") else None,
    )

    if visitor.get("profileSummary"):
        report.add("### Profile Summary", str(visitor["profileSummary"]))

    interests = _strings(visitor.get("primaryInterests"))
    if interests:
        report.add("### Primary Interests", *(f"- {i}" for i in interests))

    goals = _strings(visitor.get("goalsInferred"))
    if goals:
        report.add("### Inferred Goals", *(f"- {g}" for g in goals))

    if visitor.get("recommendedAction"):
        report.add("### Recommended Action", str(visitor["recommendedAction"]))

    evidence = _strings(visitor.get("evidence"))
    if evidence:
        report.add(
            "### Supporting Evidence",
            *capped_lines(evidence, TOP_LIST_CAP, lambda e: f"- {e}", "items"),
        )

    if sessions:
        report.add(f"### Recent Sessions ({len(sessions)})")
        for session in sessions:
            report.add(*_session_block(session))

    return report.render()


def _session_block(session: dict) -> list:
    sentiment = f" [{session['sentiment']}]" if session.get("sentiment") else ""
    facts = (
        f"Duration: {text(session.get('duration'), '0')}s"
        f" | Events: {text(session.get('eventsCount'), '0')}"
    )
    if session.get("deviceType"):
        facts += f" | Device: {session['deviceType']}"

    return [
        f"**Session {text(session.get('id'))}** - {fmt_date(session.get('startTime'))}{sentiment}",
        f"Title: {session['title']}" if session.get("title") else None,
        str(session["description"]) if session.get("description") else None,
        facts,
    ]
