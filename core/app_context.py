# =============================================================================
# core/app_context.py  —  Application Overview Report (get_app_context)
# =============================================================================
#
#   GET /api/mcp/app-context?periodType=&limit=
#       -> {stats[], topPages[], topEntryPages[], topExitPages[],
#           topReferrers[], topCountries[], topDevices[], topBrowsers[],
#           topOS[], recentInsights[], _dataRetention?}
#
# SECTION ORDER (fixed):
#   header -> summary -> sentiment -> daily breakdown -> AI insights
#   -> top pages -> entry pages -> exit pages -> referrers -> countries
#   -> devices -> browsers -> OS -> performance -> recent insights
#   -> retention notice
#
# AGGREGATION:
#   Count fields are summed over the periods present.  Per-session averages
#   (duration, pages, events) are the plain mean of the per-period averages,
#   not weighted by period length.  Bounce rate is recomputed from the
#   summed bounces and sessions.
# =============================================================================

from typing import Any, Callable

from core.report import (
    INSIGHTS_CAP,
    PERIOD_ROWS_CAP,
    TOP_LIST_CAP,
    Report,
    as_list,
    capped,
    capped_lines,
    fmt_count,
    fmt_date,
    mean,
    more,
    num,
    period_label,
    period_summary_label,
    pick,
    rate,
    round_half_up,
    text,
    web_vitals_lines,
)

_COUNT_FIELDS = (
    "totalSessions",
    "uniqueVisitors",
    "newVisitors",
    "totalPageViews",
    "totalClicks",
    "totalFormSubmits",
    "bounceCount",
    "positiveSessions",
    "negativeSessions",
    "neutralSessions",
)


def format_app_context(data: Any) -> str:
    """Render application-wide traffic, engagement, audience and insights."""
    stats = [s for s in as_list(pick(data, "stats")) if isinstance(s, dict)]

    report = Report(data)
    report.add("## Application Analytics Overview")

    if not stats:
        report.add("No statistics available for the selected time range.")
    else:
        report.extend(_summary(stats))
        report.extend(_sentiment(stats))
        report.extend(_daily_breakdown(stats))
        report.extend(_ai_insights(stats))

    report.extend(_top_list(data, "topPages", "Top Pages by Views",
                            lambda p: f"- {text(p.get('path'))}: {text(p.get('viewCount'), '0')} views"))
    report.extend(_top_list(data, "topEntryPages", "Top Entry Pages",
                            lambda p: f"- {text(p.get('path'))}: {text(p.get('count'), '0')} entries"))
    report.extend(_top_list(data, "topExitPages", "Top Exit Pages",
                            lambda p: f"- {text(p.get('path'))}: {text(p.get('count'), '0')} exits"))
    report.extend(_top_list(data, "topReferrers", "Top Referrers", _audience_row("source")))
    report.extend(_top_list(data, "topCountries", "Top Countries", _audience_row("country")))
    report.extend(_top_list(data, "topDevices", "Device Breakdown", _audience_row("deviceType")))
    report.extend(_top_list(data, "topBrowsers", "Top Browsers", _audience_row("browser")))
    report.extend(_top_list(data, "topOS", "Top Operating Systems", _audience_row("os")))

    if stats:
        report.extend(web_vitals_lines(stats[0]))
    report.extend(_recent_insights(data))
    return report.render()


def _totals(stats: list[dict]) -> dict[str, float]:
    return {name: sum(num(s.get(name)) for s in stats) for name in _COUNT_FIELDS}


def _summary(stats: list[dict]) -> list[str]:
    totals = _totals(stats)
    avg_duration = round_half_up(mean([s.get("avgSessionDuration") for s in stats]))
    avg_pages = mean([s.get("avgPagesPerSession") for s in stats])
    avg_events = mean([s.get("avgEventsPerSession") for s in stats])

    return [
        f"### Summary ({period_summary_label(stats)})",
        f"- **Total Sessions:** {fmt_count(totals['totalSessions'])}",
        f"- **Unique Visitors:** {fmt_count(totals['uniqueVisitors'])}",
        f"- **New Visitors:** {fmt_count(totals['newVisitors'])}",
        f"- **Total Page Views:** {fmt_count(totals['totalPageViews'])}",
        f"- **Total Clicks:** {fmt_count(totals['totalClicks'])}",
        f"- **Total Form Submits:** {fmt_count(totals['totalFormSubmits'])}",
        f"- **Avg Session Duration:** {avg_duration}s",
        f"- **Avg Pages Per Session:** {avg_pages:.1f}",
        f"- **Avg Events Per Session:** {avg_events:.1f}",
        f"- **Bounce Rate:** {rate(totals['bounceCount'], totals['totalSessions'])}%",
    ]


def _sentiment(stats: list[dict]) -> list[str]:
    totals = _totals(stats)
    return [
        "### Session Sentiment",
        f"- Positive: {text(totals['positiveSessions'])}"
        f" | Neutral: {text(totals['neutralSessions'])}"
        f" | Negative: {text(totals['negativeSessions'])}",
    ]


def _daily_breakdown(stats: list[dict]) -> list[str]:
    unit = "Weekly" if stats[0].get("periodType") == "week" else "Daily"

    def row(stat: dict) -> str:
        return (
            f"| {fmt_date(stat.get('periodStart'))}"
            f" | Sessions: {text(stat.get('totalSessions'), '0')}"
            f" | Visitors: {text(stat.get('uniqueVisitors'), '0')}"
            f" | Pages/Session: {text(stat.get('avgPagesPerSession'), '0')}"
            f" | Clicks: {text(stat.get('totalClicks'), '0')}"
            f" | Bounce: {text(stat.get('bounceRate'), '0')}% |"
        )

    return [f"### {unit} Breakdown"] + capped_lines(stats, PERIOD_ROWS_CAP, row, "periods")


def _ai_insights(stats: list[dict]) -> list[str]:
    summaries = [s for s in stats if s.get("aiSummary")]
    if not summaries:
        return []
    lines = ["### AI Insights"]
    shown, remaining = capped(summaries, INSIGHTS_CAP)
    for stat in shown:
        lines += ["", f"**{period_label(stat)}**", str(stat["aiSummary"])]
    return lines + [more(remaining, "insights")]


def _audience_row(key: str) -> Callable[[dict], str]:
    def row(item: dict) -> str:
        return (
            f"- {text(item.get(key), 'Unknown')}: "
            f"{text(item.get('sessions'), '0')} sessions, "
            f"{text(item.get('visitors'), '0')} visitors"
        )
    return row


def _top_list(data: Any, key: str, heading: str, row: Callable[[dict], str]) -> list[str]:
    items = [i for i in as_list(pick(data, key)) if isinstance(i, dict)]
    if not items:
        return []
    return [f"### {heading}"] + capped_lines(items, TOP_LIST_CAP, row, "entries")


def _recent_insights(data: Any) -> list[str]:
    insights = [i for i in as_list(pick(data, "recentInsights")) if isinstance(i, dict)]
    if not insights:
        return []
    lines = ["### Recent Insights"]
    shown, remaining = capped(insights, INSIGHTS_CAP)
    for insight in shown:
        lines += [
            "",
            f"**{text(insight.get('title'), 'Untitled')}** ({fmt_date(insight.get('createdAt'))})",
            text(insight.get("content"), ""),
        ]
    return lines + [more(remaining, "insights")]
