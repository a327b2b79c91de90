# =============================================================================
# core/pages.py  —  Page Reports (get_page_context, list_pages)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Renders the two page-level payloads:
#
#   GET /api/mcp/pages/{path}  -> {page, stats[], elements[], _dataRetention?}
#   GET /api/mcp/pages         -> {pages[], total, _dataRetention?}
#
# PAGE REPORT SECTION ORDER (fixed):
#   header -> statistics summary -> recent breakdown -> performance?
#   -> page flow? -> AI insights? -> elements -> retention notice?
#
# AGGREGATION:
#   Count-like fields (views, visitors, bounces, entries, exits) are summed
#   across exactly the periods in the payload.  Entry/exit rates are derived
#   from those sums.  Nothing is resampled or interpolated.
# =============================================================================

from typing import Any

from core.report import (
    PAGE_ELEMENTS_CAP,
    PERIOD_ROWS_CAP,
    TOP_LIST_CAP,
    Report,
    as_dict,
    as_list,
    capped,
    capped_lines,
    first_text,
    fmt_date,
    is_number,
    more,
    num,
    period_label,
    period_summary_label,
    pick,
    rank_by_count,
    rate,
    text,
    web_vitals_lines,
)


def format_page_context(data: Any) -> str:
    """Render a single page's stats, flow, insights and element engagement."""
    page = as_dict(pick(data, "page"))
    stats = [s for s in as_list(pick(data, "stats")) if isinstance(s, dict)]
    elements = [e for e in as_list(pick(data, "elements")) if isinstance(e, dict)]

    report = Report(data)
    report.add(
        f"## Page Analytics: {text(page.get('path'))}",
        f"**Title:** {page['title']}" if page.get("title") else None,
        f"**First Seen:** {fmt_date(page.get('firstSeenAt'))}",
        f"**Last Seen:** {fmt_date(page.get('lastSeenAt'))}",
    )

    if not stats:
        report.add(
            "### Page Statistics",
            "No statistics available for the selected time range.",
        )
    else:
        report.extend(_statistics_summary(stats))
        report.extend(_recent_breakdown(stats))
        report.extend(web_vitals_lines(stats[0]))
        report.extend(_page_flow(stats))
        report.extend(_ai_insights(stats))

    _add_elements(report, elements)
    return report.render()


def _statistics_summary(stats: list[dict]) -> list[str]:
    views = sum(num(s.get("viewCount")) for s in stats)
    visitors = sum(num(s.get("uniqueVisitors")) for s in stats)
    bounces = sum(num(s.get("bounceCount")) for s in stats)
    entries = sum(num(s.get("entryCount")) for s in stats)
    exits = sum(num(s.get("exitCount")) for s in stats)

    return [
        "### Page Statistics",
        f"**Summary ({period_summary_label(stats)})**",
        f"- Total Views: {text(views)}",
        f"- Total Unique Visitors: {text(visitors)}",
        f"- Total Bounces: {text(bounces)}",
        f"- Entry Rate: {rate(entries, views)}%",
        f"- Exit Rate: {rate(exits, views)}%",
    ]


def _recent_breakdown(stats: list[dict]) -> list[str]:
    unit = "Weekly" if stats[0].get("periodType") == "week" else "Daily"

    def row(stat: dict) -> str:
        return (
            f"| {fmt_date(stat.get('periodStart'))}"
            f" | Views: {text(stat.get('viewCount'), '0')}"
            f" | Visitors: {text(stat.get('uniqueVisitors'), '0')}"
            f" | Avg Duration: {text(stat.get('avgDuration'))}s"
            f" | Scroll: {text(stat.get('avgScrollDepth'))}% |"
        )

    return [f"**Recent {unit} Breakdown:**"] + capped_lines(
        stats, PERIOD_ROWS_CAP, row, "periods"
    )


def _page_flow(stats: list[dict]) -> list[str]:
    previous: dict[str, float] = {}
    following: dict[str, float] = {}
    for stat in stats:
        for entry in as_list(stat.get("topPreviousPages")):
            if isinstance(entry, dict) and entry.get("path") is not None:
                key = str(entry["path"])
                previous[key] = previous.get(key, 0) + num(entry.get("count"))
        for entry in as_list(stat.get("topNextPages")):
            if isinstance(entry, dict) and entry.get("path") is not None:
                key = str(entry["path"])
                following[key] = following.get(key, 0) + num(entry.get("count"))

    if not previous and not following:
        return []

    def row(item: tuple[str, float]) -> str:
        return f"- {item[0]} ({text(item[1])} navigations)"

    lines = ["### Page Flow"]
    if previous:
        lines.append("**Where users came from:**")
        lines += capped_lines(rank_by_count(previous), TOP_LIST_CAP, row, "pages")
    if following:
        lines.append("**Where users went next:**")
        lines += capped_lines(rank_by_count(following), TOP_LIST_CAP, row, "pages")
    return lines


def _ai_insights(stats: list[dict]) -> list[str]:
    summaries = [s for s in stats if s.get("aiSummary")]
    if not summaries:
        return []
    lines = ["### AI Insights"]
    for stat in summaries:
        updated = fmt_date(stat.get("aiSummaryUpdatedAt"), default="Unknown")
        lines.append("")
        lines.append(f"**{period_label(stat)}** (updated: {updated})")
        lines.append(str(stat["aiSummary"]))
    return lines


def _add_elements(report: Report, elements: list[dict]) -> None:
    report.add(f"### Interactive Elements ({len(elements)} tracked)")
    if not elements:
        report.add("No interactive elements tracked on this page.")
        return

    totals = []
    for element in elements:
        periods = [s for s in as_list(element.get("stats")) if isinstance(s, dict)]
        interactions = sum(num(s.get("interactionCount")) for s in periods)
        visitors = sum(num(s.get("uniqueVisitors")) for s in periods)
        totals.append((element, periods, interactions, visitors))
    totals.sort(key=lambda item: item[2], reverse=True)

    shown, remaining = capped(totals, PAGE_ELEMENTS_CAP)
    for element, periods, interactions, visitors in shown:
        report.add(*_element_block(element, periods, interactions, visitors))
    report.add(more(remaining, "elements"))


def _element_block(
    element: dict, periods: list[dict], interactions: float, visitors: float
) -> list:
    label = first_text(
        element.get("label"),
        element.get("ariaLabel"),
        element.get("elementId"),
        element.get("tagName"),
        default="Unknown",
    )
    category = str(element.get("category") or "other").upper()

    tag = f"- Tag: `<{element.get('tagName') or 'unknown'}>`"
    if element.get("elementId"):
        tag += f' id="{element["elementId"]}"'
    if element.get("ariaLabel"):
        tag += f' aria-label="{element["ariaLabel"]}"'

    def period_row(stat: dict) -> str:
        return (
            f"  - {fmt_date(stat.get('periodStart'))}: "
            f"{text(stat.get('interactionCount'), '0')} interactions, "
            f"{text(stat.get('uniqueVisitors'), '0')} visitors"
        )

    lines = [
        f"**{category}: {label}** (ID: {text(element.get('id'))})",
        f"- Total Interactions: {text(interactions)}",
        f"- Unique Visitors: {text(visitors)}",
        tag,
        f"- Links to: {element['destinationUrl']}" if element.get("destinationUrl") else None,
        "- Per-period breakdown:",
    ]
    lines += capped_lines(periods, PERIOD_ROWS_CAP, period_row, "periods", indent="  - ")
    return lines


def format_page_list(data: Any) -> str:
    """Render the tracked-pages listing with one traffic line per page."""
    pages = [p for p in as_list(pick(data, "pages")) if isinstance(p, dict)]
    report = Report(data)

    if not pages:
        report.add(
            "No pages found. Make sure tracking is set up and data has been collected."
        )
        return report.render()

    total = pick(data, "total")
    found = f"Found {len(pages)} pages"
    if is_number(total) and total > len(pages):
        found += f" (showing first {len(pages)} of {text(total)})"

    report.add("## Tracked Pages")
    report.add(found + ":")
    report.add(*(_page_line(page) for page in pages))
    return report.render()


def _page_line(page: dict) -> str:
    views = page.get("viewCount")
    if is_number(views):
        bounce = page.get("bounceCount")
        bounce_rate = rate(bounce, views, digits=0) if views > 0 and is_number(bounce) else "?"
        traffic = (
            f" | Views: {text(views)}"
            f", Visitors: {text(page.get('uniqueVisitors'), '?')}"
            f", Bounce: {bounce_rate}%"
            f", Avg Duration: {text(page.get('avgDuration'), '?')}s"
            f", Scroll: {text(page.get('avgScrollDepth'), '?')}%"
        )
    else:
        traffic = " | No recent traffic data"

    title = f" - {page['title']}" if page.get("title") else ""
    return (
        f"- **{text(page.get('path'))}**{title} "
        f"({fmt_date(page.get('firstSeenAt'))} to {fmt_date(page.get('lastSeenAt'))}{traffic})"
    )
