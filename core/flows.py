# =============================================================================
# core/flows.py  —  User Journey Report (get_user_flows)
# =============================================================================
#
#   GET /api/mcp/flows?limit=&category=&minSessions=
#       -> {flows[], total, periodStart?, periodEnd?, _dataRetention?}
#
# A flow is a named page sequence the backend detected across many sessions.
# Each one renders its canonical path, volume, sentiment split, and a
# drop-off funnel drawn as a bar of █ blocks (one block per 5% continue rate).
# =============================================================================

from typing import Any

from core.report import (
    Report,
    as_list,
    fmt_date,
    is_number,
    num,
    pick,
    round_half_up,
    text,
)

BAR_BLOCK = "█"
PERCENT_PER_BLOCK = 5


def format_user_flows(data: Any) -> str:
    flows = [f for f in as_list(pick(data, "flows")) if isinstance(f, dict)]
    period_start = pick(data, "periodStart")
    period_end = pick(data, "periodEnd")

    header = f"Found {text(pick(data, 'total'), str(len(flows)))} detected journey patterns"
    if period_start and period_end:
        header += f" ({fmt_date(period_start)} to {fmt_date(period_end)})"

    report = Report(data)
    report.add("## User Journey Patterns")
    report.add(header + ":")

    if not flows:
        report.add("No user flows detected yet. Flows are generated daily from session data.")
        return report.render()

    for flow in flows:
        report.add(*_flow_block(flow))
    return report.render()


def positive_rate(flow: dict) -> int:
    """Share of sentiment-tagged sessions that were positive, in whole percent."""
    positive = num(flow.get("positiveSessions"))
    tagged = positive + num(flow.get("negativeSessions")) + num(flow.get("neutralSessions"))
    if tagged <= 0:
        return 0
    return round_half_up(100 * positive / tagged)


def funnel_bar(continue_rate: Any) -> str:
    return BAR_BLOCK * max(round_half_up(num(continue_rate) / PERCENT_PER_BLOCK), 0)


def _flow_block(flow: dict) -> list:
    title = f"### {text(flow.get('name'), 'Unnamed flow')}"
    if flow.get("category"):
        title += f" [{flow['category']}]"

    path = " → ".join(str(p) for p in as_list(flow.get("canonicalPath")))

    sentiment = f"- **Sentiment:** {positive_rate(flow)}% positive"
    negative = flow.get("negativeSessions")
    if is_number(negative) and negative > 0:
        sentiment += f" | {text(negative)} negative sessions"

    lines = [
        title,
        f"**Path:** {path}",
        f"- **Sessions:** {text(flow.get('sessionCount'), '0')} "
        f"({text(flow.get('visitorCount'), '0')} unique visitors)",
        f"- **Avg Duration:** {text(flow.get('avgDuration'), '0')}s"
        f" | **Avg Pages:** {text(flow.get('avgPageCount'), '0')}",
        sentiment,
        str(flow["description"]) if flow.get("description") else None,
    ]

    steps = [s for s in as_list(flow.get("dropOffSteps")) if isinstance(s, dict)]
    if steps:
        lines.append("**Drop-off funnel:**")
        for step in steps:
            rate = step.get("continueRate")
            lines.append(
                f"  {text(step.get('page'), '?')}: {funnel_bar(rate)} {text(rate, '0')}%"
            )

    variants = flow.get("variantCount")
    if is_number(variants) and variants > 1:
        lines.append(f"*{text(variants)} path variants detected*")
    return lines
