# =============================================================================
# core/elements.py  —  Element Lookup Report (get_element_context)
# =============================================================================
#
#   GET /api/mcp/elements?elementLabel=&elementId=&pagePath=
#       -> {elements[], _dataRetention?}
#
# One block per matching element.  Every optional attribute renders as N/A
# rather than disappearing, so the agent can tell "no HTML id" apart from
# "field not returned".
# =============================================================================

from typing import Any

from core.report import Report, as_list, fmt_date, pick, text


def format_element_context(data: Any) -> str:
    elements = [e for e in as_list(pick(data, "elements")) if isinstance(e, dict)]
    report = Report(data)

    if not elements:
        report.add("No elements found matching the criteria.")
        return report.render()

    report.add("## Elements Found", f"Found {len(elements)} matching element(s):")
    for element in elements:
        report.add(*_element_block(element))
    return report.render()


def _element_block(element: dict) -> list:
    category = str(element.get("category") or "element").upper()
    name = element.get("label") or element.get("elementId") or "Unknown"
    destination = element.get("destinationUrl")

    return [
        f"### {category}: {name} (ID: {text(element.get('id'))})",
        f"- **Page:** {text(element.get('pagePath'))}",
        f"- **Tag:** `<{element.get('tagName') or 'unknown'}>`",
        f"- **HTML ID:** {text(element.get('elementId'))}",
        f"- **Name:** {text(element.get('elementName'))}",
        f"- **ARIA Label:** {text(element.get('ariaLabel'))}",
        f"- **Category:** {text(element.get('category'))}",
        f"- **Links to:** {destination}" if destination else None,
        f"- **Total Interactions:** {text(element.get('totalInteractions'), '0')}",
        f"- **Unique Visitors:** {text(element.get('uniqueVisitors'), '0')}",
        f"- **First Seen:** {fmt_date(element.get('firstSeenAt'))}",
        f"- **Last Seen:** {fmt_date(element.get('lastSeenAt'))}",
    ]
