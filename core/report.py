# =============================================================================
# core/report.py  —  Report Builder & Shared Formatting Helpers
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Every tool turns a backend JSON payload into a markdown report.  This
#   module holds the pieces those formatters share:
#
#     Report          ordered section builder; the retention notice is
#                     always rendered last
#     pick/as_list    tolerant reads from loosely-typed payloads
#     rate            100 * num / den to one decimal, "0" on zero denominator
#     capped/more     fixed truncation with an explicit "...and N more" line
#     fmt_*           deterministic rendering of dates, times and numbers
#
# CONTEXT BUDGET DISCIPLINE:
#   Reports go straight into an LLM context window.  Lists are capped at a
#   fixed size per section, and any cut is announced rather than silent, so
#   the agent knows there is more to ask for.
#
# DETERMINISM:
#   No locale, no clock, no randomness.  Dates render as ISO YYYY-MM-DD and
#   times as HH:MM:SS UTC, so the same payload always yields the same text.
# =============================================================================

import math
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional, Sequence

NA = "N/A"

# Truncation caps, one per kind of list section.
TOP_LIST_CAP = 5
PERIOD_ROWS_CAP = 7
PAGE_ELEMENTS_CAP = 20
INSIGHTS_CAP = 3


class Report:
    """Ordered list of markdown sections joined by blank lines.

    Sections render in the order they were added.  The data-retention
    notice, when the payload carries one, is appended after everything else.
    """

    def __init__(self, data: Any = None):
        self._sections: list[str] = []
        self._notice = retention_notice(data)

    def add(self, *lines: Optional[str]) -> "Report":
        """Append one section.  None lines are skipped; empty sections are dropped."""
        kept = [line for line in lines if line is not None]
        if kept:
            self._sections.append("\n".join(kept))
        return self

    def extend(self, lines: Iterable[Optional[str]]) -> "Report":
        return self.add(*lines)

    def render(self) -> str:
        sections = list(self._sections)
        if self._notice:
            sections.append(self._notice)
        return "\n\n".join(sections).strip()


# -----------------------------------------------------------------------------
# Payload access
# -----------------------------------------------------------------------------

def pick(obj: Any, *keys: str, default: Any = None) -> Any:
    """Nested dict lookup that never raises; missing/None yields default."""
    current = obj
    for key in keys:
        if not isinstance(current, dict):
            return default
        current = current.get(key)
    return default if current is None else current


def as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def num(value: Any) -> float:
    """Numeric value for aggregation; anything non-numeric or non-finite counts as 0."""
    return value if is_number(value) and math.isfinite(value) else 0


def text(value: Any, default: str = NA) -> str:
    """Display form of a scalar, with a fallback for missing values."""
    if value is None or value == "":
        return default
    if is_number(value):
        return fmt_number(value)
    return str(value)


def first_text(*values: Any, default: str = NA) -> str:
    """First non-empty value in display form."""
    for value in values:
        if value not in (None, ""):
            return text(value)
    return default


def join_present(values: Sequence[Any], sep: str) -> str:
    return sep.join(str(v) for v in values if v not in (None, ""))


# -----------------------------------------------------------------------------
# Derived metrics
# -----------------------------------------------------------------------------

def rate(numerator: Any, denominator: Any, digits: int = 1) -> str:
    """Percentage string; "0" whenever the denominator is zero or missing."""
    den = num(denominator)
    if den <= 0:
        return "0"
    return f"{100 * num(numerator) / den:.{digits}f}"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (2.5 -> 3); NaN and inf give 0."""
    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def mean(values: Sequence[Any]) -> float:
    """Average over exactly the values present; 0 for an empty sequence."""
    if not values:
        return 0
    return sum(num(v) for v in values) / len(values)


# -----------------------------------------------------------------------------
# Truncation
# -----------------------------------------------------------------------------

def capped(items: Sequence[Any], cap: int) -> tuple[list, int]:
    """(first `cap` items, number left out)."""
    items = list(items)
    return items[:cap], max(len(items) - cap, 0)


def more(remaining: int, noun: str, indent: str = "") -> Optional[str]:
    """The explicit truncation marker, or None if nothing was cut."""
    if remaining <= 0:
        return None
    return f"{indent}*...and {remaining} more {noun}*"


def capped_lines(
    items: Sequence[Any],
    cap: int,
    render: Callable[[Any], str],
    noun: str,
    indent: str = "",
) -> list[str]:
    shown, remaining = capped(items, cap)
    lines = [render(item) for item in shown]
    marker = more(remaining, noun, indent)
    if marker:
        lines.append(marker)
    return lines


def rank_by_count(counts: dict[str, float]) -> list[tuple[str, float]]:
    """Sort (key, count) pairs descending; equal counts keep first-seen order."""
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


# -----------------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------------

def fmt_number(value: Any) -> str:
    if not is_number(value):
        return NA
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def fmt_count(value: Any) -> str:
    """Integer with thousands separators: 12345 -> "12,345"."""
    if not is_number(value):
        return "0"
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.1f}"
    return f"{int(value):,}"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO-8601 string or epoch milliseconds -> datetime (UTC when aware)."""
    if is_number(value):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed


def fmt_date(value: Any, default: str = NA) -> str:
    parsed = parse_timestamp(value)
    return parsed.strftime("%Y-%m-%d") if parsed else default


def fmt_time(value: Any, default: str = NA) -> str:
    parsed = parse_timestamp(value)
    return parsed.strftime("%H:%M:%S") if parsed else default


def period_label(stat: Any) -> str:
    """Heading for one period stat: "2025-01-06" or "Week of 2025-01-06"."""
    date = fmt_date(pick(stat, "periodStart"))
    if pick(stat, "periodType") == "week":
        return f"Week of {date}"
    return date


def period_summary_label(stats: Sequence[Any]) -> str:
    """ "7 days" / "4 weeks"; the unit comes from the first period."""
    unit = pick(stats[0], "periodType", default="day") if stats else "day"
    return f"{len(stats)} {unit}s"


def web_vitals_lines(stat: Any) -> list[str]:
    """Performance bullet lines from one period stat (empty when no vitals)."""
    lcp = pick(stat, "avgLcp")
    fcp = pick(stat, "avgFcp")
    fid = pick(stat, "avgFid")
    cls = pick(stat, "avgCls")
    if not (lcp or fcp or fid or is_number(cls)):
        return []
    lines = ["### Performance (Web Vitals)"]
    if lcp:
        lines.append(f"- **LCP** (Largest Contentful Paint): {text(lcp)}ms")
    if fcp:
        lines.append(f"- **FCP** (First Contentful Paint): {text(fcp)}ms")
    if fid:
        lines.append(f"- **FID** (First Input Delay): {text(fid)}ms")
    if is_number(cls):
        lines.append(f"- **CLS** (Cumulative Layout Shift): {cls:.3f}")
    return lines


def retention_notice(data: Any) -> Optional[str]:
    """Trailing free-plan notice, taken verbatim from `_dataRetention.days`."""
    retention = pick(data, "_dataRetention")
    if not isinstance(retention, dict):
        return None
    days = text(retention.get("days"), default="?")
    return (
        "---\n"
        f"*Note: Data limited to last {days} days (free plan). "
        "Upgrade for full history.*"
    )
