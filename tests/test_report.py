"""
Tests for the shared report builder and formatting helpers (core/report.py).
"""

from core.report import (
    Report,
    capped_lines,
    fmt_count,
    fmt_date,
    fmt_time,
    mean,
    more,
    period_label,
    period_summary_label,
    pick,
    rank_by_count,
    rate,
    retention_notice,
    round_half_up,
    text,
    web_vitals_lines,
)


# ============================================================================
# Derived metrics
# ============================================================================

def test_rate_with_zero_denominator_is_zero():
    assert rate(5, 0) == "0"
    assert rate(5, None) == "0"


def test_rate_one_decimal():
    assert rate(1, 3) == "33.3"
    assert rate(40, 160) == "25.0"


def test_rate_whole_percent():
    assert rate(50, 200, digits=0) == "25"


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2
    assert round_half_up(37.5) == 38


def test_mean_of_present_values():
    assert mean([30, 45]) == 37.5
    assert mean([]) == 0
    assert mean([10, None]) == 5


# ============================================================================
# Truncation
# ============================================================================

def test_more_is_none_when_nothing_cut():
    assert more(0, "pages") is None


def test_capped_lines_appends_exact_marker():
    lines = capped_lines(list(range(7)), 5, str, "entries")
    assert lines == ["0", "1", "2", "3", "4", "*...and 2 more entries*"]


def test_capped_lines_indent():
    lines = capped_lines(list(range(9)), 7, str, "periods", indent="  - ")
    assert lines[-1] == "  - *...and 2 more periods*"


def test_rank_by_count_is_stable_for_ties():
    ranked = rank_by_count({"/a": 3, "/b": 5, "/c": 3})
    assert ranked == [("/b", 5), ("/a", 3), ("/c", 3)]


# ============================================================================
# Rendering
# ============================================================================

def test_text_fallbacks():
    assert text(None) == "N/A"
    assert text("", "?") == "?"
    assert text(3.0) == "3"
    assert text(2.5) == "2.5"


def test_fmt_count_thousands():
    assert fmt_count(12345) == "12,345"
    assert fmt_count(None) == "0"


def test_dates_render_in_utc():
    assert fmt_date("2025-01-06T23:30:00-02:00") == "2025-01-07"
    assert fmt_time("2025-01-06T10:15:30Z") == "10:15:30"
    assert fmt_date(0) == "1970-01-01"
    assert fmt_date("not a date") == "N/A"


def test_period_labels():
    assert period_label({"periodStart": "2025-01-06", "periodType": "week"}) == "Week of 2025-01-06"
    assert period_label({"periodStart": "2025-01-06", "periodType": "day"}) == "2025-01-06"
    assert period_summary_label([{"periodType": "week"}] * 4) == "4 weeks"


def test_web_vitals_hidden_without_data():
    assert web_vitals_lines({}) == []


def test_web_vitals_cls_three_decimals():
    lines = web_vitals_lines({"avgLcp": 1800, "avgCls": 0})
    assert "- **LCP** (Largest Contentful Paint): 1800ms" in lines
    assert "- **CLS** (Cumulative Layout Shift): 0.000" in lines


def test_pick_never_raises():
    assert pick({"a": {"b": 1}}, "a", "b") == 1
    assert pick({"a": None}, "a", default=[]) == []
    assert pick("oops", "a") is None


# ============================================================================
# Report builder
# ============================================================================

def test_report_skips_none_and_empty_sections():
    report = Report()
    report.add("## Title", None, "body")
    report.add(None)
    report.extend([])
    assert report.render() == "## Title\nbody"


def test_report_places_retention_notice_last():
    report = Report({"_dataRetention": {"days": 30}})
    report.add("## Title")
    report.add("more")
    rendered = report.render()
    assert rendered.startswith("## Title\n\nmore\n\n---\n")
    assert rendered.endswith("*Note: Data limited to last 30 days (free plan). Upgrade for full history.*")


def test_retention_notice_absent_without_block():
    assert retention_notice({}) is None
    assert retention_notice(None) is None


def test_non_finite_numbers_count_as_zero():
    assert round_half_up(float("nan")) == 0
    assert round_half_up(float("inf")) == 0
    assert rate(float("inf"), 10) == "0.0"
    assert mean([float("nan"), 10]) == 5
