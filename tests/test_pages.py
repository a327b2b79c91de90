"""
Tests for the page reports (core/pages.py): get_page_context and list_pages.
"""

from core.pages import format_page_context, format_page_list

NOTICE = "*Note: Data limited to last 30 days (free plan). Upgrade for full history.*"


# ============================================================================
# get_page_context
# ============================================================================

def test_page_context_header_and_summary(page_payload):
    out = format_page_context(page_payload)
    assert out.startswith("## Page Analytics: /pricing\n**Title:** Pricing")
    assert "**First Seen:** 2025-01-01" in out
    assert "**Summary (2 days)**" in out
    assert "- Total Views: 160" in out
    assert "- Total Unique Visitors: 130" in out
    assert "- Total Bounces: 30" in out
    assert "- Entry Rate: 37.5%" in out
    assert "- Exit Rate: 25.0%" in out


def test_page_context_breakdown_rows(page_payload):
    out = format_page_context(page_payload)
    assert "**Recent Daily Breakdown:**" in out
    assert "| 2025-01-10 | Views: 100 | Visitors: 80 | Avg Duration: 42s | Scroll: 65% |" in out


def test_page_context_web_vitals_from_latest_period(page_payload):
    out = format_page_context(page_payload)
    assert "### Performance (Web Vitals)" in out
    assert "- **LCP** (Largest Contentful Paint): 1800ms" in out
    assert "- **CLS** (Cumulative Layout Shift): 0.050" in out


def test_page_flow_aggregates_across_periods(page_payload):
    out = format_page_context(page_payload)
    came_from = out.index("**Where users came from:**")
    assert out.index("- /features (12 navigations)") > came_from
    assert out.index("- /features (12 navigations)") < out.index("- / (10 navigations)")
    assert "- /signup (12 navigations)" in out


def test_page_flow_truncation_marker(page_payload):
    page_payload["stats"][0]["topPreviousPages"] = [
        {"path": f"/p{i}", "count": 10 - i} for i in range(7)
    ]
    page_payload["stats"][1]["topPreviousPages"] = []
    out = format_page_context(page_payload)
    assert "*...and 2 more pages*" in out
    assert "- /p5 " not in out


def test_page_context_ai_insights(page_payload):
    out = format_page_context(page_payload)
    assert "### AI Insights" in out
    assert "**2025-01-10** (updated: 2025-01-10)" in out
    assert "Visitors compare plans before signing up." in out


def test_elements_sorted_by_total_interactions(page_payload):
    out = format_page_context(page_payload)
    assert "### Interactive Elements (2 tracked)" in out
    assert out.index("**LINK: Compare plans** (ID: 8)") < out.index("**CTA: Start trial** (ID: 7)")
    assert "- Links to: /compare" in out
    assert '- Tag: `<button>` id="trial-btn"' in out
    assert "  - 2025-01-10: 9 interactions, 7 visitors" in out


def test_elements_capped_at_twenty(page_payload):
    page_payload["elements"] = [
        {"id": i, "label": f"el{i}", "stats": [{"interactionCount": i}]} for i in range(25)
    ]
    out = format_page_context(page_payload)
    assert "### Interactive Elements (25 tracked)" in out
    assert "*...and 5 more elements*" in out
    assert "**OTHER: el24** (ID: 24)" in out
    assert "**OTHER: el0** (ID: 0)" not in out


def test_page_without_stats_or_elements():
    out = format_page_context({"page": {"path": "/new"}})
    assert "### Page Statistics\nNo statistics available for the selected time range." in out
    assert "No interactive elements tracked on this page." in out
    assert "AI Insights" not in out


def test_zero_views_give_zero_rates():
    out = format_page_context({"page": {"path": "/"}, "stats": [{"viewCount": 0, "entryCount": 0}]})
    assert "- Entry Rate: 0%" in out
    assert "- Exit Rate: 0%" in out


def test_page_context_is_deterministic(page_payload):
    assert format_page_context(page_payload) == format_page_context(page_payload)


def test_page_context_notice_is_last(page_payload):
    assert format_page_context(page_payload).endswith(NOTICE)


# ============================================================================
# list_pages
# ============================================================================

def test_page_list_lines():
    out = format_page_list({
        "pages": [
            {
                "path": "/",
                "title": "Home",
                "firstSeenAt": "2025-01-01",
                "lastSeenAt": "2025-01-10",
                "viewCount": 200,
                "uniqueVisitors": 150,
                "bounceCount": 50,
                "avgDuration": 30,
                "avgScrollDepth": 55,
            },
            {"path": "/old", "firstSeenAt": "2024-06-01", "lastSeenAt": "2024-07-01"},
        ],
        "total": 12,
    })
    assert out.startswith("## Tracked Pages\n\nFound 2 pages (showing first 2 of 12):")
    assert (
        "- **/** - Home (2025-01-01 to 2025-01-10 | Views: 200, Visitors: 150, "
        "Bounce: 25%, Avg Duration: 30s, Scroll: 55%)"
    ) in out
    assert "- **/old** (2024-06-01 to 2024-07-01 | No recent traffic data)" in out


def test_page_list_zero_views_bounce_unknown():
    out = format_page_list({"pages": [{"path": "/x", "viewCount": 0, "bounceCount": 0}]})
    assert "Bounce: ?%" in out


def test_empty_page_list_keeps_notice():
    out = format_page_list({"pages": [], "_dataRetention": {"days": 30}})
    assert out.startswith("No pages found. Make sure tracking is set up and data has been collected.")
    assert out.endswith(NOTICE)


def test_period_rows_capped_at_seven():
    periods = [
        {"periodStart": f"2025-01-{day:02d}", "periodType": "day", "viewCount": day, "interactionCount": day}
        for day in range(10, 0, -1)
    ]
    out = format_page_context({
        "page": {"path": "/pricing"},
        "stats": periods,
        "elements": [{"id": 1, "label": "Buy", "stats": periods}],
    })
    lines = out.splitlines()
    breakdown = [line for line in lines if line.startswith("| 2025-01-")]
    element_rows = [line for line in lines if line.startswith("  - 2025-01-")]
    assert len(breakdown) == 7
    assert breakdown[-1].startswith("| 2025-01-04 |")
    assert len(element_rows) == 7
    assert "*...and 3 more periods*" in lines
    assert "  - *...and 3 more periods*" in lines
