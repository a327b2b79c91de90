# =============================================================================
# core/guide.py  —  The Analytics Guide Prompt
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Holds the one prompt this server offers: a long-form guide telling the
#   calling agent HOW to use the nine tools together.  The tools return raw
#   metrics; the guide supplies the method (work top-down, which ratios to
#   compute, what red flags look like, and where in the code to look next).
#
# PROMPT STRUCTURE:
#   1. Tool table: what each tool is for and what data it carries
#   2. Analysis workflow: six phases, aggregate first, then narrow down
#   3. Decision trees: starting points for common complaints
#   4. Findings-to-code table: where to look in the codebase per finding
#
#   The text is static.  Unlike a system prompt it carries no runtime
#   context, so the same request always returns the same guide.
# =============================================================================

from core.errors import UnknownPromptError
from core.models import PromptDefinition

ANALYTICS_GUIDE = """You have access to Lcontext MCP tools that return user behavior data for the application you're working on. Use this guide to analyze that behavior, spot problems, and tie what you find back to code changes.

## Available Tools

| Tool | Purpose | Key Data |
|------|---------|----------|
| get_app_context | App-wide stats and trends | Sessions, visitors, page views, clicks, form submits, bounce rate, top pages/referrers/countries, device breakdown, top browsers, top OS, Web Vitals (LCP, FCP, FID, CLS) |
| list_pages | Discover tracked pages | Page paths, titles, first/last seen dates, view count, bounce/entry/exit counts |
| get_page_context | Per-page stats + interactive elements | View count, unique visitors, bounce/entry/exit counts, avg duration, scroll depth, Web Vitals, element interactions, page flow |
| get_element_context | Element interaction data | Interaction count, unique visitors, per-period breakdown |
| get_visitors | Visitor list with profiles | Session count, first/last visit, country, referrer, device type, browser, OS, city, region |
| get_visitor_detail | One visitor's history | Recent sessions with timestamps and event counts, device info, location |
| get_sessions | Session list | Duration, event count, start time, visitor ID, device type |
| get_session_detail | Full event timeline | Every event (page_view, click, form_submit, scroll_depth, web_vital) with timestamps and element details, plus visitor context |
| get_user_flows | Detected user journeys | Named page sequences, session/visitor counts, sentiment split, drop-off funnels |

## Analysis Workflow

Start with aggregate metrics and narrow down based on what you see.

### Phase 1: App Overview
Call get_app_context. From the period stats, work out:
- Traffic trend: are sessions rising, flat, or falling over recent periods?
- Bounce rate: bounceCount / totalSessions. Above 60% deserves attention.
- Click-through: totalClicks / totalPageViews. Are users engaging or only viewing?
- Form conversion: totalFormSubmits / totalSessions.
- Top exit pages: where users leave most. Start your investigation here.
- Top entry pages: where users land. These have to work flawlessly.
- Referrers: where traffic comes from, and whether quality differs by source.
- Devices, browsers, OS: is one platform underperforming?
- Web Vitals: site-wide performance problems show up in avgLcp, avgFcp, avgFid, avgCls.

### Phase 2: Map the App
Call list_pages and build a picture of the page structure:
- Group pages into flows (onboarding, checkout, settings, ...)
- Note which pages are active and which are stale
- Cross-reference with the top exit pages from Phase 1

### Phase 3: Page Deep-Dive
Call get_page_context(path) for each problem page. Look at:
- Bounce rate: bounceCount / entryCount
- Exit rate: exitCount / viewCount
- Scroll depth: below 30% means content under the fold goes unseen
- Avg duration: under 5s on a content-heavy page means nobody is reading
- Entry vs exit: more exits than entries means the page is losing users
- Web Vitals: LCP over 2.5s or CLS over 0.1 is a problem

For the elements section:
- Interaction rate per element: interactionCount / page viewCount
- Zero interactions on a high-traffic page usually means invisible or broken
- Forms that are seen but never submitted point to form friction

### Phase 4: Funnel Analysis
For multi-step flows (signup, checkout, intake):
1. Call get_page_context for each step, or get_user_flows for detected funnels
2. Line up view counts in order: Step 1 → Step 2 → Step 3
3. Drop-off per step: (step N views - step N+1 views) / step N views
4. The step with the largest drop-off is the first thing to fix

### Phase 5: Session Investigation
Call get_sessions, then get_session_detail(sessionId). In the event timeline, watch for:
- Repeated clicks on one element less than 500ms apart: rage clicking
- Gaps over 30s between events: confusion or waiting
- A page_view with nothing after it: content mismatch, the user bounced
- form_submit followed by a page_view of the same page: validation error or redirect loop
- scroll_depth reaching 100% with no clicks: the user is hunting for something that isn't there
- web_vital red flags: LCP > 2.5s, CLS > 0.1, FID > 100ms

### Phase 6: Visitor Patterns
Call get_visitors and get_visitor_detail(visitorId). Look for:
- Single-session visitors with high bounce: an acquisition quality problem
- Returning visitors who suddenly stop: something broke their experience
- Country or region clusters: localization or latency problems
- Negative sessions clustered on one browser/OS: a compatibility bug
- Mobile vs desktop engagement gaps

## Decision Trees

### "Something is wrong but I don't know what"
1. get_app_context → compare the latest period with the ones before it
2. Bounce rate up → top exit pages → get_page_context for each
3. Traffic down → top referrers: did a source dry up?
4. Clicks down while views hold → a UI change broke interactivity

### "This page isn't converting"
1. get_page_context(path) → entry/exit ratio and element interactions
2. Find the primary call to action: are its interactions proportional to views?
3. Low interactions → check scroll depth (is it even visible?)
4. Pick 3-5 sessions → get_session_detail → what did users do instead?
5. Read the page code: is the call to action prominent, and does its handler work?

### "Users are dropping off in a funnel"
1. get_user_flows or get_page_context per step → compare view counts
2. The biggest drop is the problem step
3. On that step: element interactions, scroll depth, duration
4. get_sessions(pagePath=...) → sessions that reached the step but not the next one
5. get_session_detail → what happened right before they left?

### "A feature isn't being used"
1. Find the page(s) with the feature → get_page_context
2. Find the element(s) → get_element_context
3. Views but zero element interactions → discoverability problem
4. Few page views → navigation or routing problem

### "Performance feels slow"
1. get_app_context → site-wide avgLcp, avgFcp, avgFid, avgCls
2. get_page_context for suspect pages → per-page Web Vitals
3. get_session_detail → individual web_vital events
4. LCP > 2.5s → large images, blocking scripts, slow API calls
5. CLS > 0.1 → injected content, images without dimensions, late fonts
6. FID > 100ms → heavy script execution on load

## Connecting Findings to Code

| Analytics Finding | Code Investigation |
|---|---|
| High exit rate on a page | Check the route handler for errors or redirects; review the component's UX flow |
| Element with 0 interactions | Find the component; check CSS visibility and whether the click handler is bound |
| Form with low submit rate | Check validation logic, error message rendering, required fields |
| Slow LCP | Large images, unoptimized bundles, blocking API calls in the component |
| High CLS | Dynamically inserted content, images without width/height, late-loading fonts |
| Rage clicks on an element | Is the handler async with no loading state? Does it fail silently? |
| Users revisiting the same page | Missing success feedback, unclear navigation, broken back button |
| Drop-off after form submit | Form action URL, redirect logic, success/error page rendering |
| Low scroll depth | Key content or call to action below the fold |
| Short duration on a content page | Content doesn't match expectations; check title, meta, and referrer landing |
| Mobile bounce far above desktop | Responsive layout, touch targets, viewport meta, mobile CSS |
| Negative sessions on one browser | Unsupported APIs or CSS features, missing polyfills |
"""

GUIDE_PROMPT = PromptDefinition(
    name="analytics-guide",
    title="Lcontext Analytics Guide",
    description=(
        "Comprehensive guide for analyzing user behavior data with Lcontext tools. "
        "Includes analysis workflows, decision trees, and how to connect analytics "
        "findings to code changes."
    ),
)

_PROMPTS = {GUIDE_PROMPT.name: ANALYTICS_GUIDE}


def list_prompts() -> tuple[PromptDefinition, ...]:
    return (GUIDE_PROMPT,)


def get_prompt(name: str) -> str:
    """Return the full text of a prompt.

    Raises:
        UnknownPromptError: if no prompt has that name.
    """
    try:
        return _PROMPTS[name]
    except KeyError:
        raise UnknownPromptError(name) from None
