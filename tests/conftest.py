"""
Shared fixtures for the Lcontext MCP test suite.

- settings: a Settings value pointing at a fake backend origin
- backend: factory for an httpx.MockTransport that records every request
- page_payload / session_payload: realistic backend responses
"""

import httpx
import pytest

from core.config import Settings

BASE_URL = "https://api.test"
RETENTION = {"days": 30}


@pytest.fixture
def settings():
    return Settings(api_key="test-key", base_url=BASE_URL, timeout_seconds=5.0)


@pytest.fixture
def backend():
    """backend(payload, status=200, body=None) -> (transport, recorded requests)."""

    def make(payload=None, status=200, body=None):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if body is not None:
                return httpx.Response(status, text=body)
            return httpx.Response(status, json={} if payload is None else payload)

        return httpx.MockTransport(handler), seen

    return make


# ============================================================================
# Sample payloads
# ============================================================================

@pytest.fixture
def page_payload():
    return {
        "page": {
            "path": "/pricing",
            "title": "Pricing",
            "firstSeenAt": "2025-01-01T00:00:00Z",
            "lastSeenAt": "2025-01-10T12:00:00Z",
        },
        "stats": [
            {
                "periodStart": "2025-01-10T00:00:00Z",
                "periodType": "day",
                "viewCount": 100,
                "uniqueVisitors": 80,
                "bounceCount": 20,
                "entryCount": 40,
                "exitCount": 30,
                "avgDuration": 42,
                "avgScrollDepth": 65,
                "avgLcp": 1800,
                "avgCls": 0.05,
                "topPreviousPages": [
                    {"path": "/", "count": 10},
                    {"path": "/features", "count": 4},
                ],
                "topNextPages": [{"path": "/signup", "count": 12}],
                "aiSummary": "Visitors compare plans before signing up.",
                "aiSummaryUpdatedAt": "2025-01-10T06:00:00Z",
            },
            {
                "periodStart": "2025-01-09T00:00:00Z",
                "periodType": "day",
                "viewCount": 60,
                "uniqueVisitors": 50,
                "bounceCount": 10,
                "entryCount": 20,
                "exitCount": 10,
                "topPreviousPages": [{"path": "/features", "count": 8}],
            },
        ],
        "elements": [
            {
                "id": 7,
                "label": "Start trial",
                "category": "cta",
                "tagName": "button",
                "elementId": "trial-btn",
                "stats": [
                    {
                        "periodStart": "2025-01-10T00:00:00Z",
                        "interactionCount": 9,
                        "uniqueVisitors": 7,
                    }
                ],
            },
            {
                "id": 8,
                "label": "Compare plans",
                "category": "link",
                "tagName": "a",
                "destinationUrl": "/compare",
                "stats": [
                    {
                        "periodStart": "2025-01-10T00:00:00Z",
                        "interactionCount": 25,
                        "uniqueVisitors": 20,
                    }
                ],
            },
        ],
        "_dataRetention": RETENTION,
    }


@pytest.fixture
def session_payload():
    return {
        "session": {
            "id": 42,
            "startTime": "2025-01-10T10:15:00Z",
            "duration": 95,
            "eventsCount": 4,
            "sentiment": "negative",
            "deviceType": "mobile",
            "city": "Lisbon",
            "country": "PT",
            "region": "Lisbon",
            "title": "Checkout abandoned",
            "description": "The visitor tried to pay twice and left.",
            "events": [
                {
                    "type": "click",
                    "timestamp": "2025-01-10T10:15:30Z",
                    "data": {
                        "label": "Buy",
                        "tagName": "BUTTON",
                        "id": "buy-btn",
                        "sourcePath": "/checkout",
                    },
                },
                {
                    "type": "web_vital",
                    "timestamp": "2025-01-10T10:15:31Z",
                    "data": {
                        "metric": "LCP",
                        "value": 2400,
                        "sourceUrl": "https://shop.test/checkout?step=2",
                    },
                },
                {
                    "type": "web_vital",
                    "timestamp": "2025-01-10T10:15:32Z",
                    "data": {"metric": "CLS", "value": 0.12},
                },
                {
                    "type": "custom",
                    "timestamp": "2025-01-10T10:15:40Z",
                    "data": {"b": 1, "a": "x"},
                },
            ],
        },
        "visitor": {
            "visitorId": "v-123",
            "browser": "Safari",
            "os": "iOS",
            "profileTitle": "Price-sensitive shopper",
        },
        "_dataRetention": RETENTION,
    }
