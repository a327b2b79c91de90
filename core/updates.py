# =============================================================================
# core/updates.py  —  Release Version Check
# =============================================================================
#
#   GET https://api.github.com/repos/Lcontext/Lcontext/releases/latest
#       -> {tag_name: "v1.4.1", html_url: ...}
#
# Two callers:
#   --update        reports the latest version; failures are shown to the user
#   server startup  background check with a short timeout; failures are
#                   silent and never delay serving
#
# Versions compare numerically segment by segment ("1.10.0" > "1.9.9").
# Missing or non-numeric segments count as 0.
# =============================================================================

import asyncio
import logging
from typing import Optional

import httpx

from core.client import USER_AGENT
from core.errors import DecodeError, HttpError, TransportError

logger = logging.getLogger(__name__)

CURRENT_VERSION = "1.4.0"
GITHUB_REPO = "Lcontext/Lcontext"
RELEASES_URL = f"https://api.github.com/repos/{GITHUB_REPO}/releases/latest"
RELEASES_PAGE = f"https://github.com/{GITHUB_REPO}/releases/latest"
STARTUP_CHECK_TIMEOUT = 3.0


def _segments(version: str) -> list[int]:
    parts = []
    for raw in version.strip().split("."):
        try:
            parts.append(int(raw))
        except ValueError:
            parts.append(0)
    return parts


def is_newer_version(latest: str, current: str) -> bool:
    """True when `latest` is strictly greater than `current`."""
    a, b = _segments(latest), _segments(current)
    width = max(len(a), len(b))
    a += [0] * (width - len(a))
    b += [0] * (width - len(b))
    return a > b


async def fetch_latest_version(
    timeout: float = 10.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Latest release tag with any leading "v" removed.

    Raises:
        TransportError: the request did not complete.
        HttpError: GitHub answered with a non-success status.
        DecodeError: the body is not JSON or has no tag_name.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as http:
            response = await http.get(RELEASES_URL, headers={"User-Agent": USER_AGENT})
    except httpx.HTTPError as exc:
        raise TransportError(f"Could not reach GitHub: {exc}") from exc

    if not response.is_success:
        raise HttpError(response.status_code, response.text)

    try:
        tag = response.json()["tag_name"]
    except (ValueError, KeyError, TypeError) as exc:
        raise DecodeError(response.text) from exc
    return str(tag).removeprefix("v")


async def check_for_updates(
    current: str = CURRENT_VERSION,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[str]:
    """Startup check.  Returns the newer version, or None.  Never raises."""
    try:
        latest = await asyncio.wait_for(
            fetch_latest_version(timeout=STARTUP_CHECK_TIMEOUT, transport=transport),
            timeout=STARTUP_CHECK_TIMEOUT,
        )
    except Exception as exc:
        logger.debug("Update check skipped: %s", exc)
        return None

    if latest != current and is_newer_version(latest, current):
        logger.warning("[Lcontext] Update available: %s → %s", current, latest)
        logger.warning("[Lcontext] Download: %s", RELEASES_PAGE)
        return latest
    return None
