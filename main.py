# =============================================================================
# main.py  —  Entry Point for the Lcontext MCP Server
# =============================================================================
#
# HOW TO RUN:
#   lcontext-mcp              (after pip install)
#   python main.py            (from a checkout)
#
#   The server speaks MCP over stdio, so it is normally launched by the
#   coding agent, not by hand:
#
#     {"mcpServers": {"lcontext": {"command": "lcontext-mcp",
#                                  "env": {"LCONTEXT_API_KEY": "..."}}}}
#
# WHAT HAPPENS:
#   1. CLI flags (--version, --help, --update) are handled and exit early
#   2. Settings are loaded from the environment (and a local .env file)
#   3. Logging is configured (stderr only)
#   4. The FastMCP server is built (tools/mcp_server.py)
#   5. A background task checks GitHub for a newer release
#   6. The server runs on stdio until the client disconnects
# =============================================================================

import asyncio
import logging
import sys
from typing import Optional, Sequence

from core.config import Settings, load_settings
from core.errors import ApiError, ConfigError
from core.updates import (
    CURRENT_VERSION,
    GITHUB_REPO,
    check_for_updates,
    fetch_latest_version,
    is_newer_version,
)
from tools.mcp_server import configure_logging, create_server

HELP_TEXT = f"""lcontext v{CURRENT_VERSION}

MCP server for Lcontext page analytics.
Provides page and element context for AI coding agents.

Usage:
  lcontext-mcp [options]

Options:
  -v, --version    Show version number
  -h, --help       Show this help message
  --update         Check for a newer release

Environment Variables:
  LCONTEXT_API_KEY    Your Lcontext API key (required)
  LCONTEXT_API_URL    API base URL (default: https://lcontext.com)
  LCONTEXT_TIMEOUT    Backend request timeout in seconds (default: 30)
  LCONTEXT_LOG_LEVEL  Log level for stderr output (default: INFO)

Documentation: https://github.com/{GITHUB_REPO}
"""


# =============================================================================
# --update
# =============================================================================
async def run_update() -> int:
    print(f"Current version: {CURRENT_VERSION}")
    print("Checking for updates...")
    try:
        latest = await fetch_latest_version()
    except ApiError as exc:
        print(f"Update failed: {exc}", file=sys.stderr)
        return 1

    print(f"Latest version: {latest}")
    if not is_newer_version(latest, CURRENT_VERSION):
        print("You are already on the latest version.")
        return 0

    print(f"Version {latest} is available. Upgrade with:")
    print("  pip install --upgrade lcontext-mcp")
    return 0


# =============================================================================
# Serve
# =============================================================================
async def serve(settings: Settings) -> None:
    mcp = create_server(settings)

    # Fire-and-forget; the task swallows its own failures.
    update_check = asyncio.create_task(check_for_updates())

    logging.info("Lcontext MCP server running on stdio")
    logging.info(f"Connected to: {settings.base_url}")
    try:
        await mcp.run_async(transport="stdio")
    finally:
        update_check.cancel()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    if "--version" in args or "-v" in args:
        print(CURRENT_VERSION)
        return 0
    if "--help" in args or "-h" in args:
        print(HELP_TEXT)
        return 0
    if "--update" in args:
        return asyncio.run(run_update())

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        print("Get your API key from: https://lcontext.com/settings", file=sys.stderr)
        return 1

    configure_logging(settings.log_level)
    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        pass
    return 0


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    sys.exit(main())
