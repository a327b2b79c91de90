# =============================================================================
# tools/__init__.py
# =============================================================================
# This package holds the MCP protocol layer.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between MCP and core/.  It:
#     1. Registers each core/catalog.py entry as a FastMCP tool
#     2. Routes every call to core/dispatcher.py
#     3. Registers the analytics guide (core/guide.py) as a prompt
#     4. Sets up stderr logging
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT validate arguments or build endpoints (core/dispatcher.py)
#   - They do NOT render reports (core/<report>.py)
#   - They do NOT read the environment (core/config.py, via main.py)
# =============================================================================
