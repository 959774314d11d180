"""MCP server that reads the MCP client config and health-checks the servers in it."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from mcp_manager.health.checker import HealthChecker
from mcp_manager.models import HealthSettings
from mcp_manager.tools.config import get_config, list_servers, save_config
from mcp_manager.tools.health import check_health, ping_server


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared state across all tool invocations.

    The checker is stateless between calls; settings are read once at startup.
    """

    settings: HealthSettings
    health_checker: HealthChecker


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Build the health checker from env settings — the composition root."""
    settings = HealthSettings.from_env()
    yield AppContext(
        settings=settings,
        health_checker=HealthChecker.from_settings(settings),
    )


mcp = FastMCP(
    "mcp-manager",
    instructions=(
        "mcp-manager reads the user's MCP client config file (claude_desktop_config.json) "
        "and checks whether the servers listed in it are up.\n\n"
        "- **list_servers** — Show configured servers.\n"
        "- **ping_server** — Check one server: is its command installed, and is "
        "something listening on its port?\n"
        "- **check_health** — Check every configured server at once.\n"
        "- **get_config** / **save_config** — Read or replace the whole config file.\n\n"
        'A result of {"success": false, "error": "Command not available"} means the '
        'launch command is not installed. {"success": false} with no error means the '
        "command exists but nothing answered on the server's port."
    ),
    lifespan=app_lifespan,
)

# ─── Read-only tools ──────────────────────────────────────────
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(list_servers)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(ping_server)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(check_health)

# ─── Tools that write the config file ─────────────────────────
# get_config creates the file when it is missing.
mcp.tool(annotations=ToolAnnotations(destructiveHint=False))(get_config)
mcp.tool(annotations=ToolAnnotations(destructiveHint=True))(save_config)
