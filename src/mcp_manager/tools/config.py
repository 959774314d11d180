"""get_config / save_config / list_servers tools -- the config file itself."""

from __future__ import annotations

import asyncio

from mcp.server.fastmcp import Context

from mcp_manager.config.detection import resolve_config_path
from mcp_manager.config.reader import aread_config, load_or_create_config, parse_servers
from mcp_manager.config.writer import save_config as _save_config_file
from mcp_manager.errors import McpManagerError


async def get_config(ctx: Context, config_path: str = "") -> dict[str, object]:
    """Return the MCP client config file, creating an empty one if missing.

    Args:
        config_path: Path to the config file. Defaults to $MCP_MANAGER_CONFIG
            or the Claude Desktop config location.

    Returns:
        The config file path and its parsed contents.
    """
    try:
        path = resolve_config_path(config_path)
        raw = await asyncio.to_thread(load_or_create_config, path)
        return {"config_file": str(path), "config": raw}
    except McpManagerError as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in get_config: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}


async def save_config(
    ctx: Context,
    config_json: str,
    config_path: str = "",
) -> dict[str, object]:
    """Replace the MCP client config file with a new JSON document.

    The document must be a JSON object; "mcpServers", when present, must be
    an object keyed by server name. The write is atomic.

    Args:
        config_json: The full config file contents as a JSON string.
        config_path: Path to the config file. Defaults to $MCP_MANAGER_CONFIG
            or the Claude Desktop config location.
    """
    try:
        path = resolve_config_path(config_path)
        await asyncio.to_thread(_save_config_file, path, config_json)
        return {"success": True, "config_file": str(path)}
    except McpManagerError as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in save_config: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}


async def list_servers(ctx: Context, config_path: str = "") -> list[dict[str, object]]:
    """List the MCP servers defined in the config file.

    Returns:
        One entry per server with: name, command, args, env, config_file.
    """
    try:
        path = resolve_config_path(config_path)
        raw = await aread_config(path)
        return [
            {"name": s.name, **s.config.to_dict(), "config_file": s.source_file}
            for s in parse_servers(raw, source_file=str(path))
        ]
    except McpManagerError as exc:
        return [{"success": False, "error": str(exc)}]
    except Exception as exc:
        await ctx.error(f"Unexpected error in list_servers: {exc}")
        return [{"success": False, "error": f"Internal error: {type(exc).__name__}"}]
