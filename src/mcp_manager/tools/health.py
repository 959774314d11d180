"""ping_server / check_health tools -- is each configured server up?"""

from __future__ import annotations

from mcp.server.fastmcp import Context

from mcp_manager.config.detection import resolve_config_path
from mcp_manager.config.reader import aread_config, find_server, parse_servers
from mcp_manager.errors import McpManagerError
from mcp_manager.tools._helpers import get_context


async def ping_server(
    ctx: Context,
    server_name: str,
    config_path: str = "",
) -> dict[str, object]:
    """Check whether one configured MCP server is up.

    First checks that the server's command exists on this machine, then
    tries a TCP connection to the port the server should listen on
    (MCP_PORT env var, then --port in args, else 8080).

    Args:
        server_name: Name of the server as it appears in the config file.
        config_path: Path to the config file. Defaults to $MCP_MANAGER_CONFIG
            or the Claude Desktop config location.

    Returns:
        {"success": bool} plus "error" when the cause of a failure is known
        (e.g. "Command not available").
    """
    try:
        app = get_context(ctx)
        path = resolve_config_path(config_path)
        raw = await aread_config(path)
        server = find_server(raw, server_name, source_file=str(path))

        result = await app.health_checker.ping_server(server.name, server.config)
        return {"server_name": server.name, **result.to_dict()}
    except McpManagerError as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in ping_server: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}


async def check_health(ctx: Context, config_path: str = "") -> dict[str, object]:
    """Check every configured MCP server at once.

    Runs the same check as ping_server for all servers concurrently.

    Args:
        config_path: Path to the config file. Defaults to $MCP_MANAGER_CONFIG
            or the Claude Desktop config location.

    Returns:
        Report with: config_file, total/healthy/unhealthy counts, and a
        per-server result keyed by server name.
    """
    try:
        app = get_context(ctx)
        path = resolve_config_path(config_path)
        raw = await aread_config(path)
        servers = parse_servers(raw, source_file=str(path))

        if not servers:
            return {
                "config_file": str(path),
                "total": 0,
                "healthy": 0,
                "unhealthy": 0,
                "servers": {},
                "message": "No MCP servers configured.",
            }

        results = await app.health_checker.ping_servers(servers)
        healthy = sum(1 for r in results.values() if r.success)

        return {
            "config_file": str(path),
            "total": len(results),
            "healthy": healthy,
            "unhealthy": len(results) - healthy,
            "servers": {name: r.to_dict() for name, r in results.items()},
        }
    except McpManagerError as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in check_health: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}
