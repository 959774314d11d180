"""Read the MCP client config file with schema tolerance.

The file follows: { "mcpServers": { "<name>": { "command", "args", "env" } } }
Only "mcpServers" is interpreted; everything else is passed through untouched.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from mcp_manager.config.writer import save_config
from mcp_manager.errors import ConfigReadError, ServerNotFoundError
from mcp_manager.models import InstalledServer, ServerConfig

logger = logging.getLogger(__name__)


def _empty_config() -> dict[str, object]:
    return {"mcpServers": {}}


def read_config(config_path: Path | str) -> dict[str, object]:
    """Read the full config file.

    Returns the raw dict so the writer can round-trip unknown keys.
    Returns an empty {"mcpServers": {}} if the file doesn't exist or is blank.
    """
    path = Path(config_path)
    if not path.exists():
        return _empty_config()

    try:
        text = path.read_text(encoding="utf-8")
        if not text.strip():
            return _empty_config()
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigReadError(
            f"Invalid JSON in {path}: {exc}. Fix the JSON syntax or delete the file to start fresh."
        ) from exc
    except PermissionError as exc:
        raise ConfigReadError(f"Permission denied reading {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigReadError(f"Failed to read {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigReadError(f"Expected a JSON object in {path}, got {type(data).__name__}.")
    if "mcpServers" not in data:
        data["mcpServers"] = {}
    return data


async def aread_config(config_path: Path | str) -> dict[str, object]:
    """Async version of read_config. Use from async code to avoid blocking the event loop."""
    return await asyncio.to_thread(read_config, config_path)


def load_or_create_config(config_path: Path | str) -> dict[str, object]:
    """Read the config, writing a default empty one first if the file is missing."""
    path = Path(config_path)
    if not path.exists():
        logger.info("No config at %s; creating an empty one", path)
        save_config(path, _empty_config())
    return read_config(path)


def parse_servers(
    raw_config: dict[str, object],
    source_file: str = "",
) -> list[InstalledServer]:
    """Extract server entries from a raw config dict."""
    servers_dict = raw_config.get("mcpServers", {})
    if not isinstance(servers_dict, dict):
        return []

    result: list[InstalledServer] = []
    for name, entry in servers_dict.items():
        if not isinstance(entry, dict):
            continue

        args = entry.get("args") or []
        env = entry.get("env") or {}
        config = ServerConfig(
            command=str(entry.get("command", "")),
            args=[str(a) for a in args] if isinstance(args, list) else [],
            env={str(k): str(v) for k, v in env.items()} if isinstance(env, dict) else {},
        )
        result.append(InstalledServer(name=name, config=config, source_file=source_file))

    return result


def find_server(
    raw_config: dict[str, object],
    server_name: str,
    source_file: str = "",
) -> InstalledServer:
    """Return the named server or raise ServerNotFoundError."""
    servers = parse_servers(raw_config, source_file=source_file)
    for server in servers:
        if server.name == server_name:
            return server

    available = ", ".join(s.name for s in servers) or "none"
    raise ServerNotFoundError(
        f"Server '{server_name}' not found in {source_file or 'config'}. "
        f"Available servers: {available}."
    )
