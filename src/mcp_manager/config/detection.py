"""Locate the MCP client config file that lists the managed servers."""

from __future__ import annotations

import os
import sys
from pathlib import Path

CONFIG_ENV_VAR = "MCP_MANAGER_CONFIG"
_CONFIG_FILENAME = "claude_desktop_config.json"


def _claude_desktop_config() -> Path:
    home = Path.home()
    match sys.platform:
        case "darwin":
            return home / "Library" / "Application Support" / "Claude" / _CONFIG_FILENAME
        case "win32":
            appdata = os.environ.get("APPDATA", str(home / "AppData" / "Roaming"))
            return Path(appdata) / "Claude" / _CONFIG_FILENAME
    xdg = os.environ.get("XDG_CONFIG_HOME", str(home / ".config"))
    return Path(xdg) / "Claude" / _CONFIG_FILENAME


def default_config_path() -> Path:
    """Return the config path: ``$MCP_MANAGER_CONFIG`` or Claude Desktop's file."""
    override = os.environ.get(CONFIG_ENV_VAR, "")
    if override:
        return Path(override).expanduser()
    return _claude_desktop_config()


def resolve_config_path(config_path: Path | str = "") -> Path:
    """Use *config_path* when given, otherwise the default location."""
    if config_path:
        return Path(config_path).expanduser()
    return default_config_path()
