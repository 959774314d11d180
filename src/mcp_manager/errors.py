"""Exception hierarchy for mcp-manager.

All exceptions inherit from McpManagerError (single catch point).
The health-check core never raises these; they come from config file I/O.
"""

from __future__ import annotations


class McpManagerError(Exception):
    """Base exception for all mcp-manager errors."""


class ConfigReadError(McpManagerError):
    """Error reading the MCP client config file."""


class ConfigWriteError(McpManagerError):
    """Error writing the MCP client config file."""


class ServerNotFoundError(McpManagerError):
    """Server name not found in config file."""
