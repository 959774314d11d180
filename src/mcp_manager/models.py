"""Domain models for mcp-manager. All frozen dataclasses -- no mutation after creation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# ─── Config Models ────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """A single MCP server entry in a client config file."""

    command: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        result: dict[str, object] = {"command": self.command, "args": list(self.args)}
        if self.env:
            result["env"] = dict(self.env)
        return result


@dataclass(frozen=True, slots=True)
class InstalledServer:
    """An MCP server currently configured in a client config file."""

    name: str
    config: ServerConfig
    source_file: str


# ─── Health Check Models ─────────────────────────────────────


@dataclass(frozen=True, slots=True)
class HealthCheckResult:
    """Outcome of a single health check.

    ``error`` is only set when the cause of a failure is known. An
    unreachable port is reported as a bare ``success=False``.
    """

    success: bool
    error: str | None = None

    def to_dict(self) -> dict[str, object]:
        result: dict[str, object] = {"success": self.success}
        if self.error is not None:
            result["error"] = self.error
        return result


# ─── Settings ────────────────────────────────────────────────


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %s", name, raw, default)
        return default
    return value if value > 0 else default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %s", name, raw, default)
        return default
    return value if value > 0 else default


@dataclass(frozen=True, slots=True)
class HealthSettings:
    """Tunables for health checks, passed explicitly to the checker."""

    host: str = "localhost"
    probe_timeout: float = 1.0
    command_timeout: float = 5.0
    default_port: int = 8080
    max_concurrent_checks: int = 5

    @classmethod
    def from_env(cls) -> HealthSettings:
        """Build settings from ``MCP_MANAGER_*`` env vars, falling back to defaults."""
        defaults = cls()
        return cls(
            host=os.environ.get("MCP_MANAGER_HOST", "") or defaults.host,
            probe_timeout=_env_float("MCP_MANAGER_PROBE_TIMEOUT", defaults.probe_timeout),
            command_timeout=_env_float("MCP_MANAGER_COMMAND_TIMEOUT", defaults.command_timeout),
            default_port=_env_int("MCP_MANAGER_DEFAULT_PORT", defaults.default_port),
            max_concurrent_checks=_env_int(
                "MCP_MANAGER_MAX_CONCURRENT", defaults.max_concurrent_checks
            ),
        )
