"""Health check orchestration: command lookup first, then a TCP probe."""

from __future__ import annotations

import asyncio
import logging

from mcp_manager.health.availability import DefaultCommandResolver
from mcp_manager.health.base import CommandResolverPort, PortProberPort
from mcp_manager.health.prober import DefaultPortProber
from mcp_manager.models import HealthCheckResult, HealthSettings, InstalledServer, ServerConfig

logger = logging.getLogger(__name__)

COMMAND_NOT_AVAILABLE = "Command not available"


class HealthChecker:
    """Classifies each server as command-missing, unreachable, or reachable.

    Holds no per-check state, so one instance can serve any number of
    concurrent checks. Checks of the same server are not deduplicated.
    """

    def __init__(
        self,
        resolver: CommandResolverPort,
        prober: PortProberPort,
        settings: HealthSettings | None = None,
    ) -> None:
        self._resolver = resolver
        self._prober = prober
        self._settings = settings or HealthSettings()

    @classmethod
    def from_settings(cls, settings: HealthSettings) -> HealthChecker:
        """Wire the default resolver and prober from *settings*."""
        return cls(
            resolver=DefaultCommandResolver(timeout=settings.command_timeout),
            prober=DefaultPortProber(
                host=settings.host,
                timeout=settings.probe_timeout,
                default_port=settings.default_port,
            ),
            settings=settings,
        )

    async def ping_server(self, server_id: str, config: ServerConfig) -> HealthCheckResult:
        """Check one server. Never raises -- every failure comes back as a result."""
        try:
            if not await self._resolver.is_available(config.command):
                logger.warning("Command not available: %s", config.command)
                return HealthCheckResult(success=False, error=COMMAND_NOT_AVAILABLE)

            reachable = await self._prober.check(config)
            logger.debug("Server '%s' reachable: %s", server_id, reachable)
            return HealthCheckResult(success=reachable)
        except Exception as exc:
            logger.exception("Error pinging MCP server %s", server_id)
            return HealthCheckResult(success=False, error=str(exc) or type(exc).__name__)

    async def ping_servers(
        self,
        servers: list[InstalledServer],
    ) -> dict[str, HealthCheckResult]:
        """Check all servers concurrently, keyed by server name.

        Limits concurrency to ``max_concurrent_checks`` (at least 1) so a large config
        does not spawn a lookup process per server all at once.
        """
        sem = asyncio.Semaphore(max(1, self._settings.max_concurrent_checks))

        async def _limited_ping(server: InstalledServer) -> HealthCheckResult:
            async with sem:
                return await self.ping_server(server.name, server.config)

        results = await asyncio.gather(*(_limited_ping(s) for s in servers))
        return {server.name: result for server, result in zip(servers, results, strict=True)}
