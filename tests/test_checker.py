"""Tests for health check orchestration (health/checker.py)."""

from __future__ import annotations

import asyncio
import shutil
import sys

import pytest

from fakes import FakeProber, FakeResolver
from mcp_manager.health.availability import DefaultCommandResolver
from mcp_manager.health.checker import COMMAND_NOT_AVAILABLE, HealthChecker
from mcp_manager.health.prober import DefaultPortProber
from mcp_manager.models import HealthCheckResult, HealthSettings, InstalledServer, ServerConfig

# --- Helpers ---------------------------------------------------------------


def _config(command: str = "npx", args: list[str] | None = None) -> ServerConfig:
    return ServerConfig(command=command, args=args or ["-y", "some-server"])


def _installed(name: str, command: str = "npx") -> InstalledServer:
    return InstalledServer(name=name, config=_config(command), source_file="/tmp/config.json")


class _CountingProber:
    """Tracks how many probes are in flight at once."""

    def __init__(self) -> None:
        self.in_flight = 0
        self.max_in_flight = 0

    async def check(self, config: ServerConfig) -> bool:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.01)
        self.in_flight -= 1
        return True


class _ExplodingResolver:
    async def is_available(self, command: str) -> bool:
        raise RuntimeError("resolver blew up")


class _SilentlyExplodingProber:
    async def check(self, config: ServerConfig) -> bool:
        raise KeyError


# === ping_server =============================================================


class TestPingServer:
    async def test_command_not_available(self):
        prober = FakeProber()
        checker = HealthChecker(FakeResolver(available=False), prober)

        result = await checker.ping_server("srv", _config("ghost-cmd"))

        assert result == HealthCheckResult(success=False, error=COMMAND_NOT_AVAILABLE)
        assert result.to_dict() == {"success": False, "error": "Command not available"}
        assert prober.calls == []

    async def test_reachable(self):
        checker = HealthChecker(FakeResolver(), FakeProber(reachable=True))

        result = await checker.ping_server("srv", _config())

        assert result == HealthCheckResult(success=True)
        assert result.to_dict() == {"success": True}

    async def test_unreachable_has_no_error(self):
        checker = HealthChecker(FakeResolver(), FakeProber(reachable=False))

        result = await checker.ping_server("srv", _config())

        assert result.success is False
        assert result.error is None
        assert result.to_dict() == {"success": False}

    async def test_resolver_checks_the_server_command(self):
        resolver = FakeResolver()
        checker = HealthChecker(resolver, FakeProber())

        await checker.ping_server("srv", _config("uvx"))

        assert resolver.calls == ["uvx"]

    async def test_prober_receives_the_server_config(self):
        prober = FakeProber()
        checker = HealthChecker(FakeResolver(), prober)
        config = _config(args=["--port", "3000"])

        await checker.ping_server("srv", config)

        assert prober.calls == [config]

    async def test_unexpected_fault_becomes_error_result(self):
        prober = FakeProber()
        checker = HealthChecker(_ExplodingResolver(), prober)

        result = await checker.ping_server("srv", _config())

        assert result == HealthCheckResult(success=False, error="resolver blew up")
        assert prober.calls == []

    async def test_fault_without_message_uses_type_name(self):
        checker = HealthChecker(FakeResolver(), _SilentlyExplodingProber())

        result = await checker.ping_server("srv", _config())

        assert result == HealthCheckResult(success=False, error="KeyError")

    async def test_malformed_definition_does_not_raise(self):
        checker = HealthChecker(FakeResolver(), FakeProber())

        result = await checker.ping_server("srv", None)  # type: ignore[arg-type]

        assert result.success is False
        assert result.error

    async def test_concurrent_pings_do_not_interfere(self):
        resolver = FakeResolver(available={"node", "python"})
        prober = FakeProber(reachable={"node"}, delay=0.02)
        checker = HealthChecker(resolver, prober)

        up, down, missing = await asyncio.gather(
            checker.ping_server("up", _config("node")),
            checker.ping_server("down", _config("python")),
            checker.ping_server("missing", _config("ghost")),
        )

        assert up == HealthCheckResult(success=True)
        assert down == HealthCheckResult(success=False)
        assert missing == HealthCheckResult(success=False, error=COMMAND_NOT_AVAILABLE)


# === ping_servers ============================================================


class TestPingServers:
    async def test_results_keyed_by_name(self):
        checker = HealthChecker(FakeResolver(available={"node"}), FakeProber(reachable=True))
        servers = [_installed("a", "node"), _installed("b", "ghost")]

        results = await checker.ping_servers(servers)

        assert results == {
            "a": HealthCheckResult(success=True),
            "b": HealthCheckResult(success=False, error=COMMAND_NOT_AVAILABLE),
        }

    async def test_empty_list(self):
        checker = HealthChecker(FakeResolver(), FakeProber())
        assert await checker.ping_servers([]) == {}

    async def test_concurrency_is_bounded(self):
        prober = _CountingProber()
        settings = HealthSettings(max_concurrent_checks=2)
        checker = HealthChecker(FakeResolver(), prober, settings)

        await checker.ping_servers([_installed(f"s{i}") for i in range(6)])

        assert prober.max_in_flight == 2

    @pytest.mark.parametrize("limit", [0, -3])
    async def test_non_positive_limit_still_runs_serially(self, limit: int):
        prober = _CountingProber()
        settings = HealthSettings(max_concurrent_checks=limit)
        checker = HealthChecker(FakeResolver(), prober, settings)

        results = await asyncio.wait_for(
            checker.ping_servers([_installed(f"s{i}") for i in range(3)]), 1.0
        )

        assert set(results) == {"s0", "s1", "s2"}
        assert prober.max_in_flight == 1

    async def test_one_fault_does_not_stop_the_rest(self):
        resolver = FakeResolver()
        checker = HealthChecker(resolver, _SilentlyExplodingProber())
        servers = [_installed("a"), _installed("b")]

        results = await checker.ping_servers(servers)

        assert set(results) == {"a", "b"}
        assert all(r.error == "KeyError" for r in results.values())


# === wiring ==================================================================


class TestFromSettings:
    def test_builds_default_adapters(self):
        checker = HealthChecker.from_settings(HealthSettings(probe_timeout=0.5))

        assert isinstance(checker._resolver, DefaultCommandResolver)
        assert isinstance(checker._prober, DefaultPortProber)
        assert checker._prober._timeout == 0.5


@pytest.mark.skipif(
    sys.platform == "win32" or shutil.which("which") is None,
    reason="requires a POSIX `which`",
)
class TestEndToEnd:
    async def test_missing_command_never_probes(self):
        prober = FakeProber()
        checker = HealthChecker(DefaultCommandResolver(), prober)

        result = await checker.ping_server("ghost", _config("definitely-not-a-command-mcp-manager"))

        assert result.to_dict() == {"success": False, "error": "Command not available"}
        assert prober.calls == []

    async def test_listening_server(self, listener: int):
        settings = HealthSettings(host="127.0.0.1")
        checker = HealthChecker.from_settings(settings)

        result = await checker.ping_server("sh", _config("sh", args=[f"--port={listener}"]))

        assert result.to_dict() == {"success": True}

    async def test_nothing_listening(self, free_port: int):
        settings = HealthSettings(host="127.0.0.1")
        checker = HealthChecker.from_settings(settings)

        result = await checker.ping_server("sh", _config("sh", args=["--port", str(free_port)]))

        assert result.to_dict() == {"success": False}
