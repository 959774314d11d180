"""Ports: command resolution and liveness probing for health checks."""

from __future__ import annotations

from typing import Protocol

from mcp_manager.models import ServerConfig


class CommandResolverPort(Protocol):
    """Port for checking that a launch command exists on the host."""

    async def is_available(self, command: str) -> bool:
        """Return True if *command* resolves to a runnable binary. Never raises."""
        ...


class PortProberPort(Protocol):
    """Port for checking that a server is listening on its TCP port."""

    async def check(self, config: ServerConfig) -> bool:
        """Return True if the server's inferred port accepts a connection. Never raises."""
        ...
