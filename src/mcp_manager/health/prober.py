"""TCP liveness probe for MCP servers -- connect, then hang up."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from mcp_manager.health.ports import DEFAULT_PORT, infer_port
from mcp_manager.models import ServerConfig

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PROBE_TIMEOUT = 1.0


async def probe_port(
    host: str,
    port: int,
    *,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> bool:
    """Try to open a TCP connection to host:port within *timeout* seconds.

    Connection established is the only success signal; no data is sent.
    ``asyncio.wait_for`` resolves exactly once: if the timeout wins, the
    pending connect is cancelled and its socket closed by asyncio.
    """
    try:
        _reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=timeout,
        )
    except TimeoutError:
        logger.debug("Probe of %s:%d timed out after %ss", host, port, timeout)
        return False
    except (OSError, OverflowError, ValueError) as exc:
        logger.debug("Probe of %s:%d failed: %s", host, port, exc)
        return False

    writer.close()
    # The peer may already have hung up; that does not undo the connect.
    with contextlib.suppress(OSError):
        await writer.wait_closed()
    logger.debug("Probe of %s:%d connected", host, port)
    return True


async def check_connection(
    config: ServerConfig,
    *,
    host: str = DEFAULT_HOST,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
    default_port: int = DEFAULT_PORT,
) -> bool:
    """Infer the server's port and probe it. Always returns a bool -- never raises."""
    try:
        port = infer_port(config, default=default_port)
        return await probe_port(host, port, timeout=timeout)
    except Exception:
        logger.exception(
            "Error checking server connection for '%s'", getattr(config, "command", "")
        )
        return False


class DefaultPortProber:
    """Adapter for PortProberPort."""

    def __init__(
        self,
        *,
        host: str = DEFAULT_HOST,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
        default_port: int = DEFAULT_PORT,
    ) -> None:
        self._host = host
        self._timeout = timeout
        self._default_port = default_port

    async def check(self, config: ServerConfig) -> bool:
        """Probe the port *config* is expected to listen on."""
        return await check_connection(
            config,
            host=self._host,
            timeout=self._timeout,
            default_port=self._default_port,
        )
