"""Infer the TCP port an MCP server is expected to listen on.

Servers have no structured port field, so the port is guessed from the
server's environment and command line. Each rule is an independent
resolver returning ``int | None``; the first non-None answer wins and
the default port is used when every rule comes up empty.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from mcp_manager.models import ServerConfig

DEFAULT_PORT = 8080
PORT_ENV_VAR = "MCP_PORT"

_PORT_FLAG = "--port"
_PORT_PREFIX = "--port="

# Leading decimal digits, optional sign, surrounding whitespace allowed.
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

PortResolver = Callable[[ServerConfig], int | None]


def parse_port(value: object) -> int | None:
    """Parse a port from the leading digits of *value*.

    ``"1234abc"`` gives 1234. Zero, negative and unparsable values give None.
    """
    if not isinstance(value, str):
        return None
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    port = int(match.group(1))
    return port if port > 0 else None


def port_from_env(config: ServerConfig) -> int | None:
    """Read ``MCP_PORT`` from the server's env block."""
    env = config.env or {}
    return parse_port(env.get(PORT_ENV_VAR))


def port_from_args(config: ServerConfig) -> int | None:
    """Find ``--port=N`` or ``--port N`` in the server's args.

    The first port-bearing token decides; a trailing ``--port`` with no
    value is skipped.
    """
    args = list(config.args or [])
    for i, arg in enumerate(args):
        if not isinstance(arg, str):
            continue
        if arg.startswith(_PORT_PREFIX):
            return parse_port(arg.split("=", 1)[1])
        if arg == _PORT_FLAG and i < len(args) - 1:
            return parse_port(args[i + 1])
    return None


PORT_RESOLVERS: tuple[PortResolver, ...] = (port_from_env, port_from_args)


def infer_port(config: ServerConfig, default: int = DEFAULT_PORT) -> int:
    """Return the first port found by PORT_RESOLVERS, else *default*."""
    for resolver in PORT_RESOLVERS:
        port = resolver(config)
        if port is not None:
            return port
    return default
