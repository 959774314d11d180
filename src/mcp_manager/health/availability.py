"""Check whether a server's launch command resolves to a runnable binary."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import signal
import sys

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT = 5.0


def _lookup_tool() -> str:
    return "where" if sys.platform == "win32" else "which"


async def run_lookup(cmd: list[str], timeout: float = DEFAULT_COMMAND_TIMEOUT) -> int:
    """Run a lookup command and return its exit code, or -1 on timeout.

    Uses asyncio.create_subprocess_exec -- never a shell, so the command
    name is passed as a single argument. Output is discarded.
    Uses start_new_session=True so a hung lookup can be killed as a group.
    """
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.DEVNULL,
        stderr=asyncio.subprocess.DEVNULL,
        start_new_session=True,
    )
    try:
        await asyncio.wait_for(proc.wait(), timeout=timeout)
    except TimeoutError:
        _kill_group(proc)
        await proc.wait()
        logger.warning("Lookup %s timed out after %ss", cmd, timeout)
        return -1
    except asyncio.CancelledError:
        with contextlib.suppress(ProcessLookupError):
            _kill_group(proc)
        raise

    return proc.returncode if proc.returncode is not None else -1


def _kill_group(proc: asyncio.subprocess.Process) -> None:
    # Process groups are POSIX-only; Windows gets a plain kill.
    if sys.platform == "win32" or not hasattr(os, "killpg"):
        proc.kill()
        return
    try:
        os.killpg(os.getpgid(proc.pid), signal.SIGKILL)
    except (ProcessLookupError, OSError, AttributeError):
        proc.kill()


async def is_command_available(
    command: str,
    *,
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
) -> bool:
    """Return True if the host's ``which``/``where`` resolves *command*.

    Never raises: spawn errors, non-zero exits and timeouts all mean
    "not available".
    """
    if not command:
        return False

    try:
        returncode = await run_lookup([_lookup_tool(), command], timeout=timeout)
    except (OSError, ValueError) as exc:
        logger.debug("Could not run %s for '%s': %s", _lookup_tool(), command, exc)
        return False

    return returncode == 0


class DefaultCommandResolver:
    """Adapter for CommandResolverPort."""

    def __init__(self, timeout: float = DEFAULT_COMMAND_TIMEOUT) -> None:
        self._timeout = timeout

    async def is_available(self, command: str) -> bool:
        """Resolve *command* with the host's executable lookup."""
        return await is_command_available(command, timeout=self._timeout)
