"""Atomic config file saves.

Invariants:
  1. Only JSON objects are saved; anything else is rejected before touching disk.
  2. Writes are atomic: write to unique temp file, then os.replace().
  3. Concurrent saves are safe via threading.Lock (in-process) + fcntl.flock
     (cross-process, POSIX only; Windows relies on the thread lock).
"""

from __future__ import annotations

import contextlib
import json
import os
import sys
import tempfile
import threading
from pathlib import Path

from mcp_manager.errors import ConfigWriteError

if sys.platform != "win32":
    import fcntl
else:
    fcntl = None

_path_locks: dict[str, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _get_path_lock(path: Path) -> threading.Lock:
    """Get or create an in-process threading.Lock for *path*."""
    key = str(path.resolve())
    with _path_locks_guard:
        if key not in _path_locks:
            _path_locks[key] = threading.Lock()
        return _path_locks[key]


def _coerce_config(data: dict[str, object] | str) -> dict[str, object]:
    """Accept a dict or a JSON document string; return the config dict."""
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise ConfigWriteError(f"Refusing to save invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigWriteError(f"Config must be a JSON object, got {type(data).__name__}.")
    servers = data.get("mcpServers", {})
    if not isinstance(servers, dict):
        raise ConfigWriteError('"mcpServers" must be an object keyed by server name.')
    return data


def save_config(config_path: Path | str, data: dict[str, object] | str) -> None:
    """Replace the config file with *data* atomically."""
    path = Path(config_path)
    config = _coerce_config(data)
    lock = _get_path_lock(path)

    with lock:
        _locked_save(path, config)


def _locked_save(path: Path, data: dict[str, object]) -> None:
    """Write under an inter-process file lock where the platform has one."""
    if fcntl is None:
        _atomic_write(path, data)
        return

    lock_path = path.with_suffix(".lock")
    try:
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock_fd = open(lock_path, "w")  # noqa: SIM115
    except OSError as exc:
        raise ConfigWriteError(f"Failed to lock {path}: {exc}") from exc

    with lock_fd:
        fcntl.flock(lock_fd, fcntl.LOCK_EX)
        try:
            _atomic_write(path, data)
        finally:
            fcntl.flock(lock_fd, fcntl.LOCK_UN)


def _atomic_write(path: Path, data: dict[str, object]) -> None:
    """Write JSON atomically: write to unique temp file then rename."""
    fd = None
    tmp_path: str | None = None
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            suffix=".tmp",
            prefix=f".{path.stem}_",
        )
        content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        os.write(fd, content.encode("utf-8"))
        os.close(fd)
        fd = None
        os.replace(tmp_path, str(path))
        tmp_path = None
    except PermissionError as exc:
        raise ConfigWriteError(f"Permission denied writing to {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigWriteError(f"Failed to write {path}: {exc}") from exc
    finally:
        if fd is not None:
            os.close(fd)
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
