"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles persistent configuration for scyllaclient:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.scyllaclient/`` on macOS and Windows. See :func:`get_config_dir`
  and :func:`get_cache_dir`.
* **Config file** -- a single :class:`~scyllaclient.models.ClientConfig`
  JSON file holding the API address, port, timeout and cache settings.
* **Precedence resolution** -- :func:`resolve_config` merges explicit
  overrides, environment variables and the config file into the effective
  :class:`~scyllaclient.models.ClientConfig`.

Writes use a temp-file-then-rename strategy (:func:`_atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

import httpx

from scyllaclient.exceptions import ConfigError
from scyllaclient.models import ClientConfig

_APP_NAME = "scyllaclient"
_CONFIG_FILENAME = "config.json"

ENV_URL = "SCYLLACLIENT_URL"
ENV_API_ADDRESS = "SCYLLACLIENT_API_ADDRESS"
ENV_API_PORT = "SCYLLACLIENT_API_PORT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/scyllaclient/`` (default
    ``~/.config/scyllaclient/``). On macOS/Windows: ``~/.scyllaclient/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory used by the CLI, creating it if necessary.

    On Linux/BSD: ``$XDG_CACHE_HOME/scyllaclient/``. On macOS/Windows:
    ``~/.scyllaclient/cache/``. Safe to delete at any time.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On failure the
    temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    ) as fd:
        tmp_path = fd.name
        try:
            fd.write(data)
            fd.flush()
            os.fsync(fd.fileno())
        except BaseException:
            fd.close()
            os.unlink(tmp_path)
            raise
    os.replace(tmp_path, path)


# --- Config file ---


def config_path() -> Path:
    """Path to the config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_config() -> ClientConfig:
    """Load the configuration file.

    Returns:
        The deserialised :class:`~scyllaclient.models.ClientConfig`, or a
        default instance if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = config_path()
    if not path.is_file():
        return ClientConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ClientConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: ClientConfig) -> None:
    """Persist *config* atomically to the config file."""
    data = config.model_dump(mode="json")
    _atomic_write(config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def _url_overrides(url: str) -> dict[str, Any]:
    """Split a base URL such as ``http://10.0.0.5:10000`` into config fields."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ConfigError(f"Invalid API URL {url!r}: {exc}") from exc
    if not parsed.host:
        raise ConfigError(f"Invalid API URL {url!r}: no host")
    overrides: dict[str, Any] = {"api_address": parsed.host}
    if parsed.scheme:
        overrides["scheme"] = parsed.scheme
    if parsed.port is not None:
        overrides["api_port"] = parsed.port
    return overrides


def _port(value: str, source: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"Invalid API port {value!r} from {source}") from exc


def resolve_config(
    url: Optional[str] = None,
    api_address: Optional[str] = None,
    api_port: Optional[int] = None,
) -> ClientConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. Explicit arguments (``url``, then ``api_address`` / ``api_port``)
        2. Environment variables (``SCYLLACLIENT_URL``, then
           ``SCYLLACLIENT_API_ADDRESS`` / ``SCYLLACLIENT_API_PORT``)
        3. Config file (``~/.config/scyllaclient/config.json``)
        4. Defaults (``http://localhost:10000``)

    Raises:
        ConfigError: On an unreadable config file, URL or port.
    """
    config = load_config()
    updates: dict[str, Any] = {}

    env_url = os.environ.get(ENV_URL)
    if env_url:
        updates.update(_url_overrides(env_url))
    env_address = os.environ.get(ENV_API_ADDRESS)
    if env_address:
        updates["api_address"] = env_address
    env_port = os.environ.get(ENV_API_PORT)
    if env_port:
        updates["api_port"] = _port(env_port, ENV_API_PORT)

    if url is not None:
        updates.update(_url_overrides(url))
    if api_address is not None:
        updates["api_address"] = api_address
    if api_port is not None:
        updates["api_port"] = api_port

    return config.model_copy(update=updates)
