"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for strapi-cache:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.strapi-cache/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Global config** -- A single :class:`~strapi_cache.models.GlobalConfig`
  JSON file storing the base URL, cache TTL and request settings.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  :class:`~strapi_cache.models.StrapiConfig` handed to the façade.
* **Credential resolution** -- :func:`resolve_credential` reads the API
  token from an env var or a file.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from strapi_cache.exceptions import ConfigError
from strapi_cache.models import GlobalConfig, OutputConfig, StrapiConfig

_APP_NAME = "strapi-cache"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "strapi.json"

ENV_URL = "STRAPI_URL"
ENV_CACHE_TIME = "STRAPI_CACHE_TIME"
ENV_TOKEN = "STRAPI_TOKEN"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/strapi-cache/`` (default ``~/.config/strapi-cache/``).
    On macOS/Windows: ``~/.strapi-cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory, creating it if necessary.

    Holds the response cache. Cached data can be safely deleted at any time.

    On Linux/BSD: ``$XDG_CACHE_HOME/strapi-cache/`` (default ``~/.cache/strapi-cache/``).
    On macOS/Windows: ``~/.strapi-cache/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/strapi-cache/`` (default ``~/.local/share/strapi-cache/``).
    On macOS/Windows: ``~/.strapi-cache/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~strapi_cache.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./strapi.json``.

    Project-local config sits between global config and environment
    variables in the precedence chain. Its keys mirror
    :class:`~strapi_cache.models.GlobalConfig`.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overlay* into a copy of *base*."""
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_config(
    cli_url: Optional[str] = None,
    cli_cache_time: Optional[int] = None,
    cli_token_source: Optional[str] = None,
) -> tuple[GlobalConfig, StrapiConfig]:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_url``, ``cli_cache_time``, ``cli_token_source``)
        2. Environment variables (``STRAPI_URL``, ``STRAPI_CACHE_TIME``,
           ``STRAPI_TOKEN``)
        3. Project config (``./strapi.json``)
        4. User config (``~/.config/strapi-cache/config.json``)
        5. Defaults

    ``STRAPI_TOKEN`` holds the token itself; it is turned into an
    ``env:STRAPI_TOKEN`` source so the secret never lands in the config.

    Returns:
        A tuple of ``(global_config, strapi_config)``.

    Raises:
        ConfigError: If no base URL is configured anywhere or a value fails
            validation.
    """
    global_cfg = load_global_config()
    data = global_cfg.model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        data = _merge(data, project)

    env_url = os.environ.get(ENV_URL)
    if env_url:
        data["url"] = env_url
    env_cache_time = os.environ.get(ENV_CACHE_TIME)
    if env_cache_time:
        try:
            data["cache_time"] = int(env_cache_time)
        except ValueError as exc:
            raise ConfigError(
                f"{ENV_CACHE_TIME} must be an integer, got {env_cache_time!r}"
            ) from exc
    if os.environ.get(ENV_TOKEN):
        data["token_source"] = f"env:{ENV_TOKEN}"

    if cli_url is not None:
        data["url"] = cli_url
    if cli_cache_time is not None:
        data["cache_time"] = cli_cache_time
    if cli_token_source is not None:
        data["token_source"] = cli_token_source

    try:
        merged_global = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    if not merged_global.url:
        raise ConfigError(
            f"No Strapi URL configured. Pass --url, set {ENV_URL}, "
            f"or add \"url\" to {_PROJECT_CONFIG_FILENAME}."
        )

    try:
        strapi_cfg = StrapiConfig(
            url=merged_global.url,
            cache_time=merged_global.cache_time,
            token_source=merged_global.token_source,
            request=merged_global.request,
            cache=merged_global.cache,
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    return merged_global, strapi_cfg


def resolve_output_format(cli_format: Optional[str] = None) -> str:
    """Return the output format: *cli_format*, else ``output.format`` from
    the project config, else from the global config.

    Raises:
        ConfigError: If a config file is invalid or names an unknown format.
    """
    if cli_format is not None:
        return cli_format
    fmt = load_global_config().output.format
    project_output = (load_project_config() or {}).get("output")
    if isinstance(project_output, dict) and "format" in project_output:
        try:
            fmt = OutputConfig.model_validate(project_output).format
        except ValidationError as exc:
            raise ConfigError(f"Invalid project output config: {exc}") from exc
    return fmt


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    raise ConfigError(f"Unknown credential source format: {source}")
