"""Configuration with XDG paths and precedence resolution.

This module handles the persistent side of openapi2proto:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.openapi2proto/`` on macOS and Windows. Only the data directory is
  used, for crash logs. See :func:`get_data_dir`.
* **Project config** -- an optional ``./openapi2proto.json`` next to the
  specs being converted, e.g. ``{"dir": "specs/shared"}``.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables, and project-local config into the effective
  :class:`~openapi2proto.models.Settings`.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from openapi2proto.exceptions import ConfigError
from openapi2proto.models import Settings

_APP_NAME = "openapi2proto"
_PROJECT_CONFIG_FILENAME = "openapi2proto.json"
ENV_DIR = "OPENAPI2PROTO_DIR"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/openapi2proto/`` (default
    ``~/.local/share/openapi2proto/``). On macOS/Windows: ``~/.openapi2proto/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./openapi2proto.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_settings(cli_dir: Optional[str] = None) -> Settings:
    """Resolve settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_dir``)
        2. Environment variables (``OPENAPI2PROTO_DIR``)
        3. Project config (``./openapi2proto.json``)
        4. Defaults

    Raises:
        ConfigError: If the project config is unreadable or invalid.
    """
    project = load_project_config() or {}
    try:
        settings = Settings.model_validate(project)
    except ValidationError as exc:
        raise ConfigError(f"Invalid project config: {exc}") from exc

    env_dir = os.environ.get(ENV_DIR)
    if env_dir:
        settings.dir = env_dir
    if cli_dir is not None:
        settings.dir = cli_dir
    return settings
