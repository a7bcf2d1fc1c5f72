"""
Configuration loader: reads host.yml into a HostProfile.

The host profile stands in for host probing. It names the default
compiler family and the installed compiler versions the selector may
query.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from compiler_selector.core.models.host import HostProfile

logger = logging.getLogger(__name__)

# Default config filename
HOST_CONFIG_FILE = "host.yml"


class ConfigError(Exception):
    """Raised when host configuration is invalid or missing."""


def find_host_file(start_dir: Path | None = None) -> Path | None:
    """Search for host.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to host.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / HOST_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_host_profile(path: Path | None = None) -> HostProfile:
    """Load and validate a host profile.

    Args:
        path: Explicit path to host.yml. If None, searches upward.

    Returns:
        Validated HostProfile.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_host_file()

    if path is None:
        raise ConfigError(
            f"No {HOST_CONFIG_FILE} found. "
            "Create one or pass --host / set CCSEL_HOST_PROFILE."
        )

    if not path.is_file():
        raise ConfigError(f"Host profile not found: {path}")

    logger.debug("Loading host profile from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "host" key or be flat
    host_data = data.get("host", data)

    try:
        profile = HostProfile.model_validate(host_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid host profile in {path}: {e}") from e

    logger.info(
        "Loaded host profile: default %s, %d compilers installed",
        profile.default_compiler.value, len(profile.installed()),
    )
    return profile
