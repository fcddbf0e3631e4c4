"""Configuration loading with layered merging and environment overrides.

Layers, later wins:
1. Global user config (~/.gboxrun/config.json)
2. Project local config (<cwd>/.gboxrun/config.json)
3. Environment variables (GBOXRUN_PORT, GBOXRUN_API_URL)

The schema is two levels deep (section -> key), so a later layer replaces
individual keys within a section. Lists are values, never merged.
"""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gboxrun.config.schema import Config
from gboxrun.core.constants import GBOX_DIR_NAME, get_gbox_dir
from gboxrun.core.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PORT = "GBOXRUN_PORT"
ENV_API_URL = "GBOXRUN_API_URL"


def load_config(
    path: Path | None = None,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Config:
    """Load configuration from files and the environment.

    Args:
        path: Explicit config file path. If provided, skips layered loading.
        cwd: Working directory for the local layer. Defaults to Path.cwd().
        env: Environment mapping for overrides. Defaults to os.environ.

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If a config file is unreadable or not a JSON object, an
            override is malformed, or the merged config fails validation.
    """
    merged: dict[str, Any] = {}
    loaded_from: list[Path] = []

    if path is not None:
        data = read_layer(path)
        if data is None:
            raise ConfigError(f"Config file not found: {path}")
        merged = data
        loaded_from.append(path)
    else:
        layers = [
            get_gbox_dir() / "config.json",
            (cwd or Path.cwd()) / GBOX_DIR_NAME / "config.json",
        ]
        for layer in layers:
            data = read_layer(layer)
            if data is None:
                logger.debug("No config at %s", layer)
                continue
            merged = overlay(merged, data)
            loaded_from.append(layer)

    merged = apply_env_overrides(merged, os.environ if env is None else env)

    if loaded_from:
        logger.info("Config loaded from: %s", [str(p) for p in loaded_from])

    try:
        return Config.model_validate(merged)
    except ValidationError as e:
        sources = ", ".join(str(p) for p in loaded_from) or "defaults"
        raise ConfigError(f"Config validation failed (merged from {sources}): {e}") from e


def read_layer(path: Path) -> dict[str, Any] | None:
    """Read one config layer.

    Returns None when the file does not exist and an empty dict when it is
    blank. A UTF-8 BOM is tolerated.
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        return None
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a JSON object, got {type(data).__name__}")
    return data


def overlay(base: dict[str, Any], layer: Mapping[str, Any]) -> dict[str, Any]:
    """Apply ``layer`` over ``base`` section by section.

    Keys inside a section replace the base's keys; a non-object value
    replaces the whole section (validation rejects it later). Neither
    input is modified.
    """
    merged = dict(base)
    for section, values in layer.items():
        current = merged.get(section)
        if isinstance(values, dict) and isinstance(current, dict):
            merged[section] = {**current, **values}
        else:
            merged[section] = values
    return merged


def apply_env_overrides(data: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    """Overlay GBOXRUN_* environment variables onto raw config data.

    Raises:
        ConfigError: If GBOXRUN_PORT is not an integer.
    """
    overrides: dict[str, dict[str, Any]] = {}

    port = env.get(ENV_PORT)
    if port:
        try:
            overrides["server"] = {"port": int(port)}
        except ValueError as e:
            raise ConfigError(f"{ENV_PORT} must be an integer, got: {port!r}") from e

    api_url = env.get(ENV_API_URL)
    if api_url:
        overrides["backend"] = {"api_url": api_url}

    if not overrides:
        return data
    logger.debug("Applying environment overrides: %s", overrides)
    return overlay(data, overrides)
