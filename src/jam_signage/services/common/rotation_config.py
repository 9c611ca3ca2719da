"""
JAM Signage - Rotation Configuration

Durations and periods used by the rotation scheduler. Every knob has a
default matching the stock player behaviour; a deployment can override any of
them in /etc/jam/config/rotation.json, e.g.:

    {"ticker_dwell_ms": 20000, "interrupt_period_ms": 120000, "shuffle": true}

Set JAM_SIGNAGE_CONFIG to read a different file.
"""

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from jam_signage import constants
from .paths import ROTATION_CONFIG_FILE

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = 'JAM_SIGNAGE_CONFIG'


@dataclass(frozen=True)
class RotationConfig:
    ticker_dwell_ms: int = constants.DEFAULT_TICKER_DWELL_MS
    sidebar_ad_seconds: int = constants.DEFAULT_SIDEBAR_AD_SECONDS
    stripe_ad_seconds: int = constants.DEFAULT_STRIPE_AD_SECONDS
    fullscreen_ad_seconds: int = constants.DEFAULT_FULLSCREEN_AD_SECONDS
    interrupt_period_ms: int = constants.DEFAULT_INTERRUPT_PERIOD_MS
    primary_image_seconds: int = constants.DEFAULT_PRIMARY_IMAGE_SECONDS
    content_poll_seconds: int = constants.DEFAULT_CONTENT_POLL_SECONDS
    shuffle: bool = False


def _coerce(name: str, value: Any, default: Any) -> Optional[Any]:
    """Validate one config value. Returns None if it should be ignored."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        logger.warning(f"Config '{name}' must be true or false, got {value!r}")
        return None

    if isinstance(value, bool) or not isinstance(value, int):
        logger.warning(f"Config '{name}' must be an integer, got {value!r}")
        return None
    if value <= 0:
        logger.warning(f"Config '{name}' must be positive, got {value}")
        return None
    return value


def config_from_dict(data: Dict[str, Any]) -> RotationConfig:
    """
    Build a RotationConfig from a dict, ignoring unknown keys and bad values.

    Args:
        data: Parsed JSON object.

    Returns:
        RotationConfig with defaults for anything missing or invalid.
    """
    defaults = RotationConfig()
    known = {f.name for f in fields(RotationConfig)}
    overrides = {}

    for name, value in data.items():
        if name not in known:
            logger.warning(f"Ignoring unknown rotation config key '{name}'")
            continue
        coerced = _coerce(name, value, getattr(defaults, name))
        if coerced is not None:
            overrides[name] = coerced

    return replace(defaults, **overrides)


def get_config_path() -> Path:
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)
    return ROTATION_CONFIG_FILE


def load_rotation_config(path: Optional[Union[str, Path]] = None) -> RotationConfig:
    """
    Load rotation settings, falling back to defaults on any problem.

    A missing file is normal (stock settings). An unreadable or malformed file
    is logged and ignored so the display keeps rotating.
    """
    config_path = Path(path) if path else get_config_path()

    if not config_path.exists():
        logger.debug(f"No rotation config at {config_path}, using defaults")
        return RotationConfig()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Error reading rotation config {config_path}: {e}")
        return RotationConfig()

    if not isinstance(data, dict):
        logger.warning(f"Rotation config {config_path} is not a JSON object, using defaults")
        return RotationConfig()

    config = config_from_dict(data)
    if config != RotationConfig():
        logger.info(f"Using rotation config from {config_path}: {config}")
    return config
