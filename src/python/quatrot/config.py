"""
Runtime configuration for the rotation tools.

Settings are read from a YAML file laid out as::

    rotation:
      scalar_kind: float64
      rotation_order: XYZ
    tolerances:
      slerp_epsilon: 1.0e-6
      gimbal_lock_threshold: 0.9999999
      comparison_tolerance: 1.0e-9

Every key is optional; anything left out keeps its default from
:mod:`quatrot.constants`.
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from quatrot.constants import COMPARISON_TOLERANCE, GIMBAL_LOCK_THRESHOLD, SLERP_EPSILON
from quatrot.rotation_order import RotationOrder
from quatrot.scalar import ScalarKind

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT.parent.parent / 'config' / 'rotation_config.yaml'

_SECTIONS = ('rotation', 'tolerances')


@dataclass(frozen=True)
class RotationConfig:
    """Defaults threaded through the conversion and interpolation calls."""
    scalar_kind: ScalarKind = ScalarKind.FLOAT64
    rotation_order: RotationOrder = RotationOrder.XYZ
    slerp_epsilon: float = SLERP_EPSILON
    gimbal_lock_threshold: float = GIMBAL_LOCK_THRESHOLD
    comparison_tolerance: float = COMPARISON_TOLERANCE

    def __post_init__(self):
        # frozen, so normalize through object.__setattr__
        object.__setattr__(self, 'scalar_kind', ScalarKind.parse(self.scalar_kind))
        object.__setattr__(self, 'rotation_order', RotationOrder.parse(self.rotation_order))

        for name in ('slerp_epsilon', 'gimbal_lock_threshold', 'comparison_tolerance'):
            value = getattr(self, name)
            if isinstance(value, bool):
                raise ValueError(f"{name} must be a number, got {value!r}")
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise ValueError(f"{name} must be a number, got {value!r}") from None
            if not value > 0:
                raise ValueError(f"{name} must be positive, got {value}")
            object.__setattr__(self, name, value)

        if self.gimbal_lock_threshold > 1:
            raise ValueError(
                f"gimbal_lock_threshold must not exceed 1, got {self.gimbal_lock_threshold}"
            )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'RotationConfig':
        """
        Build a configuration from the parsed YAML mapping.

        Raises
        ------
        ValueError
            On unknown sections or keys, or invalid values.
        """
        if not data:
            return cls()

        if not isinstance(data, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        values = {}

        for section, entries in data.items():
            if section not in _SECTIONS:
                raise ValueError(f"Unknown configuration section {section!r}")
            if entries is None:
                continue
            if not isinstance(entries, dict):
                raise ValueError(f"Configuration section {section!r} must be a mapping")
            for key, value in entries.items():
                if key not in known:
                    raise ValueError(f"Unknown configuration key {section}.{key}")
                values[key] = value

        return cls(**values)


def load_config(config_path: Optional[Union[str, Path]] = None) -> RotationConfig:
    """
    Load the rotation configuration from a YAML file.

    Args:
        config_path: Path to YAML config. Defaults to config/rotation_config.yaml
            at the repository root, falling back to built-in defaults when that
            file is absent.

    Returns:
        The parsed configuration.

    Raises:
        FileNotFoundError: If an explicitly given path does not exist.
        ValueError: If the file content is not a valid configuration.
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.is_file():
            logger.debug("No configuration at %s; using defaults", DEFAULT_CONFIG_PATH)
            return RotationConfig()
        config_path = DEFAULT_CONFIG_PATH

    logger.info("Loading configuration from: %s", config_path)
    with open(config_path, 'r') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(f"Could not parse {config_path}: {exc}") from exc

    config = RotationConfig.from_dict(data)
    logger.debug("Configuration: %s", config)
    return config
