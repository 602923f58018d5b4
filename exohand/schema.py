"""
Hand Configuration Schema for the kinematic hand model.

This file defines the structure of the hand configuration file and the
errors raised when a configuration or a per-tick input breaks its contract.

---
Configuration File Layout (YAML or JSON):

    Thumb:
      Lengths: [0.045, 0.035, 0.03]   # link lengths, proximal to distal
      Frames: [0, 1, 2]               # one frame id per link
      Origin:
        Position: [0.0, 0.03, 0.0]    # finger root in the hand frame
        Euler: [0.0, 0.0, 0.6]        # [roll, pitch, yaw] in radians
    Index:
      ...

- **Hand Frame**: right-handed, `+X` along the stretched fingers.
- **Finger order**: the order of the keys in the file, unless an explicit
  list of finger names is given.
---
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.resolve() / "configs" / "hand_config.yaml"


class ConfigurationError(ValueError):
    """Raised when a hand configuration or mapping table is malformed."""

    pass


class InputContractError(ValueError):
    """Raised when a per-tick input does not match the configured layout."""

    pass


class SampleLengthError(InputContractError):
    """The joint-angle sample has the wrong number of readings."""

    pass


class FrameIndexError(InputContractError):
    """A rotation set does not cover the frames a chain asks for."""

    pass


def _as_vector(value: Any, length: int, path: str) -> np.ndarray:
    """Convert a config list to a float vector of a fixed length."""
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(
            f"Configuration: '{path}' must be a list of {length} numbers, "
            f"got {type(value).__name__}"
        )
    if len(value) != length:
        raise ConfigurationError(
            f"Configuration: '{path}' must have {length} values, got {len(value)}"
        )
    try:
        vector = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Configuration: '{path}' is not numeric: {e}")
    if not np.all(np.isfinite(vector)):
        raise ConfigurationError(f"Configuration: '{path}' contains non-finite values")
    return vector


def _require(mapping: Any, key: str, path: str) -> Any:
    if not isinstance(mapping, dict):
        raise ConfigurationError(f"Configuration: '{path}' must be a mapping")
    if key not in mapping:
        raise ConfigurationError(f"Configuration: Missing field '{path}/{key}'")
    return mapping[key]


@dataclass(frozen=True)
class FingerConfig:
    """Geometry and frame assignment of one finger."""

    name: str
    lengths: List[float]
    frames: List[int]
    origin_position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    origin_euler: np.ndarray = field(default_factory=lambda: np.zeros(3))

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "FingerConfig":
        """Parse one finger entry (`Lengths`, `Frames`, `Origin`)."""
        lengths_raw = _require(data, "Lengths", name)
        frames_raw = _require(data, "Frames", name)
        origin = _require(data, "Origin", name)
        position = _require(origin, "Position", f"{name}/Origin")
        euler = _require(origin, "Euler", f"{name}/Origin")

        if not isinstance(lengths_raw, (list, tuple)) or not lengths_raw:
            raise ConfigurationError(
                f"Configuration: '{name}/Lengths' must be a non-empty list"
            )
        lengths = _as_vector(lengths_raw, len(lengths_raw), f"{name}/Lengths")
        if np.any(lengths <= 0):
            raise ConfigurationError(
                f"Configuration: '{name}/Lengths' must be positive, got {lengths_raw}"
            )

        if not isinstance(frames_raw, (list, tuple)):
            raise ConfigurationError(f"Configuration: '{name}/Frames' must be a list")
        if any(isinstance(f, bool) or not isinstance(f, int) for f in frames_raw):
            raise ConfigurationError(
                f"Configuration: '{name}/Frames' must contain integers, got {frames_raw}"
            )
        if any(f < 0 for f in frames_raw):
            raise ConfigurationError(
                f"Configuration: '{name}/Frames' must be non-negative, got {frames_raw}"
            )
        if len(frames_raw) != len(lengths_raw):
            raise ConfigurationError(
                f"Configuration: '{name}' has {len(lengths_raw)} lengths but "
                f"{len(frames_raw)} frames"
            )

        return cls(
            name=name,
            lengths=lengths.tolist(),
            frames=list(frames_raw),
            origin_position=_as_vector(position, 3, f"{name}/Origin/Position"),
            origin_euler=_as_vector(euler, 3, f"{name}/Origin/Euler"),
        )

    @property
    def num_links(self) -> int:
        return len(self.lengths)


@dataclass(frozen=True)
class HandConfig:
    """The ordered set of fingers that make up one hand."""

    fingers: List[FingerConfig]

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], finger_names: Optional[Sequence[str]] = None
    ) -> "HandConfig":
        """
        Build a hand configuration from a parsed configuration file.

        Args:
            data: The parsed file, keyed by finger name.
            finger_names: Optional list of fingers to read, in this order.
                          Defaults to every entry in file order.
        """
        if not isinstance(data, dict) or not data:
            raise ConfigurationError(
                "Configuration: The hand configuration must be a non-empty mapping"
            )

        names = list(finger_names) if finger_names is not None else list(data.keys())
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigurationError(
                "Configuration: Finger names must be unique, "
                f"got duplicates {duplicates}"
            )
        fingers = [FingerConfig.from_dict(name, _require(data, name, "")) for name in names]
        return cls(fingers=fingers)

    @property
    def finger_names(self) -> List[str]:
        return [finger.name for finger in self.fingers]

    @property
    def max_frame_id(self) -> int:
        return max((max(f.frames) for f in self.fingers if f.frames), default=-1)

    def validate_frames(self, num_frames: int) -> None:
        """Check that every frame id addresses one of `num_frames` frames."""
        for finger in self.fingers:
            for frame_id in finger.frames:
                if frame_id >= num_frames:
                    raise ConfigurationError(
                        f"Configuration: '{finger.name}/Frames' references frame "
                        f"{frame_id}, but only {num_frames} frames exist"
                    )


def load_hand_config(
    path: Optional[Path] = None, finger_names: Optional[Sequence[str]] = None
) -> HandConfig:
    """
    Loads and validates a hand configuration file.

    YAML is a superset of JSON, so the same loader reads both formats.

    Args:
        path: Path to the configuration file. Defaults to the packaged
              reference configuration.
        finger_names: Optional list of fingers to read, in this order.

    Returns:
        HandConfig: The validated configuration.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Hand configuration not found: {config_path}")

    logger.info(f"Loading hand configuration from {config_path}...")
    with open(config_path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing configuration file {config_path}: {e}")
            raise ConfigurationError(
                f"Configuration: cannot parse {config_path}: {e}"
            ) from e

    return HandConfig.from_dict(data, finger_names=finger_names)
