from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np


class BaseAngleSource(ABC):
    """
    Anything that can produce one joint-angle sample per animation tick.

    The exoskeleton driver, a file replay or a test double all implement this
    interface; the kinematic model never looks past it.
    """

    @abstractmethod
    def get_joint_angles(self) -> np.ndarray:
        """
        Returns the current joint angles as a 1-D float array in radians.

        Sources backed by a finite recording raise `EOFError` once exhausted.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Releases any resource held by the source."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def parse_angle_line(line: str) -> np.ndarray:
    """
    Parses one comma-delimited line of joint angles as sent by the device.

    Args:
        line: For example "0.1,0.0,-0.25".

    Returns:
        np.ndarray: The angles as float64.
    """
    tokens = [token.strip() for token in line.strip().split(",")]
    if not tokens or any(token == "" for token in tokens):
        raise ValueError(f"Malformed joint-angle line: {line!r}")
    try:
        return np.array([float(token) for token in tokens], dtype=np.float64)
    except ValueError as e:
        raise ValueError(f"Malformed joint-angle line: {line!r}") from e


class ConstantAngleSource(BaseAngleSource):
    """Returns the same sample on every tick."""

    def __init__(self, angles: Sequence[float]):
        self.angles = np.asarray(angles, dtype=np.float64)

    def get_joint_angles(self) -> np.ndarray:
        return self.angles.copy()
