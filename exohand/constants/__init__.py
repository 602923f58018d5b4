# exohand/constants/__init__.py
"""
This module centralizes all the constants used in the exohand project,
making them easily accessible from a single, organized location.
"""
from .hand_map import HAND_MAP, NUM_HAND_FRAMES, NUM_JOINT_ANGLES, Axis, MappingEntry
from .hand_model import (
    ANIMATION_FPS,
    FINGER_NAMES,
    JOINT_SCALE,
    LEFT_HAND_ORIGIN,
    RIGHT_HAND_ORIGIN,
)

__all__ = [
    "Axis",
    "MappingEntry",
    "HAND_MAP",
    "NUM_HAND_FRAMES",
    "NUM_JOINT_ANGLES",
    "FINGER_NAMES",
    "JOINT_SCALE",
    "LEFT_HAND_ORIGIN",
    "RIGHT_HAND_ORIGIN",
    "ANIMATION_FPS",
]
