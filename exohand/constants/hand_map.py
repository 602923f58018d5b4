# exohand/constants/hand_map.py
"""
This file contains the sensor-to-frame mapping of the reference exoskeleton.
"""

from dataclasses import dataclass
from enum import IntEnum


class Axis(IntEnum):
    """Rotation axis of a frame, also the index into its Euler vector."""

    ROLL = 0
    PITCH = 1
    YAW = 2


@dataclass(frozen=True)
class MappingEntry:
    """Routes one sensor reading onto one rotation axis of one frame."""

    source_index: int
    target_frame: int
    axis: Axis
    sign: int = 1


# --- Hand Frames ---
# The hand model has nine frames, three per finger, ordered proximal to distal:
#   Thumb:  0, 1, 2
#   Index:  3, 4, 5
#   Middle: 6, 7, 8
# The base joint of each finger is a 2 or 3 DoF joint, all the others only flex.
NUM_HAND_FRAMES: int = 9

# --- Sensor Mapping ---
# One entry per reading of the exoskeleton, in the order the device reports
# them. The index finger comes first and the thumb last.
HAND_MAP: list[MappingEntry] = [
    # Index
    MappingEntry(0, 3, Axis.YAW, 1),
    MappingEntry(1, 3, Axis.PITCH, 1),
    MappingEntry(2, 4, Axis.PITCH, 1),
    MappingEntry(3, 5, Axis.PITCH, 1),
    # Middle
    MappingEntry(4, 6, Axis.YAW, 1),
    MappingEntry(5, 6, Axis.PITCH, 1),
    MappingEntry(6, 7, Axis.PITCH, 1),
    MappingEntry(7, 8, Axis.PITCH, 1),
    # Thumb
    MappingEntry(8, 0, Axis.ROLL, 1),
    MappingEntry(9, 0, Axis.PITCH, 1),
    MappingEntry(10, 0, Axis.YAW, 1),
    MappingEntry(11, 1, Axis.PITCH, 1),
    MappingEntry(12, 2, Axis.PITCH, 1),
]

NUM_JOINT_ANGLES: int = len(HAND_MAP)
