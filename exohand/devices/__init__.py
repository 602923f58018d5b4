from .base import BaseAngleSource, ConstantAngleSource, parse_angle_line
from .replay import AngleRecorder, H5AngleSource, ReplayAngleSource

__all__ = [
    "BaseAngleSource",
    "ConstantAngleSource",
    "parse_angle_line",
    "ReplayAngleSource",
    "H5AngleSource",
    "AngleRecorder",
]
