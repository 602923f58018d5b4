"""
Base classes for geometry sinks.
"""

from abc import ABC, abstractmethod
from typing import Dict, List

import numpy as np


class BaseGeometrySink(ABC):
    """
    Abstract base class for everything that consumes hand geometry.

    A sink receives, once per tick and per hand, the ordered list of vertex
    arrays produced by a `HandAssembly`. The position of a piece in the list
    is stable, so a renderer can map each index to one display object.
    """

    @abstractmethod
    def consume(self, name: str, geometry: List[np.ndarray], frame_idx: int) -> None:
        """
        Consumes the geometry of one hand for one tick.

        Args:
            name: Name of the hand (e.g. "left").
            geometry: One (K, 3) vertex array per piece.
            frame_idx: Index of the tick.
        """
        pass

    def close(self) -> None:
        pass


class RecordingSink(BaseGeometrySink):
    """Keeps the latest geometry of every hand in memory."""

    def __init__(self):
        self.latest: Dict[str, List[np.ndarray]] = {}
        self.num_frames = 0

    def consume(self, name: str, geometry: List[np.ndarray], frame_idx: int) -> None:
        self.latest[name] = [vertices.copy() for vertices in geometry]
        self.num_frames = max(self.num_frames, frame_idx + 1)
