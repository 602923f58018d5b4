"""
Kinematic animation of a left and a right hand driven by one exoskeleton.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional, Sequence

import numpy as np
from tqdm import tqdm

from exohand.constants import (
    ANIMATION_FPS,
    FINGER_NAMES,
    LEFT_HAND_ORIGIN,
    RIGHT_HAND_ORIGIN,
)
from exohand.devices.base import BaseAngleSource
from exohand.exporters.base import BaseGeometrySink
from exohand.processing.angles import AngleMapper
from exohand.processing.hand import HandAssembly
from exohand.schema import HandConfig, load_hand_config

logger = logging.getLogger(__name__)


class KinematicAnimation:
    """
    Runs the per-tick pipeline: sample -> frame rotations -> hand geometry.

    Both hands share the mapper and the configuration; the right hand is the
    mirrored copy of the left one. No state carries over between ticks apart
    from the tick counter.
    """

    def __init__(
        self,
        source: BaseAngleSource,
        sink: Optional[BaseGeometrySink] = None,
        config: Optional[HandConfig] = None,
        mapper: Optional[AngleMapper] = None,
        left_origin: Sequence[float] = LEFT_HAND_ORIGIN,
        right_origin: Sequence[float] = RIGHT_HAND_ORIGIN,
    ):
        self.source = source
        self.sink = sink
        self.mapper = mapper or AngleMapper()
        self.config = config or load_hand_config(finger_names=FINGER_NAMES)
        self.config.validate_frames(self.mapper.num_frames)

        self.hands: Dict[str, HandAssembly] = {
            "left": HandAssembly(self.config, mirrored=False, origin=left_origin),
            "right": HandAssembly(self.config, mirrored=True, origin=right_origin),
        }
        self.frame_idx = 0

    def tick(self) -> Dict[str, List[np.ndarray]]:
        """
        Computes one pose for both hands from a fresh sample.

        Returns:
            Dict mapping the hand name to its ordered geometry.
        """
        sample = self.source.get_joint_angles()
        frame_rotations = self.mapper.map(sample)

        geometry = {}
        for name, hand in self.hands.items():
            geometry[name] = hand.update(frame_rotations)
            if self.sink is not None:
                self.sink.consume(name, geometry[name], self.frame_idx)

        self.frame_idx += 1
        return geometry

    def run(self, num_ticks: Optional[int] = None, fps: float = ANIMATION_FPS) -> int:
        """
        Calls `tick` at a fixed cadence.

        Args:
            num_ticks: Stop after this many ticks. Runs until the source is
                       exhausted when None.
            fps: Target tick rate. Zero or negative runs as fast as possible.

        Returns:
            int: Number of ticks computed.
        """
        period = 1.0 / fps if fps > 0 else 0.0
        ticks = 0

        with tqdm(total=num_ticks, desc="Animating", unit="tick") as progress:
            while num_ticks is None or ticks < num_ticks:
                start = time.monotonic()
                try:
                    self.tick()
                except EOFError:
                    logger.info("Angle source exhausted.")
                    break
                ticks += 1
                progress.update(1)

                remaining = period - (time.monotonic() - start)
                if remaining > 0:
                    time.sleep(remaining)

        logger.info(f"Animation finished after {ticks} ticks.")
        return ticks
