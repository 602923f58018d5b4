from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, TypeVar

import numpy as np

from exohand.constants import JOINT_SCALE
from exohand.processing.finger import LinkChain
from exohand.schema import FrameIndexError, HandConfig
from exohand.transforms.coordinates import mirror_and_translate, mirror_matrix

logger = logging.getLogger(__name__)

T = TypeVar("T")


def concatenate_pieces(data: Sequence[Sequence[T]]) -> List[T]:
    """
    Flattens a sequence of per-chain piece lists into one list.

    Chain order is kept, and piece order within each chain is kept, so the
    position of every piece is stable from one call to the next.
    """
    return [piece for chain_pieces in data for piece in chain_pieces]


class HandAssembly:
    """
    The kinematic model of one hand, composed of several finger chains.

    Every tick the assembly hands each chain its slice of the frame rotations,
    runs the chain forward kinematics and places the resulting geometry in the
    world: first the handedness mirror, then the hand origin translation.
    """

    def __init__(
        self,
        config: HandConfig,
        mirrored: bool = False,
        origin: Sequence[float] = (0.0, 0.0, 0.0),
        joint_points: Optional[np.ndarray] = None,
        bone_points: Optional[np.ndarray] = None,
        joint_scale: float = JOINT_SCALE,
    ):
        """
        Initializes the HandAssembly.

        Args:
            config: The finger configuration of the hand.
            mirrored: True for the right hand, which reflects the Y axis.
            origin: Position of the hand frame in the world frame.
            joint_points: Optional reference vertices shared by all joints.
            bone_points: Optional reference vertices shared by all bones.
            joint_scale: Uniform scale of the joint geometry.
        """
        self.mirrored = mirrored
        self.origin = np.asarray(origin, dtype=np.float64)
        if self.origin.shape != (3,):
            raise ValueError(f"Expected hand origin of shape (3,), got {self.origin.shape}")
        self.rotation = mirror_matrix(mirrored)

        self.chains: List[LinkChain] = [
            LinkChain.from_config(
                finger,
                joint_points=joint_points,
                bone_points=bone_points,
                joint_scale=joint_scale,
            )
            for finger in config.fingers
        ]

        self.piece_offsets: Dict[str, int] = {}
        offset = 0
        for chain in self.chains:
            self.piece_offsets[chain.name] = offset
            offset += chain.num_pieces
        self.num_pieces = offset

        logger.info(
            f"Hand assembled with fingers {[c.name for c in self.chains]} "
            f"({self.num_pieces} pieces, mirrored={mirrored})"
        )

    def chain(self, name: str) -> LinkChain:
        """Retrieves a finger chain by its name."""
        for chain in self.chains:
            if chain.name == name:
                return chain
        raise KeyError(f"Unknown finger: {name}")

    def update(self, frame_rotations: np.ndarray) -> List[np.ndarray]:
        """
        Updates all fingers and returns the world geometry of the hand.

        Args:
            frame_rotations: Array of shape (num_frames, 3) as produced by
                             `AngleMapper.map`.

        Returns:
            List[np.ndarray]: One (K, 3) vertex array per piece, fingers in
            registration order and pieces in chain order.
        """
        frame_rotations = np.asarray(frame_rotations, dtype=np.float64)
        if frame_rotations.ndim != 2 or frame_rotations.shape[1] != 3:
            raise FrameIndexError(
                f"Expected frame rotations of shape (num_frames, 3), "
                f"got {frame_rotations.shape}"
            )

        vertex_data = []
        for chain in self.chains:
            num_frames = frame_rotations.shape[0]
            missing = [f for f in chain.frame_ids if not 0 <= f < num_frames]
            if missing:
                raise FrameIndexError(
                    f"Finger '{chain.name}' needs frames {missing}, but only "
                    f"{num_frames} frame rotations were given"
                )

            _, chain_vertices = chain.update(frame_rotations[chain.frame_ids])

            vertex_data.append(
                [
                    mirror_and_translate(vertices, self.rotation, self.origin)
                    for vertices in chain_vertices
                ]
            )

        return concatenate_pieces(vertex_data)

    def fingertip_positions(self) -> Dict[str, np.ndarray]:
        """World position of each fingertip for the last update."""
        return {
            chain.name: mirror_and_translate(
                chain.tip_position[None, :], self.rotation, self.origin
            )[0]
            for chain in self.chains
        }
