from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from exohand.constants import JOINT_SCALE
from exohand.geometry import (
    GeometryPiece,
    bone_reference_points,
    joint_reference_points,
)
from exohand.schema import ConfigurationError, FingerConfig, FrameIndexError
from exohand.transforms.coordinates import (
    compose_chain,
    joint_transform,
    pose_transform,
    rotation_transform,
)

logger = logging.getLogger(__name__)


@dataclass
class LinkPose:
    """Position and [roll, pitch, yaw] orientation of one chain entry."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    euler: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=np.float64)
        self.euler = np.asarray(self.euler, dtype=np.float64)

    def copy(self) -> "LinkPose":
        return LinkPose(position=self.position.copy(), euler=self.euler.copy())


class LinkChain:
    """
    Forward kinematics of a finger made of N links.

    The chain state holds N + 1 poses. Pose 0 is the fixed root of the finger
    in the hand frame. Pose i (i >= 1) sits at the distal end of link i - 1:
    its position is ``(lengths[i - 1], 0, 0)`` and its Euler angles are the
    rotation of the joint that drives that link.

    Every link owns two geometry pieces, a joint and a bone, which are drawn
    in the proximal frame of the link.
    """

    def __init__(
        self,
        name: str,
        lengths: Sequence[float],
        frame_ids: Sequence[int],
        origin: Optional[LinkPose] = None,
        joint_points: Optional[np.ndarray] = None,
        bone_points: Optional[np.ndarray] = None,
        joint_scale: float = JOINT_SCALE,
    ):
        """
        Initializes the LinkChain.

        Args:
            name: Name of the finger.
            lengths: Link lengths, proximal to distal.
            frame_ids: The hand frame driving each link, one per length.
            origin: Root pose of the finger. Defaults to the identity pose.
            joint_points: Reference vertices of a joint, shape (K, 3).
            bone_points: Reference vertices of a bone spanning x in [0, 1].
            joint_scale: Uniform scale of the joint geometry.
        """
        self.name = name
        self.lengths = np.asarray(lengths, dtype=np.float64)
        self.frame_ids = [int(frame_id) for frame_id in frame_ids]
        self.origin = origin.copy() if origin is not None else LinkPose()

        if self.lengths.ndim != 1 or self.lengths.size == 0:
            raise ConfigurationError(f"Chain '{name}': at least one link length required")
        if not np.all(np.isfinite(self.lengths)) or np.any(self.lengths <= 0):
            raise ConfigurationError(
                f"Chain '{name}': link lengths must be positive, got {list(lengths)}"
            )
        if len(self.frame_ids) != self.lengths.size:
            raise ConfigurationError(
                f"Chain '{name}': {self.lengths.size} links but "
                f"{len(self.frame_ids)} frame ids"
            )
        if self.origin.position.shape != (3,) or self.origin.euler.shape != (3,):
            raise ConfigurationError(f"Chain '{name}': origin must be two 3-vectors")

        self.pieces = self._build_pieces(
            joint_points if joint_points is not None else joint_reference_points(),
            bone_points if bone_points is not None else bone_reference_points(),
            joint_scale,
        )
        self._state = self._initial_state()

        # Compute the rest pose so the accessors are valid before the first tick
        self._local_transforms = np.tile(np.eye(4), (self.num_links + 1, 1, 1))
        self._global_transforms = self._local_transforms.copy()
        self._vertices: List[np.ndarray] = []
        self.update(np.zeros((self.num_links, 3)))

    @classmethod
    def from_config(
        cls,
        config: FingerConfig,
        joint_points: Optional[np.ndarray] = None,
        bone_points: Optional[np.ndarray] = None,
        joint_scale: float = JOINT_SCALE,
    ) -> "LinkChain":
        """Factory method to create a LinkChain from a finger configuration."""
        origin = LinkPose(
            position=np.array(config.origin_position, dtype=np.float64),
            euler=np.array(config.origin_euler, dtype=np.float64),
        )
        return cls(
            config.name,
            config.lengths,
            config.frames,
            origin=origin,
            joint_points=joint_points,
            bone_points=bone_points,
            joint_scale=joint_scale,
        )

    def _build_pieces(
        self, joint_points: np.ndarray, bone_points: np.ndarray, joint_scale: float
    ) -> List[GeometryPiece]:
        pieces = []
        for k, length in enumerate(self.lengths):
            pieces.append(GeometryPiece(joint_points, joint_scale, k, kind="joint"))
            pieces.append(GeometryPiece(bone_points, float(length), k, kind="bone"))
        return pieces

    def _initial_state(self) -> List[LinkPose]:
        state = [self.origin.copy()]
        for length in self.lengths:
            state.append(LinkPose(position=np.array([length, 0.0, 0.0])))
        return state

    @property
    def num_links(self) -> int:
        return int(self.lengths.size)

    @property
    def num_pieces(self) -> int:
        return len(self.pieces)

    @property
    def state(self) -> List[LinkPose]:
        """A copy of the current chain state, origin first."""
        return [pose.copy() for pose in self._state]

    @property
    def local_transforms(self) -> np.ndarray:
        return self._local_transforms.copy()

    @property
    def global_transforms(self) -> np.ndarray:
        return self._global_transforms.copy()

    @property
    def vertices(self) -> List[np.ndarray]:
        return [v.copy() for v in self._vertices]

    @property
    def tip_position(self) -> np.ndarray:
        """Position of the distal end of the last link in the hand frame."""
        return self._global_transforms[-1, :3, 3].copy()

    def update(self, rotations: np.ndarray) -> Tuple[np.ndarray, List[np.ndarray]]:
        """
        Runs the forward kinematics for one set of joint rotations.

        Args:
            rotations: Array of shape (N, 3), the [roll, pitch, yaw] of the joint
                       driving each link, proximal to distal.

        Returns:
            A tuple containing:
            - The global transforms, shape (N + 1, 4, 4), origin first.
            - The transformed vertices of every piece, ordered
              [joint_0, bone_0, joint_1, bone_1, ...].
        """
        rotations = np.asarray(rotations, dtype=np.float64)
        if rotations.shape != (self.num_links, 3):
            raise FrameIndexError(
                f"Chain '{self.name}' expects rotations of shape "
                f"({self.num_links}, 3), got {rotations.shape}"
            )

        for i in range(1, self.num_links + 1):
            self._state[i].euler = rotations[i - 1].copy()

        # Local transformation, each pose relative to its parent
        local_transforms = np.empty((self.num_links + 1, 4, 4))
        for i, pose in enumerate(self._state):
            if i == 0:
                local_transforms[i] = pose_transform(pose.position, pose.euler)
            else:
                local_transforms[i] = joint_transform(pose.euler, pose.position)

        # Global transformation, compounded proximal to distal
        global_transforms = compose_chain(local_transforms)

        vertices = []
        for piece in self.pieces:
            k = piece.link_index
            proximal = global_transforms[k] @ rotation_transform(self._state[k + 1].euler)
            vertices.append(piece.transform(proximal))

        self._local_transforms = local_transforms
        self._global_transforms = global_transforms
        self._vertices = vertices

        return global_transforms.copy(), [v.copy() for v in vertices]

    def __repr__(self) -> str:
        return f"LinkChain(name={self.name!r}, links={self.num_links})"
