from .coordinates import (
    compose_chain,
    euler_to_rotation,
    from_homogeneous,
    joint_transform,
    mirror_and_translate,
    mirror_matrix,
    pose_transform,
    rotation_transform,
    to_homogeneous,
    transform_points,
    translation_transform,
)

__all__ = [
    "compose_chain",
    "euler_to_rotation",
    "from_homogeneous",
    "joint_transform",
    "mirror_and_translate",
    "mirror_matrix",
    "pose_transform",
    "rotation_transform",
    "to_homogeneous",
    "transform_points",
    "translation_transform",
]
