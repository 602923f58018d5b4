"""
Rigid transformation utilities for the kinematic hand model.

Euler angles are stored as ``[roll, pitch, yaw]`` (rotation about x, y and z)
and always follow the post-multiply zyx sequence: rotate ``yaw`` about Z,
then ``pitch`` about Y, then ``roll`` about X, i.e. ``R = Rz @ Ry @ Rx``.
All poses are 4x4 homogeneous matrices that map a point from the local
frame of a body into the frame of its parent.
"""

import numpy as np
from jaxtyping import Float
from scipy.spatial.transform import Rotation


def euler_to_rotation(
    euler: Float[np.ndarray, "3"],  # noqa: F722
) -> Float[np.ndarray, "3 3"]:  # noqa: F722
    """
    Get the rotation matrix for a ``[roll, pitch, yaw]`` Euler vector.

    Intrinsic ``ZYX`` in scipy is exactly ``Rz(yaw) @ Ry(pitch) @ Rx(roll)``.

    Args:
        euler: Array of shape (3,) with angles in radians.

    Returns:
        np.ndarray: 3x3 rotation matrix.
    """
    euler = np.asarray(euler, dtype=np.float64)
    if euler.shape != (3,):
        raise ValueError(f"Expected Euler vector of shape (3,), got {euler.shape}")

    roll, pitch, yaw = euler
    return Rotation.from_euler("ZYX", [yaw, pitch, roll]).as_matrix()


def rotation_transform(
    euler: Float[np.ndarray, "3"],  # noqa: F722
) -> Float[np.ndarray, "4 4"]:  # noqa: F722
    """Pure rotation as a 4x4 homogeneous matrix."""
    transform = np.eye(4)
    transform[:3, :3] = euler_to_rotation(euler)
    return transform


def translation_transform(
    offset: Float[np.ndarray, "3"],  # noqa: F722
) -> Float[np.ndarray, "4 4"]:  # noqa: F722
    """Pure translation as a 4x4 homogeneous matrix."""
    offset = np.asarray(offset, dtype=np.float64)
    if offset.shape != (3,):
        raise ValueError(f"Expected offset of shape (3,), got {offset.shape}")

    transform = np.eye(4)
    transform[:3, 3] = offset
    return transform


def pose_transform(
    position: Float[np.ndarray, "3"],  # noqa: F722
    euler: Float[np.ndarray, "3"],  # noqa: F722
) -> Float[np.ndarray, "4 4"]:  # noqa: F722
    """
    Build the pose ``T(position) @ R(euler)``.

    The position is expressed in the parent frame and the orientation is
    applied about the translated origin. Used for fixed poses such as the
    root of a finger.
    """
    transform = rotation_transform(euler)
    transform[:3, 3] = np.asarray(position, dtype=np.float64)
    return transform


def joint_transform(
    euler: Float[np.ndarray, "3"],  # noqa: F722
    offset: Float[np.ndarray, "3"],  # noqa: F722
) -> Float[np.ndarray, "4 4"]:  # noqa: F722
    """
    Build the revolute link transform ``R(euler) @ T(offset)``.

    The joint rotates about the parent frame first, then the link extends by
    ``offset`` along the rotated axes. A link of length ``L`` yawed by 90
    degrees therefore ends at ``(0, L, 0)``.
    """
    return rotation_transform(euler) @ translation_transform(offset)


def compose_chain(
    local_transforms: Float[np.ndarray, "N 4 4"],  # noqa: F722
) -> Float[np.ndarray, "N 4 4"]:  # noqa: F722
    """
    Compound local transforms proximal to distal.

    ``global[0] = local[0]`` and ``global[i] = global[i - 1] @ local[i]``.

    Args:
        local_transforms: Array of shape (N, 4, 4).

    Returns:
        np.ndarray: Array of shape (N, 4, 4) with the cumulative transforms.
    """
    if local_transforms.ndim != 3 or local_transforms.shape[1:] != (4, 4):
        raise ValueError(
            f"Expected transforms of shape (N, 4, 4), got {local_transforms.shape}"
        )

    global_transforms = np.zeros_like(local_transforms)
    for i in range(local_transforms.shape[0]):
        if i == 0:
            global_transforms[i] = local_transforms[i]
        else:
            global_transforms[i] = global_transforms[i - 1] @ local_transforms[i]

    return global_transforms


def to_homogeneous(
    points: Float[np.ndarray, "K 3"],  # noqa: F722
) -> Float[np.ndarray, "K 4"]:  # noqa: F722
    """Append a column of ones to a (K, 3) point array."""
    points = np.asarray(points, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"Expected points of shape (K, 3), got {points.shape}")

    return np.hstack([points, np.ones((points.shape[0], 1))])


def from_homogeneous(
    points: Float[np.ndarray, "K 4"],  # noqa: F722
) -> Float[np.ndarray, "K 3"]:  # noqa: F722
    """Divide by the last component and drop it."""
    points = np.asarray(points, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 4:
        raise ValueError(f"Expected points of shape (K, 4), got {points.shape}")

    return points[:, :3] / points[:, 3:]


def transform_points(
    homogeneous_points: Float[np.ndarray, "K 4"],  # noqa: F722
    transform_matrix: Float[np.ndarray, "4 4"],  # noqa: F722
) -> Float[np.ndarray, "K 3"]:  # noqa: F722
    """
    Apply a 4x4 transform to homogeneous points and return them in 3D.

    Args:
        homogeneous_points: Array of shape (K, 4).
        transform_matrix: 4x4 homogeneous transform.

    Returns:
        np.ndarray: Array of shape (K, 3).
    """
    if transform_matrix.shape != (4, 4):
        raise ValueError(
            f"Expected 4x4 transform matrix, got shape {transform_matrix.shape}"
        )

    # Equivalent to (T @ P.T).T for a (K, 4) point matrix P
    return from_homogeneous(homogeneous_points @ transform_matrix.T)


def mirror_matrix(mirrored: bool) -> Float[np.ndarray, "3 3"]:  # noqa: F722
    """
    Handedness matrix of a hand.

    Returns the identity for a left hand and ``diag(1, -1, 1)`` for a right
    hand, which reflects the Y axis about the hand's own origin.
    """
    matrix = np.eye(3)
    if mirrored:
        matrix[1, 1] = -1.0
    return matrix


def mirror_and_translate(
    points: Float[np.ndarray, "K 3"],  # noqa: F722
    mirror: Float[np.ndarray, "3 3"],  # noqa: F722
    origin: Float[np.ndarray, "3"],  # noqa: F722
) -> Float[np.ndarray, "K 3"]:  # noqa: F722
    """
    Place hand-local points in the world: mirror first, then translate.

    The order matters; mirroring is defined about the hand origin, not the
    world origin.
    """
    return points @ mirror.T + origin
