"""
Reference geometry for the joints and bones of the hand model.

The renderer owns the real meshes; the kinematic model only needs their
vertices. The primitives below are sized so that, after scaling, a joint is
a small sphere and a bone spans exactly one link length along +X.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from jaxtyping import Float

from exohand.transforms.coordinates import to_homogeneous, transform_points


def joint_reference_points(
    n_lat: int = 6, n_lon: int = 8, radius: float = 0.2
) -> Float[np.ndarray, "K 3"]:  # noqa: F722
    """
    Vertices of a UV sphere centered at the origin.

    Args:
        n_lat: Number of latitude bands.
        n_lon: Number of longitude segments.
        radius: Sphere radius before scaling.

    Returns:
        np.ndarray: Array of shape (2 + (n_lat - 1) * n_lon, 3).
    """
    if n_lat < 2 or n_lon < 3:
        raise ValueError(f"Sphere needs n_lat >= 2 and n_lon >= 3, got {n_lat}, {n_lon}")

    theta = np.linspace(0.0, np.pi, n_lat + 1)[1:-1]
    phi = np.linspace(0.0, 2.0 * np.pi, n_lon, endpoint=False)
    theta_grid, phi_grid = np.meshgrid(theta, phi, indexing="ij")

    ring = np.stack(
        [
            np.sin(theta_grid) * np.cos(phi_grid),
            np.sin(theta_grid) * np.sin(phi_grid),
            np.cos(theta_grid),
        ],
        axis=-1,
    ).reshape(-1, 3)
    poles = np.array([[0.0, 0.0, 1.0], [0.0, 0.0, -1.0]])

    return radius * np.vstack([poles[:1], ring, poles[1:]])


def bone_reference_points(
    n_sides: int = 6, radius: float = 0.1
) -> Float[np.ndarray, "K 3"]:  # noqa: F722
    """
    Vertices of a prism running along +X from x=0 to x=1.

    The two axis end points are included, so a bone scaled by a link length
    ``L`` has its tip exactly at ``(L, 0, 0)`` in its own frame.
    """
    if n_sides < 3:
        raise ValueError(f"Prism needs at least 3 sides, got {n_sides}")

    angles = np.linspace(0.0, 2.0 * np.pi, n_sides, endpoint=False)
    circle = np.stack(
        [np.zeros(n_sides), radius * np.cos(angles), radius * np.sin(angles)], axis=-1
    )
    far_circle = circle + np.array([1.0, 0.0, 0.0])
    ends = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]])

    return np.vstack([ends[:1], circle, far_circle, ends[1:]])


@dataclass
class GeometryPiece:
    """A set of reference points owned by one link of a chain."""

    points: np.ndarray
    scale: float
    link_index: int
    kind: str = "joint"
    homogeneous: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        points = np.asarray(self.points, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] != 3:
            raise ValueError(f"Expected points of shape (K, 3), got {points.shape}")

        self.points = points
        # Scaled once, the per-tick update only applies rigid transforms
        self.homogeneous = to_homogeneous(self.scale * points)

    def transform(
        self, transform_matrix: Float[np.ndarray, "4 4"]  # noqa: F722
    ) -> Float[np.ndarray, "K 3"]:  # noqa: F722
        return transform_points(self.homogeneous, transform_matrix)

    @property
    def num_points(self) -> int:
        return self.points.shape[0]
