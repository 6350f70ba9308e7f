"""Transform class for placing shapes inside a group."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.transform import Rotation


def axis_angle_rotation(axis_angle) -> Rotation:
    """Build a rotation from an ``(ax, ay, az, angle)`` sequence.

    A zero-length axis yields the identity rotation.
    """
    values = np.asarray(axis_angle, dtype=np.float64)
    axis = values[:3]
    length = np.linalg.norm(axis)
    if length < 1e-12:
        return Rotation.identity()
    return Rotation.from_rotvec(axis / length * values[3])


@dataclass
class Transform:
    """Represents a 3D transformation with translation, rotation, and scale.

    Rotation is stored in axis-angle form ``(ax, ay, az, angle)`` with the
    angle in radians.
    """

    translation: NDArray[np.float64] = field(
        default_factory=lambda: np.zeros(3, dtype=np.float64)
    )
    rotation: NDArray[np.float64] = field(
        default_factory=lambda: np.array([0.0, 0.0, 1.0, 0.0])
    )
    scale: NDArray[np.float64] = field(
        default_factory=lambda: np.ones(3, dtype=np.float64)
    )

    def __post_init__(self) -> None:
        self.translation = np.asarray(self.translation, dtype=np.float64)
        self.rotation = np.asarray(self.rotation, dtype=np.float64)
        self.scale = np.asarray(self.scale, dtype=np.float64)

    def to_matrix(self) -> NDArray[np.float64]:
        """Convert to a 4x4 transformation matrix.

        Order: Scale -> Rotate -> Translate
        """
        matrix = np.eye(4, dtype=np.float64)
        matrix[:3, :3] = axis_angle_rotation(self.rotation).as_matrix() @ np.diag(
            self.scale
        )
        matrix[:3, 3] = self.translation
        return matrix

    @staticmethod
    def identity() -> Transform:
        """Create an identity transform."""
        return Transform()
