"""Quaternion message model with rotation-matrix conversion.

Components are stored scalar-first in the wire order (w, x, y, z). Matrix
conversion is delegated to ``scipy.spatial.transform.Rotation``, which uses
the scalar-last (x, y, z, w) convention internally.
"""

import math

import numpy as np
from pydantic import BaseModel, ConfigDict
from scipy.spatial.transform import Rotation

UNIT_TOLERANCE = 1e-5


class Quaternion(BaseModel):
    model_config = ConfigDict(frozen=True)

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def norm(self) -> float:
        return math.sqrt(self.w**2 + self.x**2 + self.y**2 + self.z**2)

    def is_unit(self, tolerance: float = UNIT_TOLERANCE) -> bool:
        """Return True if the quaternion represents a valid rotation."""
        return abs(self.norm() - 1.0) <= tolerance

    def normalized(self) -> "Quaternion":
        """Return a unit-length copy.

        Raises:
            ValueError: If the quaternion has zero length
        """
        n = self.norm()
        if n == 0.0:
            raise ValueError("Cannot normalize a zero-length quaternion")
        return Quaternion(w=self.w / n, x=self.x / n, y=self.y / n, z=self.z / n)

    def to_matrix(self) -> np.ndarray:
        """Convert to a 3x3 rotation matrix.

        scipy normalizes the input, so a non-unit quaternion yields the
        rotation of its normalized counterpart.
        """
        return Rotation.from_quat([self.x, self.y, self.z, self.w]).as_matrix()

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> "Quaternion":
        """Convert a proper rotation matrix (det = +1) to a unit quaternion."""
        x, y, z, w = Rotation.from_matrix(np.asarray(matrix, dtype=np.float64)).as_quat()
        return cls(w=float(w), x=float(x), y=float(y), z=float(z))
