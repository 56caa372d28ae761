import numpy as np
from pydantic import BaseModel, ConfigDict


class Vector3D(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, values: np.ndarray) -> "Vector3D":
        return cls(x=float(values[0]), y=float(values[1]), z=float(values[2]))
