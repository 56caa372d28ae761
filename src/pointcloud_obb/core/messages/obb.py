"""Oriented bounding box value type and its fixed-layout serialization.

A box is serialized as exactly ten floats, in the order declared by
``ObbField``::

    [tx, ty, tz, qw, qx, qy, qz, width, height, depth]

The quaternion is scalar-first. There is no header, length prefix or version;
consumers must know the layout out-of-band. Several boxes are serialized by
concatenating their ten-value blocks.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, cast

import msgpack
import numpy as np
from pydantic import BaseModel, ConfigDict

from ..constants import SERIALIZED_LENGTH, SKIP_VALIDATION, ObbField
from .float_frame import FramePrecision, pack_floats, unpack_floats
from .quaternion import Quaternion
from .vector_3d import Vector3D

if TYPE_CHECKING:
    from ...config import FitConfig

# local-frame corner signs, x varies slowest
_CORNER_SIGNS = np.array(
    [[sx, sy, sz] for sx in (-1, 1) for sy in (-1, 1) for sz in (-1, 1)], dtype=np.float64
)


class OrientedBoundingBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    translation: Vector3D = Vector3D()  # world-frame box center
    rotation: Quaternion = Quaternion()  # world-frame orientation of the local axes
    width: float = 0.0  # extent along local x
    height: float = 0.0  # extent along local y
    depth: float = 0.0  # extent along local z

    @classmethod
    def from_point_cloud(
        cls, cloud: Any, config: "FitConfig | None" = None
    ) -> "OrientedBoundingBox":
        """Fit a box around a point cloud along its principal axes."""
        from ...geometry.fit import fit_oriented_bounding_box

        return fit_oriented_bounding_box(cloud, config)

    @property
    def extents(self) -> tuple[float, float, float]:
        return (self.width, self.height, self.depth)

    @property
    def volume(self) -> float:
        return self.width * self.height * self.depth

    def rotation_matrix(self) -> np.ndarray:
        """3x3 matrix whose columns are the box axes in the world frame."""
        return self.rotation.to_matrix()

    def to_local(self, points: np.ndarray) -> np.ndarray:
        """
        Express world-frame points in the box frame.

        The box frame is centered on ``translation`` with the box axes as
        basis, so the box spans ``[-extent / 2, extent / 2]`` on each axis.

        Args:
            points: Array of shape (N, 3)

        Returns:
            Array of shape (N, 3)
        """
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        return (points - self.translation.to_array()) @ self.rotation_matrix()

    def corners(self) -> np.ndarray:
        """The 8 box corners in the world frame, shape (8, 3)."""
        half = 0.5 * np.array(self.extents, dtype=np.float64)
        local = _CORNER_SIGNS * half
        return local @ self.rotation_matrix().T + self.translation.to_array()

    def contains(self, points: np.ndarray, tolerance: float = 1e-6) -> bool:
        """Return True if every point lies inside the box, up to ``tolerance``."""
        half = 0.5 * np.array(self.extents, dtype=np.float64)
        local = self.to_local(points)
        return bool(np.all(np.abs(local) <= half + tolerance))

    def serialize(self, target: list[float] | None = None) -> list[float]:
        """
        Append the ten-value serialization of this box to ``target``.

        Args:
            target: List to append to; a new list is created when omitted

        Returns:
            ``target`` with ``[tx, ty, tz, qw, qx, qy, qz, width, height, depth]``
            appended.

        Example:
            >>> box = OrientedBoundingBox(width=4.0, height=5.0, depth=6.0)
            >>> box.serialize()
            [0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 4.0, 5.0, 6.0]
        """
        if target is None:
            target = []

        values = {
            ObbField.TX: self.translation.x,
            ObbField.TY: self.translation.y,
            ObbField.TZ: self.translation.z,
            ObbField.QW: self.rotation.w,
            ObbField.QX: self.rotation.x,
            ObbField.QY: self.rotation.y,
            ObbField.QZ: self.rotation.z,
            ObbField.WIDTH: self.width,
            ObbField.HEIGHT: self.height,
            ObbField.DEPTH: self.depth,
        }
        target.extend(float(values[field]) for field in ObbField)
        return target

    @classmethod
    def deserialize(cls, source: Sequence[float], offset: int = 0) -> "OrientedBoundingBox":
        """
        Rebuild a box from ten values starting at ``offset``.

        The quaternion is taken as-is and is not normalized; use
        ``rotation.is_unit()`` to check it.

        Raises:
            ValueError: If fewer than ten values are available from ``offset``
        """
        return cls(**_fields_from_values(source, offset))

    @staticmethod
    def serialize_many(boxes: Sequence["OrientedBoundingBox"]) -> list[float]:
        """Concatenate the serializations of several boxes."""
        target: list[float] = []
        for box in boxes:
            box.serialize(target)
        return target

    @classmethod
    def deserialize_many(cls, source: Sequence[float]) -> list["OrientedBoundingBox"]:
        """
        Split a flat buffer of concatenated boxes.

        Raises:
            ValueError: If the buffer length is not a multiple of ten
        """
        if len(source) % SERIALIZED_LENGTH != 0:
            raise ValueError(
                f"Expected a multiple of {SERIALIZED_LENGTH} values, got {len(source)}"
            )
        offsets = range(0, len(source), SERIALIZED_LENGTH)
        return [cls.deserialize(source, offset) for offset in offsets]

    def to_bytes(self) -> bytes:
        return cast(bytes, msgpack.packb(self.serialize()))

    @classmethod
    def from_bytes(cls, data: bytes) -> "OrientedBoundingBox":
        values = msgpack.unpackb(data)
        if not isinstance(values, list):
            raise ValueError(
                f"Expected a list of {SERIALIZED_LENGTH} floats, got {type(values).__name__}"
            )
        if SKIP_VALIDATION:
            fields = _fields_from_values(values, 0)
            return cls.model_construct(
                translation=Vector3D.model_construct(**fields["translation"]),
                rotation=Quaternion.model_construct(**fields["rotation"]),
                width=fields["width"],
                height=fields["height"],
                depth=fields["depth"],
            )
        return cls.deserialize(values)

    def to_frame(self, precision: FramePrecision = "single") -> bytes:
        """Pack the serialization into a raw IEEE-754 frame."""
        return pack_floats(self.serialize(), precision)

    @classmethod
    def from_frame(cls, data: bytes, precision: FramePrecision = "single") -> "OrientedBoundingBox":
        """
        Rebuild a box from a raw IEEE-754 frame.

        Raises:
            ValueError: If the frame does not hold exactly ten values
        """
        values = unpack_floats(data, precision)
        if len(values) != SERIALIZED_LENGTH:
            raise ValueError(f"Expected {SERIALIZED_LENGTH} values in frame, got {len(values)}")
        return cls.deserialize(values)


def _fields_from_values(source: Sequence[float], offset: int) -> dict[str, Any]:
    available = len(source) - offset
    if offset < 0 or available < SERIALIZED_LENGTH:
        raise ValueError(
            f"Expected {SERIALIZED_LENGTH} values from offset {offset}, got {max(available, 0)}"
        )

    values = {
        field: float(value)
        for field, value in zip(ObbField, source[offset : offset + SERIALIZED_LENGTH])
    }
    return {
        "translation": {
            "x": values[ObbField.TX],
            "y": values[ObbField.TY],
            "z": values[ObbField.TZ],
        },
        "rotation": {
            "w": values[ObbField.QW],
            "x": values[ObbField.QX],
            "y": values[ObbField.QY],
            "z": values[ObbField.QZ],
        },
        "width": values[ObbField.WIDTH],
        "height": values[ObbField.HEIGHT],
        "depth": values[ObbField.DEPTH],
    }
