"""Tests for OrientedBoundingBox construction, accessors and serialization."""

import msgpack
import numpy as np
import pytest
from pydantic import ValidationError
from scipy.spatial.transform import Rotation

import pointcloud_obb.core.messages.obb as obb_module
from pointcloud_obb.core.messages.float_frame import pack_floats
from pointcloud_obb.core.messages.obb import OrientedBoundingBox
from pointcloud_obb.core.messages.quaternion import Quaternion
from pointcloud_obb.core.messages.vector_3d import Vector3D


def _make_box() -> OrientedBoundingBox:
    """Create a sample box with a non-trivial pose."""
    return OrientedBoundingBox(
        translation=Vector3D(x=1.0, y=2.0, z=3.0),
        rotation=Quaternion(w=0.707, x=0.0, y=0.707, z=0.0),
        width=4.0,
        height=5.0,
        depth=6.0,
    )


def _rotated_box() -> OrientedBoundingBox:
    matrix = Rotation.from_euler("xyz", [20, -40, 75], degrees=True).as_matrix()
    return OrientedBoundingBox(
        translation=Vector3D(x=-0.5, y=0.25, z=10.0),
        rotation=Quaternion.from_matrix(matrix),
        width=0.3,
        height=1.2,
        depth=2.5,
    )


class TestConstruction:
    def test_default_box(self) -> None:
        box = OrientedBoundingBox()
        assert box.translation == Vector3D()
        assert box.rotation == Quaternion(w=1.0)
        assert box.extents == (0.0, 0.0, 0.0)

    def test_explicit_values(self) -> None:
        box = _make_box()
        assert box.translation.y == 2.0
        assert box.rotation.y == 0.707
        assert box.width == 4.0
        assert box.height == 5.0
        assert box.depth == 6.0

    def test_no_range_validation(self) -> None:
        """Extents and quaternion are taken as given."""
        box = OrientedBoundingBox(rotation=Quaternion(w=3.0), width=-1.0)
        assert box.width == -1.0
        assert not box.rotation.is_unit()

    def test_nested_dict_construction(self) -> None:
        box = OrientedBoundingBox(
            translation={"x": 1.0, "y": 0.0, "z": 0.0},  # type: ignore[arg-type]
            rotation={"w": 1.0},  # type: ignore[arg-type]
        )
        assert isinstance(box.translation, Vector3D)
        assert isinstance(box.rotation, Quaternion)

    def test_frozen(self) -> None:
        box = _make_box()
        with pytest.raises(ValidationError):
            box.width = 10.0  # type: ignore[misc]
        with pytest.raises(ValidationError):
            box.translation.x = 10.0  # type: ignore[misc]

    def test_invalid_type_raises(self) -> None:
        with pytest.raises(ValidationError):
            OrientedBoundingBox(width="wide")  # type: ignore[arg-type]


class TestGeometry:
    def test_volume(self) -> None:
        assert _make_box().volume == pytest.approx(120.0)

    def test_rotation_matrix_is_proper(self) -> None:
        r = _rotated_box().rotation_matrix()
        np.testing.assert_allclose(r.T @ r, np.eye(3), atol=1e-12)
        assert np.linalg.det(r) == pytest.approx(1.0)

    def test_axis_aligned_corners(self) -> None:
        box = OrientedBoundingBox(width=2.0, height=4.0, depth=6.0)
        corners = box.corners()
        assert corners.shape == (8, 3)
        np.testing.assert_allclose(corners.min(axis=0), [-1.0, -2.0, -3.0])
        np.testing.assert_allclose(corners.max(axis=0), [1.0, 2.0, 3.0])

    def test_corners_in_local_frame(self) -> None:
        box = _rotated_box()
        local = box.to_local(box.corners())
        half = 0.5 * np.array(box.extents)
        np.testing.assert_allclose(np.abs(local), np.tile(half, (8, 1)), atol=1e-12)

    def test_contains(self) -> None:
        box = _rotated_box()
        assert box.contains(box.corners())
        assert box.contains(box.translation.to_array())
        outside = box.translation.to_array() + box.rotation_matrix()[:, 2] * 2.0
        assert not box.contains(outside)


class TestSerialize:
    def test_field_order(self) -> None:
        assert _make_box().serialize() == [1.0, 2.0, 3.0, 0.707, 0.0, 0.707, 0.0, 4.0, 5.0, 6.0]

    def test_appends_to_target(self) -> None:
        target = [99.0]
        result = _make_box().serialize(target)
        assert result is target
        assert len(target) == 11
        assert target[0] == 99.0
        assert target[1:4] == [1.0, 2.0, 3.0]

    def test_values_are_python_floats(self) -> None:
        assert all(type(v) is float for v in _rotated_box().serialize())


class TestDeserialize:
    def test_roundtrip(self) -> None:
        original = _rotated_box()
        assert OrientedBoundingBox.deserialize(original.serialize()) == original

    def test_field_mapping(self) -> None:
        box = OrientedBoundingBox.deserialize([1, 2, 3, 0.707, 0, 0.707, 0, 4, 5, 6])
        assert box == _make_box()

    def test_too_short_raises(self) -> None:
        with pytest.raises(ValueError, match="Expected 10 values from offset 0, got 9"):
            OrientedBoundingBox.deserialize([0.0] * 9)

    def test_empty_raises(self) -> None:
        with pytest.raises(ValueError, match="got 0"):
            OrientedBoundingBox.deserialize([])

    def test_offset(self) -> None:
        values = [-1.0, -1.0] + _make_box().serialize()
        assert OrientedBoundingBox.deserialize(values, offset=2) == _make_box()

    def test_offset_past_end_raises(self) -> None:
        with pytest.raises(ValueError, match="from offset 5"):
            OrientedBoundingBox.deserialize([0.0] * 12, offset=5)

    def test_negative_offset_raises(self) -> None:
        with pytest.raises(ValueError):
            OrientedBoundingBox.deserialize([0.0] * 10, offset=-1)

    def test_quaternion_not_normalized(self) -> None:
        box = OrientedBoundingBox.deserialize([0, 0, 0, 2, 0, 0, 0, 1, 1, 1])
        assert box.rotation.w == 2.0
        assert not box.rotation.is_unit()

    def test_accepts_numpy_array(self) -> None:
        values = np.array(_make_box().serialize(), dtype=np.float32)
        box = OrientedBoundingBox.deserialize(values)
        assert box.rotation.y == pytest.approx(0.707, rel=1e-6)
        assert isinstance(box.width, float)

    def test_non_numeric_raises(self) -> None:
        with pytest.raises(ValueError):
            OrientedBoundingBox.deserialize(["a"] * 10)  # type: ignore[list-item]


class TestMany:
    def test_roundtrip(self) -> None:
        boxes = [_make_box(), _rotated_box(), OrientedBoundingBox()]
        values = OrientedBoundingBox.serialize_many(boxes)
        assert len(values) == 30
        assert OrientedBoundingBox.deserialize_many(values) == boxes

    def test_empty(self) -> None:
        assert OrientedBoundingBox.serialize_many([]) == []
        assert OrientedBoundingBox.deserialize_many([]) == []

    def test_partial_block_raises(self) -> None:
        with pytest.raises(ValueError, match="multiple of 10 values, got 15"):
            OrientedBoundingBox.deserialize_many([0.0] * 15)


class TestBytes:
    def test_msgpack_format(self) -> None:
        box = _make_box()
        assert msgpack.unpackb(box.to_bytes()) == box.serialize()

    def test_from_bytes_roundtrip(self) -> None:
        original = _rotated_box()
        assert OrientedBoundingBox.from_bytes(original.to_bytes()) == original

    def test_from_bytes_requires_list(self) -> None:
        with pytest.raises(ValueError, match="Expected a list"):
            OrientedBoundingBox.from_bytes(msgpack.packb({"width": 1.0}))

    def test_from_bytes_short_list_raises(self) -> None:
        with pytest.raises(ValueError, match="got 3"):
            OrientedBoundingBox.from_bytes(msgpack.packb([1.0, 2.0, 3.0]))

    def test_skip_validation_uses_model_construct(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(obb_module, "SKIP_VALIDATION", True)
        original = _make_box()
        restored = OrientedBoundingBox.from_bytes(original.to_bytes())
        assert isinstance(restored.translation, Vector3D)
        assert isinstance(restored.rotation, Quaternion)
        assert restored.serialize() == original.serialize()

    def test_skip_validation_still_checks_length(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(obb_module, "SKIP_VALIDATION", True)
        with pytest.raises(ValueError):
            OrientedBoundingBox.from_bytes(msgpack.packb([1.0] * 4))


class TestFrame:
    def test_single_precision_layout(self) -> None:
        data = _make_box().to_frame()
        assert len(data) == 40

    def test_single_precision_roundtrip(self) -> None:
        original = _rotated_box()
        restored = OrientedBoundingBox.from_frame(original.to_frame("single"), "single")
        assert restored.serialize() == pytest.approx(original.serialize(), rel=1e-5, abs=1e-7)

    def test_double_precision_roundtrip_is_exact(self) -> None:
        original = _rotated_box()
        assert OrientedBoundingBox.from_frame(original.to_frame("double"), "double") == original

    def test_wrong_count_raises(self) -> None:
        data = OrientedBoundingBox.serialize_many([_make_box(), _make_box()])
        with pytest.raises(ValueError, match="Expected 10 values in frame, got 20"):
            OrientedBoundingBox.from_frame(pack_floats(data))
