"""Oriented bounding boxes for 3D point clouds."""

from .config import AppConfig, FitConfig, OutputConfig
from .core.messages.obb import OrientedBoundingBox
from .core.messages.quaternion import Quaternion
from .core.messages.vector_3d import Vector3D
from .geometry import DegeneratePointCloudError, InvalidPointCloudError, fit_oriented_bounding_box

__all__ = [
    "AppConfig",
    "DegeneratePointCloudError",
    "FitConfig",
    "InvalidPointCloudError",
    "OrientedBoundingBox",
    "OutputConfig",
    "Quaternion",
    "Vector3D",
    "fit_oriented_bounding_box",
]
