"""Principal-axis fitting of oriented bounding boxes."""

from .errors import DegeneratePointCloudError, InvalidPointCloudError
from .fit import fit_oriented_bounding_box
from .pca import (
    as_point_array,
    compute_centroid,
    compute_covariance_normalized,
    covariance_rank,
    principal_axes,
)

__all__ = [
    "DegeneratePointCloudError",
    "InvalidPointCloudError",
    "as_point_array",
    "compute_centroid",
    "compute_covariance_normalized",
    "covariance_rank",
    "fit_oriented_bounding_box",
    "principal_axes",
]
