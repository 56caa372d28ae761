"""Oriented bounding box fitting via principal component analysis.

The box axes are the principal axes of the cloud's covariance. Points are
moved into that frame to measure the exact per-axis min/max, and the box
center is then placed back in the world frame. The result is tight along the
axes found, but it is not the minimal-volume box in general.
"""

import logging
from typing import Any

import numpy as np

from ..config import FitConfig
from ..core.messages.obb import OrientedBoundingBox
from ..core.messages.quaternion import Quaternion
from ..core.messages.vector_3d import Vector3D
from .errors import DegeneratePointCloudError
from .pca import (
    as_point_array,
    compute_centroid,
    compute_covariance_normalized,
    covariance_rank,
    principal_axes,
)

logger = logging.getLogger(__name__)


def fit_oriented_bounding_box(cloud: Any, config: FitConfig | None = None) -> OrientedBoundingBox:
    """
    Fit an oriented bounding box around a point cloud.

    Args:
        cloud: (N, >=3) array or iterable of points, see ``as_point_array``
        config: Fitting options; defaults to ``FitConfig()``

    Returns:
        Box whose local axes are the principal axes of the cloud and whose
        extents are the exact ranges of the points along those axes.

    Raises:
        InvalidPointCloudError: If the cloud is empty or malformed
        DegeneratePointCloudError: If ``config.strict`` is set and the
            covariance is rank deficient

    Example:
        >>> corners = [(x, y, z) for x in (-0.5, 0.5) for y in (-0.5, 0.5) for z in (-0.5, 0.5)]
        >>> box = fit_oriented_bounding_box(corners)
        >>> round(box.width, 6), round(box.height, 6), round(box.depth, 6)
        (1.0, 1.0, 1.0)
    """
    if config is None:
        config = FitConfig()

    dtype = np.float32 if config.precision == "float32" else np.float64
    points = as_point_array(cloud, dtype=dtype, drop_non_finite=config.drop_non_finite)

    centroid = compute_centroid(points)
    covariance = compute_covariance_normalized(points, centroid)
    eigenvalues, axes = principal_axes(covariance)

    rank = covariance_rank(eigenvalues, config.rank_tolerance)
    if rank < 3:
        values = tuple(float(v) for v in eigenvalues)
        if config.strict:
            raise DegeneratePointCloudError(rank, values)
        logger.warning(
            f"Covariance of {points.shape[0]} points has rank {rank} < 3 "
            f"(eigenvalues {values}); box axes are not unique"
        )

    # world -> principal frame
    world_to_local = axes.T
    offset = -(world_to_local @ centroid)
    local = points @ world_to_local.T + offset

    min_pt = local.min(axis=0)
    max_pt = local.max(axis=0)
    mean_diag = 0.5 * (max_pt + min_pt)
    width, height, depth = (float(v) for v in max_pt - min_pt)

    # final transform
    center = axes @ mean_diag + centroid

    logger.debug(
        f"Fitted OBB to {points.shape[0]} points: center={center.tolist()}, "
        f"extents=({width}, {height}, {depth})"
    )

    return OrientedBoundingBox(
        translation=Vector3D.from_array(center),
        rotation=Quaternion.from_matrix(axes),
        width=width,
        height=height,
        depth=depth,
    )
