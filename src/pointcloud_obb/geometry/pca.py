"""
Principal component helpers for point clouds.

Centroid, normalized covariance and principal axes of a set of 3D points.
The eigendecomposition uses ``numpy.linalg.eigh``, which targets symmetric
matrices and returns real eigenvalues in ascending order.
"""

import logging
from collections.abc import Iterable
from typing import Any

import numpy as np

from .errors import InvalidPointCloudError

logger = logging.getLogger(__name__)


def as_point_array(
    cloud: Any, dtype: type = np.float64, drop_non_finite: bool = True
) -> np.ndarray:
    """
    Read a point cloud into an ``(N, 3)`` array of positions.

    Accepts a numpy array of shape (N, >=3), where columns past the third
    (colour, intensity, ...) are ignored, or an iterable of point models
    (anything with x/y/z attributes) or of ``(x, y, z, ...)`` sequences.

    Args:
        cloud: Input points
        dtype: Floating-point type of the returned array
        drop_non_finite: Skip points with a NaN or infinite coordinate

    Returns:
        A new array; the input is never referenced by the result.

    Raises:
        InvalidPointCloudError: If the input is not a 2D collection of at least
            3 columns, or no points remain.
    """
    if isinstance(cloud, np.ndarray):
        raw = cloud
    else:
        raw = np.array([_position(p) for p in _iterate(cloud)])

    if raw.ndim != 2 or raw.shape[1] < 3:
        raise InvalidPointCloudError(f"Expected points of shape (N, >=3), got {raw.shape}")

    points = np.array(raw[:, :3], dtype=dtype)

    if drop_non_finite:
        finite = np.isfinite(points).all(axis=1)
        dropped = int(points.shape[0] - finite.sum())
        if dropped:
            logger.debug(f"Dropping {dropped} non-finite points out of {points.shape[0]}")
            points = points[finite]

    if points.shape[0] == 0:
        raise InvalidPointCloudError("Point cloud is empty")

    return points


def _iterate(cloud: Any) -> Iterable[Any]:
    if not isinstance(cloud, Iterable):
        raise InvalidPointCloudError(f"Point cloud must be iterable, got {type(cloud).__name__}")
    return cloud


def _position(point: Any) -> tuple[float, float, float]:
    if hasattr(point, "z"):
        return (point.x, point.y, point.z)
    try:
        x, y, z = point[0], point[1], point[2]
    except (IndexError, TypeError) as e:
        raise InvalidPointCloudError(f"Point {point!r} has no 3D position") from e
    return (x, y, z)


def compute_centroid(points: np.ndarray) -> np.ndarray:
    """Arithmetic mean position of the points, shape (3,)."""
    return points.mean(axis=0)


def compute_covariance_normalized(points: np.ndarray, centroid: np.ndarray) -> np.ndarray:
    """
    Covariance of the points about ``centroid``, divided by the point count.

    Dividing by N (not N - 1) keeps the scale independent of cloud density.
    """
    demeaned = points - centroid
    return (demeaned.T @ demeaned) / points.shape[0]


def principal_axes(covariance: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Principal axes of a covariance matrix as a right-handed orthonormal basis.

    The third eigenvector is replaced by the cross product of the first two so
    that the returned matrix is a proper rotation (det = +1), never a
    reflection.

    Returns:
        Tuple of (eigenvalues, axes): eigenvalues ascending, shape (3,);
        axes has the matching eigenvectors as columns, shape (3, 3).
    """
    eigenvalues, eigenvectors = np.linalg.eigh(covariance)
    axes = eigenvectors.copy()
    axes[:, 2] = np.cross(axes[:, 0], axes[:, 1])
    return eigenvalues, axes


def covariance_rank(eigenvalues: np.ndarray, tolerance: float) -> int:
    """
    Numerical rank of a covariance matrix from its eigenvalues.

    An eigenvalue counts when it exceeds ``tolerance`` times the largest one.
    Collinear clouds have rank 1, coplanar clouds rank 2, a single repeated
    point rank 0.
    """
    largest = float(np.max(eigenvalues))
    if largest <= 0.0:
        return 0
    return int(np.count_nonzero(eigenvalues > tolerance * largest))
