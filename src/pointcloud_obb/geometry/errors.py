"""Exceptions raised by the fitting functions."""


class InvalidPointCloudError(ValueError):
    """The input cannot be read as a non-empty collection of 3D points."""


class DegeneratePointCloudError(ValueError):
    """The covariance of the cloud is rank deficient, so its principal axes are not unique.

    Only raised when strict fitting is requested; otherwise the condition is
    logged and a box is still produced.
    """

    def __init__(self, rank: int, eigenvalues: tuple[float, ...]) -> None:
        self.rank = rank
        self.eigenvalues = eigenvalues
        super().__init__(
            f"Covariance rank {rank} < 3 (eigenvalues {eigenvalues}); principal axes are not unique"
        )
