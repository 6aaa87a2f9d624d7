"""
Estimation of the intrinsic spread of a point cloud from its principal directions.
"""

import numpy as np
import numpy.typing as npt


def compute_principal_variances(
    points: npt.NDArray[np.float64],
    indices: npt.NDArray[np.int32] | None = None,
) -> npt.NDArray[np.float64]:
    """
    Computes the eigenvalues of the covariance matrix (normalized by the number of points) of a subset of a point cloud.

    Args:
        points: (N x d) point cloud, only the three first columns (x, y, z) are used.
        indices: Indices of the subset to consider. Leave to None to use the whole cloud.

    Returns:
        The three principal variances in ascending order, clipped to 0 to absorb round-off errors.
    """
    xyz = points[:, :3] if indices is None else points[np.asarray(indices), :3]
    if xyz.shape[0] == 0:
        raise ValueError("Cannot compute the spread of an empty set of points.")
    centered_points = xyz - xyz.mean(axis=0)
    covariance_matrix = centered_points.T @ centered_points / xyz.shape[0]
    return np.clip(np.linalg.eigvalsh(covariance_matrix), 0, None)


def compute_sample_distance_threshold(
    points: npt.NDArray[np.float64],
    indices: npt.NDArray[np.int32] | None = None,
) -> float:
    """
    Computes an "optimal" sample distance threshold based on the principal directions of a point cloud: the squared
    mean of the principal standard deviations.
    This threshold scales with the cloud, which avoids tuning a constant for each dataset.
    """
    return float((np.sqrt(compute_principal_variances(points, indices)).sum() / 3) ** 2)
