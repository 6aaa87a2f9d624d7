"""
Closed-form solvers for the absolute orientation problem between corresponding point sets.
"""

import numpy as np
import numpy.typing as npt

from .transform import SimilarityTransform


class DegenerateConfigurationError(ValueError):
    """Raised when a set of correspondences does not constrain the transformation."""


def solver_point_to_point(
    scan: npt.NDArray[np.float64],
    ref: npt.NDArray[np.float64],
    *,
    with_scale: bool = True,
    tolerance: float = 1e-8,
    min_points: int = 3,
) -> SimilarityTransform:
    """
    Computes the least-squares best-fit similarity transform that maps corresponding points scan to ref, i.e. the
    transform T minimizing the sum of ||T[scan_i] - ref_i||^2 (Procrustes problem with a uniform scale).

    Args:
        scan: (N x 3) matrix of the points to align.
        ref: (N x 3) matrix of the corresponding reference points.
        with_scale: Set to False to keep the scale to 1 and only estimate a rigid transform.
        tolerance: Relative tolerance on the singular values of the cross-covariance matrix.
        min_points: Minimum number of correspondences required.

    Returns:
        The transformation such that scale * rotation @ scan_i + translation is aligned on ref_i.

    Raises:
        DegenerateConfigurationError: if the correspondences are too few or do not constrain the rotation.
    """
    if scan.shape != ref.shape or scan.ndim != 2:
        raise DegenerateConfigurationError(
            f"Mismatching correspondences: {scan.shape} and {ref.shape}."
        )
    if scan.shape[0] < min_points:
        raise DegenerateConfigurationError(
            f"At least {min_points} correspondences are required, got {scan.shape[0]}."
        )

    scan_barycenter = scan.mean(axis=0)
    ref_barycenter = ref.mean(axis=0)
    centered_scan = scan - scan_barycenter
    centered_ref = ref - ref_barycenter

    # tolerances are relative to the extent of the points, they do not depend on the unit of length
    scan_variance = np.sum(centered_scan**2)
    if scan_variance <= tolerance * max(np.sum(scan**2), np.finfo(np.float64).tiny):
        raise DegenerateConfigurationError("The points to align are all coincident.")

    covariance_matrix = centered_scan.T.dot(centered_ref)
    u, sigma, v = np.linalg.svd(covariance_matrix)

    # the rotation is only determined if the cross-covariance has a rank of at least 2
    if (
        sigma[0] <= tolerance * np.sqrt(scan_variance * np.sum(centered_ref**2))
        or sigma[1] <= tolerance * sigma[0]
    ):
        raise DegenerateConfigurationError(
            f"Rank-deficient cross-covariance matrix (singular values: {sigma})."
        )

    # ensuring that we have a direct rotation (determinant equal to 1 and not -1)
    correction = np.ones(scan.shape[1])
    correction[-1] = np.sign(np.linalg.det(v.T @ u.T)) or 1.0
    rotation = v.T @ np.diag(correction) @ u.T

    scale = (sigma * correction).sum() / scan_variance if with_scale else 1.0
    translation = ref_barycenter - scale * rotation.dot(scan_barycenter)

    return SimilarityTransform(rotation, translation, scale)


def compute_point_to_point_distances(
    scan: npt.NDArray[np.float64],
    ref: npt.NDArray[np.float64],
    transformation_matrix: np.ndarray[np.float64, (4, 4)],
) -> npt.NDArray[np.float64]:
    """
    Computes the distances between each point of scan transformed by a 4x4 homogeneous matrix and its corresponding
    point in ref.
    """
    return np.linalg.norm(
        scan @ transformation_matrix[:3, :3].T + transformation_matrix[:3, 3] - ref,
        axis=1,
    )
