"""
Sample consensus models for point-to-point registration outlier rejection: the points of the input cloud are matched
with the points of a target cloud, and the model is the transformation that aligns the matched points.
"""

import logging
from itertools import combinations

import numpy as np
import numpy.typing as npt

from sac_registration.configuration import SampleConsensusConfig
from sac_registration.core import (
    DegenerateConfigurationError,
    SimilarityTransform,
    compute_point_to_point_distances,
    compute_sample_distance_threshold,
    solver_point_to_point,
)

from .base import SampleConsensusModel, check_point_cloud, to_indices
from .correspondences import CorrespondenceIndex
from .model_types import SacModelType


class SampleConsensusModelSimilarity(SampleConsensusModel):
    """
    Registration model estimating a rotation, a translation and a uniform scale between corresponding points.
    The correspondences pair the i-th index in use in the input cloud with the i-th index in use in the target cloud.
    """

    estimate_scale: bool = True

    def __init__(
        self,
        cloud: npt.NDArray[np.float64],
        indices: npt.ArrayLike | None = None,
        *,
        config: SampleConsensusConfig | None = None,
    ) -> None:
        self.config = config or SampleConsensusConfig()
        self._target: npt.NDArray[np.float64] | None = None
        self._indices_tgt: npt.NDArray[np.int64] | None = None
        self._correspondences = CorrespondenceIndex()
        self._sample_dist_thresh = 0.0
        super().__init__(cloud, indices)

    @property
    def model_type(self) -> SacModelType:
        return SacModelType.SIMILARITY_REGISTRATION

    @property
    def target_cloud(self) -> npt.NDArray[np.float64] | None:
        return self._target

    @property
    def target_indices(self) -> npt.NDArray[np.int64] | None:
        return self._indices_tgt

    @property
    def correspondences(self) -> CorrespondenceIndex:
        return self._correspondences

    @property
    def sample_distance_threshold(self) -> float:
        """Squared mean principal standard deviation of the points in use in the input cloud."""
        return self._sample_dist_thresh

    def set_input_target(
        self,
        target: npt.NDArray[np.float64],
        indices_tgt: npt.ArrayLike | None = None,
    ) -> None:
        """
        Sets the target point cloud. Without indices, every target point is used in order, which amounts to matching
        the i-th point in use in the input cloud with the i-th point of the target.
        """
        check_point_cloud(target)
        self._target = target
        self._indices_tgt = to_indices(indices_tgt, target.shape[0])
        self._compute_original_index_mapping()

    def _on_input_changed(self) -> None:
        self._compute_original_index_mapping()
        self._compute_sample_distance_threshold()

    def _compute_original_index_mapping(self) -> None:
        self._correspondences = CorrespondenceIndex(self._indices, self._indices_tgt)
        if self._indices_tgt is not None and not self._correspondences:
            logging.debug(
                f"No correspondence between {self._indices.shape[0]} input indices "
                f"and {self._indices_tgt.shape[0]} target indices."
            )

    def _compute_sample_distance_threshold(self) -> None:
        if self._indices.shape[0] == 0:
            self._sample_dist_thresh = 0.0
            return
        self._sample_dist_thresh = compute_sample_distance_threshold(
            self._input, self._indices
        )
        logging.debug(
            f"Estimated a sample selection distance threshold of {self._sample_dist_thresh:.6f}"
        )

    def is_sample_good(self, samples: npt.ArrayLike) -> bool:
        """
        Checks that the sampled points are not collinear and, for minimal samples, far enough from one another.
        """
        samples = np.asarray(samples, dtype=np.int64).ravel()
        if (
            samples.shape[0] < self.sample_size
            or np.unique(samples).shape[0] != samples.shape[0]
            or samples.min() < 0
            or samples.max() >= self._input.shape[0]
            or any(sample not in self._correspondences for sample in samples)
        ):
            return False

        points = self._input[samples, :3]
        # the spacing only matters for minimal samples, larger sets are allowed to be dense
        if samples.shape[0] == self.sample_size:
            min_squared_distance = (
                self.config.sample_distance_ratio * self._sample_dist_thresh
            )
            for first, second in combinations(points, 2):
                if np.sum((second - first) ** 2) <= min_squared_distance:
                    return False

        singular_values = np.linalg.svd(
            points - points.mean(axis=0), compute_uv=False
        )
        extent = max(np.abs(points).max(), np.finfo(np.float64).tiny)
        return bool(
            singular_values[0] > self.config.tolerance * extent
            and singular_values[1] > self.config.tolerance * singular_values[0]
        )

    def _estimate_transformation(
        self, source_indices: npt.NDArray[np.int64]
    ) -> SimilarityTransform | None:
        target_indices = self._correspondences.lookup(source_indices)
        if target_indices is None:
            logging.debug("Some of the indices have no correspondence in the target.")
            return None
        try:
            return solver_point_to_point(
                self._input[source_indices, :3],
                self._target[target_indices, :3],
                with_scale=self.estimate_scale,
                tolerance=self.config.tolerance,
                min_points=self.sample_size,
            )
        except DegenerateConfigurationError as error:
            logging.debug(f"Could not estimate the transformation: {error}")
            return None

    def compute_model_coefficients(
        self, samples: npt.ArrayLike
    ) -> npt.NDArray[np.float64] | None:
        """
        Computes the 4x4 transformation (as 16 row-major coefficients) that best aligns the sampled points on their
        correspondences.

        Returns:
            The model coefficients, None if the sample is degenerate.
        """
        samples = np.asarray(samples, dtype=np.int64).ravel()
        if not self.is_sample_good(samples):
            logging.debug(f"Rejected a degenerate sample: {samples.tolist()}")
            return None
        transformation = self._estimate_transformation(samples)
        return transformation.to_coefficients() if transformation is not None else None

    def get_distances_to_model(
        self, model_coefficients: npt.ArrayLike
    ) -> npt.NDArray[np.float64]:
        """
        Computes the distance between every transformed source point and its correspondence in the target, following
        the order of the correspondences. Points without a correspondence are not scored.
        """
        if not self.is_model_valid(model_coefficients) or not self._correspondences:
            return np.empty(0)
        return compute_point_to_point_distances(
            self._input[self._correspondences.source_indices, :3],
            self._target[self._correspondences.target_indices, :3],
            np.asarray(model_coefficients, dtype=np.float64).reshape(4, 4),
        )

    def select_within_distance(
        self, model_coefficients: npt.ArrayLike, threshold: float
    ) -> npt.NDArray[np.int64]:
        if not self.is_model_valid(model_coefficients):
            logging.debug("Invalid model coefficients, no inlier selected.")
            return np.empty(0, dtype=np.int64)
        distances = self.get_distances_to_model(model_coefficients)
        return self._correspondences.source_indices[distances <= threshold]

    def count_within_distance(
        self, model_coefficients: npt.ArrayLike, threshold: float
    ) -> int:
        if not self.is_model_valid(model_coefficients):
            return 0
        return int(
            np.count_nonzero(self.get_distances_to_model(model_coefficients) <= threshold)
        )

    def optimize_model_coefficients(
        self, inliers: npt.ArrayLike, model_coefficients: npt.ArrayLike
    ) -> npt.NDArray[np.float64] | None:
        """
        Recomputes the transformation in closed form on all the inliers. The initial coefficients are only checked for
        validity, the least-squares solution does not depend on them.

        Returns:
            The optimized coefficients, None if the inliers do not constrain the transformation.
        """
        if not self.is_model_valid(model_coefficients):
            logging.debug("Invalid initial model coefficients, skipping the optimization.")
            return None
        inliers = np.asarray(inliers, dtype=np.int64).ravel()
        if inliers.shape[0] < self.sample_size:
            logging.debug(
                f"Not enough inliers to optimize the model ({inliers.shape[0]} < {self.sample_size})."
            )
            return None
        transformation = self._estimate_transformation(inliers)
        return transformation.to_coefficients() if transformation is not None else None

    def compute_squared_error(
        self, inliers: npt.ArrayLike, model_coefficients: npt.ArrayLike
    ) -> float:
        """
        Sums the squared residuals of the inliers under a transformation.
        """
        inliers = np.asarray(inliers, dtype=np.int64).ravel()
        target_indices = self._correspondences.lookup(inliers)
        if target_indices is None or not self.is_model_valid(model_coefficients):
            return float("inf")
        distances = compute_point_to_point_distances(
            self._input[inliers, :3],
            self._target[target_indices, :3],
            np.asarray(model_coefficients, dtype=np.float64).reshape(4, 4),
        )
        return float(np.sum(distances**2))


class SampleConsensusModelRegistration(SampleConsensusModelSimilarity):
    """
    Rigid registration model: same as the similarity model with a scale fixed to 1.
    """

    estimate_scale = False

    @property
    def model_type(self) -> SacModelType:
        return SacModelType.RIGID_REGISTRATION
