"""
Interface that every sample consensus model exposes to the drivers (RANSAC and its variants).
"""

from abc import ABC, abstractmethod

import numpy as np
import numpy.typing as npt

from .model_types import SacModelType


class SampleConsensusModel(ABC):
    """
    Base class of the models that can be fitted on random samples and scored by consensus.
    Holds a reference to the input point cloud and to the indices of the points in use, without ever copying them.
    Derived state is recomputed by _on_input_changed every time the input cloud or its indices are assigned.
    """

    sample_size: int = 3
    model_size: int = 16

    def __init__(
        self,
        cloud: npt.NDArray[np.float64],
        indices: npt.ArrayLike | None = None,
    ) -> None:
        self._input: npt.NDArray[np.float64] | None = None
        self._indices: npt.NDArray[np.int64] | None = None
        self.set_input_cloud(cloud, indices)

    @property
    @abstractmethod
    def model_type(self) -> SacModelType:
        """Unique identifier of the model."""
        ...

    @property
    def input_cloud(self) -> npt.NDArray[np.float64]:
        return self._input

    @property
    def indices(self) -> npt.NDArray[np.int64]:
        """Indices of the points of the input cloud in use."""
        return self._indices

    def set_input_cloud(
        self,
        cloud: npt.NDArray[np.float64],
        indices: npt.ArrayLike | None = None,
    ) -> None:
        """
        Sets the input point cloud and optionally the indices of the points to use (all of them by default).
        """
        check_point_cloud(cloud)
        self._input = cloud
        self._indices = to_indices(indices, cloud.shape[0])
        self._on_input_changed()

    def set_indices(self, indices: npt.ArrayLike | None) -> None:
        """
        Restricts the model to a subset of the input point cloud.
        """
        self._indices = to_indices(indices, self._input.shape[0])
        self._on_input_changed()

    def _on_input_changed(self) -> None:
        """Hook called after the input cloud or its indices have been assigned."""

    def is_model_valid(self, model_coefficients: npt.ArrayLike) -> bool:
        """
        Checks that the coefficients have the size expected by the model.
        """
        try:
            coefficients = np.asarray(model_coefficients)
        except ValueError:
            return False
        return (
            np.issubdtype(coefficients.dtype, np.number)
            and coefficients.size == self.model_size
        )

    @abstractmethod
    def is_sample_good(self, samples: npt.ArrayLike) -> bool:
        """
        Checks whether a sample of indices leads to a well-posed estimation of the model.
        """
        ...

    @abstractmethod
    def compute_model_coefficients(
        self, samples: npt.ArrayLike
    ) -> npt.NDArray[np.float64] | None:
        """
        Fits the model on a sample of indices.

        Returns:
            The model coefficients, None if the sample does not lead to a valid model.
        """
        ...

    @abstractmethod
    def get_distances_to_model(
        self, model_coefficients: npt.ArrayLike
    ) -> npt.NDArray[np.float64]:
        """
        Computes the distance of every scored point to the model.
        """
        ...

    @abstractmethod
    def select_within_distance(
        self, model_coefficients: npt.ArrayLike, threshold: float
    ) -> npt.NDArray[np.int64]:
        """
        Selects the indices of the points whose distance to the model is below a threshold.
        """
        ...

    @abstractmethod
    def count_within_distance(
        self, model_coefficients: npt.ArrayLike, threshold: float
    ) -> int:
        """
        Counts the points whose distance to the model is below a threshold.
        """
        ...

    @abstractmethod
    def optimize_model_coefficients(
        self, inliers: npt.ArrayLike, model_coefficients: npt.ArrayLike
    ) -> npt.NDArray[np.float64] | None:
        """
        Recomputes the model coefficients using all the inliers supporting the model.
        """
        ...


def check_point_cloud(cloud: npt.NDArray[np.float64]) -> None:
    if not isinstance(cloud, np.ndarray) or cloud.ndim != 2 or cloud.shape[1] < 3:
        raise ValueError(
            f"Expected an (N, d >= 3) array of points, got {getattr(cloud, 'shape', type(cloud))}."
        )


def to_indices(indices: npt.ArrayLike | None, n_points: int) -> npt.NDArray[np.int64]:
    if indices is None:
        return np.arange(n_points)
    indices = np.asarray(indices).ravel()
    if indices.dtype == np.bool_:
        if indices.shape[0] != n_points:
            raise ValueError(
                f"Expected a mask of {n_points} booleans, got {indices.shape[0]}."
            )
        return np.flatnonzero(indices)
    if indices.size == 0:
        return np.empty(0, dtype=np.int64)
    if not np.issubdtype(indices.dtype, np.integer):
        raise ValueError(f"Indices must be integers, got {indices.dtype}.")
    indices = indices.astype(np.int64)
    if indices.min() < 0 or indices.max() >= n_points:
        raise ValueError(f"Indices out of the bounds of a cloud of {n_points} points.")
    return indices
