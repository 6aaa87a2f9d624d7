"""
Positional mapping between the original indices of a source point cloud and those of a target point cloud.
"""

from collections.abc import Iterator

import numpy as np
import numpy.typing as npt


class CorrespondenceIndex:
    """
    Maps the original index of a source point to the original index of its matched target point.
    The i-th source index is paired with the i-th target index. If either sequence is missing or empty, or if their
    lengths differ, the index is left empty and every lookup returns None.
    """

    def __init__(
        self,
        source_indices: npt.ArrayLike | None = None,
        target_indices: npt.ArrayLike | None = None,
    ) -> None:
        self._correspondences: dict[int, int] = {}
        if source_indices is not None and target_indices is not None:
            source_indices = np.asarray(source_indices, dtype=np.int64).ravel()
            target_indices = np.asarray(target_indices, dtype=np.int64).ravel()
            if 0 < source_indices.shape[0] == target_indices.shape[0]:
                self._correspondences = dict(
                    zip(source_indices.tolist(), target_indices.tolist())
                )

        self._source_indices = np.fromiter(
            self._correspondences.keys(), dtype=np.int64, count=len(self)
        )
        self._target_indices = np.fromiter(
            self._correspondences.values(), dtype=np.int64, count=len(self)
        )
        self._source_indices.flags.writeable = False
        self._target_indices.flags.writeable = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} correspondences)"

    def __len__(self) -> int:
        return len(self._correspondences)

    def __bool__(self) -> bool:
        return bool(self._correspondences)

    def __contains__(self, index: object) -> bool:
        try:
            return int(index) in self._correspondences
        except (TypeError, ValueError):
            return False

    def __iter__(self) -> Iterator[int]:
        return iter(self._correspondences)

    def get(self, index: int) -> int | None:
        """
        Returns:
            The target index matched with the source index, None if there is no correspondence.
        """
        return self._correspondences.get(int(index))

    def lookup(self, indices: npt.ArrayLike) -> npt.NDArray[np.int64] | None:
        """
        Vectorized lookup of several source indices.

        Returns:
            The matched target indices, or None if at least one of the source indices has no correspondence.
        """
        target_indices = [self.get(index) for index in np.asarray(indices).ravel()]
        if any(index is None for index in target_indices):
            return None
        return np.array(target_indices, dtype=np.int64)

    @property
    def source_indices(self) -> npt.NDArray[np.int64]:
        """Source indices that have a correspondence, in insertion order."""
        return self._source_indices

    @property
    def target_indices(self) -> npt.NDArray[np.int64]:
        """Target indices aligned with source_indices."""
        return self._target_indices
