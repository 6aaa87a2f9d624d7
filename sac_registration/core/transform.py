"""
Base class to handle 4x4 similarity transformations (uniform scale, rotation and translation).
"""

from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt
from scipy.spatial.transform import Rotation


@dataclass(eq=False)
class SimilarityTransform:
    """
    Class to wrap 4x4 transformations that apply x -> scale * rotation @ x + translation.
    """

    rotation: np.ndarray[np.float64, (3, 3)] = field(default_factory=lambda: np.eye(3))
    translation: np.ndarray[np.float64, 3] = field(
        default_factory=lambda: np.zeros(3)
    )
    scale: float = 1.0

    def __post_init__(self):
        self.rotation = np.asarray(self.rotation, dtype=np.float64)
        self.translation = np.asarray(self.translation, dtype=np.float64)
        self.scale = float(self.scale)

    def __repr__(self) -> str:
        """
        Returns a string representation without scientific notation that can almost directly be copy-pasted into
        CloudCompare.

        Returns:
            A string representation of the 4x4 transformation matrix.
        """
        with np.printoptions(suppress=True):
            return str(self.as_matrix())

    @classmethod
    def from_coefficients(cls, coefficients: npt.ArrayLike) -> "SimilarityTransform":
        """
        Builds a transformation from the 16 coefficients of a row-major 4x4 homogeneous matrix.
        The scale is recovered as the cube root of the determinant of the upper-left 3x3 block.
        """
        matrix = np.asarray(coefficients, dtype=np.float64)
        if matrix.size != 16:
            raise ValueError(f"Expected 16 coefficients, got {matrix.size}.")
        matrix = matrix.reshape(4, 4)
        linear_part = matrix[:3, :3]
        determinant = np.linalg.det(linear_part)
        if determinant <= 0:
            raise ValueError(
                f"The linear part of the transformation is not a direct similarity (det={determinant})."
            )
        scale = np.cbrt(determinant)
        return cls(linear_part / scale, matrix[:3, 3].copy(), scale)

    def as_matrix(self) -> np.ndarray[np.float64, (4, 4)]:
        """
        Returns:
            The 4x4 homogeneous matrix composing the scaled rotation and the translation.
        """
        return np.vstack(
            (
                np.hstack((self.scale * self.rotation, self.translation[:, None])),
                np.array([0, 0, 0, 1]),
            )
        )

    def to_coefficients(self) -> np.ndarray[np.float64, 16]:
        """
        Returns:
            The 16 coefficients of the homogeneous matrix in row-major order.
        """
        return self.as_matrix().ravel()

    def normalize_rotation(self) -> None:
        """
        Normalizes the rotation by normalizing the quaternions.
        """
        rotation_quat = Rotation.from_matrix(self.rotation).as_quat()
        self.rotation = Rotation.from_quat(
            rotation_quat / np.linalg.norm(rotation_quat)
        ).as_matrix()

    def __matmul__(self, other_transformation):
        """
        Matrix composition of two transformations.

        Args:
            other_transformation: The transformation on the right (the first one to apply).

        Returns:
            The matrix product of the two transformations.
        """
        product = SimilarityTransform(
            self.rotation @ other_transformation.rotation,
            self.scale * self.rotation @ other_transformation.translation
            + self.translation,
            self.scale * other_transformation.scale,
        )
        product.normalize_rotation()

        return product

    def __invert__(self):
        """
        Inverts the transformation: the rotation is transposed, the scale inverted and the translation brought back.

        Returns:
            The SimilarityTransform corresponding to the inverse transformation.
        """
        return SimilarityTransform(
            self.rotation.T,
            -self.rotation.T @ self.translation / self.scale,
            1 / self.scale,
        )

    def __getitem__(self, points: np.ndarray[np.float64]) -> np.ndarray[np.float64]:
        """
        Applies the transformation to a line-representation of a point or to an (N, 3) array of N points.

        Returns:
            The transformed points.
        """
        return self.scale * points.dot(self.rotation.T) + self.translation

    def transform(self, points: np.ndarray[np.float64]) -> np.ndarray[np.float64]:
        """
        Applies the transformation to a line-representation of a point or to an (N, 3) array of N points.

        Returns:
            The transformed points.
        """
        return self[points]

    def inv(self):
        return ~self
