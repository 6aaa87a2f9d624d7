from .solvers import (
    DegenerateConfigurationError,
    compute_point_to_point_distances,
    solver_point_to_point,
)
from .spread import compute_principal_variances, compute_sample_distance_threshold
from .transform import SimilarityTransform

__all__ = [
    "DegenerateConfigurationError",
    "compute_point_to_point_distances",
    "solver_point_to_point",
    "compute_principal_variances",
    "compute_sample_distance_threshold",
    "SimilarityTransform",
]
