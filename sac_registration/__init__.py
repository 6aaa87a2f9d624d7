from .configuration import (
    RansacConfig,
    RegistrationConfig,
    SampleConsensusConfig,
    load_config_from_yaml,
)
from .core import (
    DegenerateConfigurationError,
    SimilarityTransform,
    compute_sample_distance_threshold,
    solver_point_to_point,
)
from .helpers import checkpoint, setup_logging, timeit
from .matching import RansacResult, ransac
from .model import (
    CorrespondenceIndex,
    SacModelType,
    SampleConsensusModel,
    SampleConsensusModelRegistration,
    SampleConsensusModelSimilarity,
)

__all__ = [
    "RansacConfig",
    "RegistrationConfig",
    "SampleConsensusConfig",
    "load_config_from_yaml",
    "DegenerateConfigurationError",
    "SimilarityTransform",
    "compute_sample_distance_threshold",
    "solver_point_to_point",
    "checkpoint",
    "setup_logging",
    "timeit",
    "RansacResult",
    "ransac",
    "CorrespondenceIndex",
    "SacModelType",
    "SampleConsensusModel",
    "SampleConsensusModelRegistration",
    "SampleConsensusModelSimilarity",
]
