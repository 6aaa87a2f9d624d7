from .base import SampleConsensusModel
from .correspondences import CorrespondenceIndex
from .model_types import SacModelType
from .registration import (
    SampleConsensusModelRegistration,
    SampleConsensusModelSimilarity,
)

__all__ = [
    "SampleConsensusModel",
    "CorrespondenceIndex",
    "SacModelType",
    "SampleConsensusModelRegistration",
    "SampleConsensusModelSimilarity",
]
