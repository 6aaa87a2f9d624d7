import itertools

import numpy as np
import pytest
from scipy.spatial.transform import Rotation

from sac_registration import SimilarityTransform


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(seed=72)


@pytest.fixture
def unit_square() -> np.ndarray:
    return np.array(
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0]]
    )


@pytest.fixture
def rotation_z_90() -> np.ndarray:
    return Rotation.from_euler("z", 90, degrees=True).as_matrix()


@pytest.fixture
def unit_cube() -> np.ndarray:
    return np.array(list(itertools.product([0.0, 1.0], repeat=3)))


@pytest.fixture
def random_transformation(rng) -> SimilarityTransform:
    return SimilarityTransform(
        Rotation.from_quat(rng.normal(size=4)).as_matrix(),
        rng.normal(scale=3, size=3),
        0.7,
    )


@pytest.fixture
def random_cloud(rng) -> np.ndarray:
    """Gaussian cloud whose three first points are well spread, so that they form a good sample."""
    cloud = rng.normal(size=(50, 3))
    cloud[:3] = np.array([[2.0, 0.0, 0.0], [0.0, 2.0, 0.0], [0.0, 0.0, 2.0]])
    return cloud
