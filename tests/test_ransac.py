import numpy as np
import pytest

from sac_registration import (
    SampleConsensusModelRegistration,
    SampleConsensusModelSimilarity,
    SimilarityTransform,
    ransac,
)


@pytest.fixture
def corrupted_correspondences(random_cloud, random_transformation, rng):
    ref = random_transformation[random_cloud]
    outliers = np.arange(40, 50)
    ref[outliers] += rng.uniform(5, 10, size=(outliers.shape[0], 3))
    return random_cloud, ref, outliers


def test_ransac_rejects_the_outliers(corrupted_correspondences, random_transformation):
    scan, ref, outliers = corrupted_correspondences
    model = SampleConsensusModelSimilarity(scan)
    model.set_input_target(ref)

    result = ransac(model, n_draws=200, distance_threshold=1e-3, disable_progress_bar=True)

    np.testing.assert_array_equal(result.inliers, np.arange(40))
    assert result.refined
    assert result.inliers_ratio == pytest.approx(0.8)
    assert result.n_iterations == 200
    np.testing.assert_allclose(
        result.transformation.as_matrix(), random_transformation.as_matrix(), atol=1e-8
    )


def test_ransac_with_the_adaptive_threshold(unit_cube, random_transformation):
    ref = random_transformation[unit_cube]
    ref[5] += np.array([10.0, 0.0, 0.0])
    model = SampleConsensusModelSimilarity(unit_cube)
    model.set_input_target(ref)

    result = ransac(model, n_draws=50, seed=0, disable_progress_bar=True)

    np.testing.assert_array_equal(result.inliers, [0, 1, 2, 3, 4, 6, 7])
    np.testing.assert_allclose(
        result.coefficients, random_transformation.to_coefficients(), atol=1e-10
    )


def test_ransac_without_refinement(corrupted_correspondences):
    scan, ref, _ = corrupted_correspondences
    model = SampleConsensusModelRegistration(scan)
    model.set_input_target(ref)

    result = ransac(
        model, n_draws=100, distance_threshold=1.0, refine=False, disable_progress_bar=True
    )

    assert not result.refined
    assert result.transformation.scale == pytest.approx(1.0)


def test_ransac_on_candidates_subset(corrupted_correspondences):
    scan, ref, _ = corrupted_correspondences
    model = SampleConsensusModelSimilarity(scan)
    model.set_input_target(ref)

    result = ransac(
        model, np.arange(10), n_draws=50, distance_threshold=1e-3, disable_progress_bar=True
    )

    assert result.n_candidates == 10
    assert result.n_inliers == 40


def test_ransac_on_degenerate_data():
    line = np.outer(np.arange(10.0), [1.0, 1.0, 0.0])
    model = SampleConsensusModelSimilarity(line)
    model.set_input_target(line)

    result = ransac(model, n_draws=20, disable_progress_bar=True)

    assert result.coefficients is None
    assert result.transformation is None
    assert result.n_skipped == 20
    assert result.n_inliers == 0


def test_ransac_needs_enough_candidates(unit_square):
    model = SampleConsensusModelSimilarity(unit_square)
    model.set_input_target(unit_square)
    with pytest.raises(ValueError):
        ransac(model, [0, 1], disable_progress_bar=True)


def test_result_transformation(unit_square, rotation_z_90):
    model = SampleConsensusModelSimilarity(unit_square)
    model.set_input_target(unit_square @ rotation_z_90.T)
    result = ransac(model, n_draws=10, disable_progress_bar=True)
    assert isinstance(result.transformation, SimilarityTransform)
    np.testing.assert_allclose(result.transformation.rotation, rotation_z_90, atol=1e-10)
    assert result.n_inliers == 4
