import argparse
import logging
from dataclasses import asdict

import numpy as np
from scipy.spatial.transform import Rotation

from scripts.parse_args import parse_args
from sac_registration import (
    SampleConsensusModelRegistration,
    SampleConsensusModelSimilarity,
    SimilarityTransform,
    checkpoint,
    load_config_from_yaml,
    ransac,
    setup_logging,
    timeit,
)


@timeit
def make_synthetic_correspondences(
    n_points: int,
    exact_transformation: SimilarityTransform,
    outliers_ratio: float,
    noise_level: float,
    rng: np.random.Generator,
) -> tuple[np.ndarray[np.float64], np.ndarray[np.float64], np.ndarray[bool]]:
    """
    Creates a random point cloud and its transformed copy, in which a proportion of the points are replaced by random
    points to simulate wrong correspondences.

    Returns:
        The source points, the target points, and the mask of the corrupted correspondences.
    """
    scan = rng.uniform(-1, 1, size=(n_points, 3)) * np.array([3.0, 2.0, 1.0])
    ref = exact_transformation[scan] + rng.normal(scale=noise_level, size=scan.shape)
    is_outlier = rng.random(n_points) < outliers_ratio
    ref[is_outlier] = rng.uniform(ref.min(axis=0), ref.max(axis=0), size=(is_outlier.sum(), 3))
    return scan, ref, is_outlier


def main(args: argparse.Namespace | None = None) -> None:
    """
    Registers a synthetic point cloud on a transformed copy of itself with corrupted correspondences and logs the
    recovered transformation.

    Args:
        args: Arguments parsed from command-line using argparse.
    """
    args = args or parse_args()
    setup_logging(args.log_level)
    configuration = load_config_from_yaml(args.config, vars(args))
    logging.info(configuration["model"].help_message())
    logging.info(configuration["ransac"].help_message())

    global_timer = checkpoint()
    timer = checkpoint()
    rng = np.random.default_rng(seed=configuration["ransac"].seed)
    exact_transformation = SimilarityTransform(
        Rotation.from_quat(rng.normal(size=4)).as_matrix(),
        rng.uniform(-5, 5, size=3),
        1.0 if args.rigid else args.scale,
    )
    scan, ref, is_outlier = make_synthetic_correspondences(
        args.n_points, exact_transformation, args.outliers_ratio, args.noise_level, rng
    )
    timer("Time spent generating the data")

    model_class = (
        SampleConsensusModelRegistration if args.rigid else SampleConsensusModelSimilarity
    )
    model = model_class(scan, config=configuration["model"])
    model.set_input_target(ref)
    logging.info(
        f"Model {model.model_type.value}, sample distance threshold: {model.sample_distance_threshold:.4f}"
    )
    timer("Time spent building the model")

    ransac_config = asdict(configuration["ransac"])
    result = ransac(
        model,
        n_draws=ransac_config["n_draws"],
        distance_threshold=ransac_config["max_inliers_distance"],
        refine=ransac_config["refine"],
        seed=ransac_config["seed"],
        disable_progress_bar=args.disable_progress_bars,
    )
    timer("Time spent on RANSAC")

    if result.coefficients is None:
        logging.error("RANSAC did not find any valid transformation.")
        return

    correct_inliers = np.isin(result.inliers, np.flatnonzero(~is_outlier)).sum()
    logging.info(
        f"\nRatio of inliers: {result.inliers_ratio * 100:.2f}% "
        f"({correct_inliers} correct out of {result.n_inliers}, {is_outlier.sum()} outliers injected)"
        f"\nExact transformation:\n{exact_transformation}"
        f"\nEstimated transformation:\n{result.transformation}"
    )
    global_timer("Total time spent")


if __name__ == "__main__":
    main()
