import argparse


def add_synthetic_data_parameters(parser) -> None:
    parser.add_argument(
        "--n_points",
        type=int,
        default=500,
        help="Number of points in the synthetic source point cloud.",
    )
    parser.add_argument(
        "--outliers_ratio",
        type=float,
        default=0.3,
        help="Proportion of correspondences whose target point is replaced by a random point.",
    )
    parser.add_argument(
        "--noise_level",
        type=float,
        default=1e-3,
        help="Standard deviation of the gaussian noise added to the target points.",
    )
    parser.add_argument(
        "--scale",
        type=float,
        default=2.0,
        help="Scale factor of the ground truth similarity transformation.",
    )
    parser.add_argument(
        "--rigid",
        action="store_true",
        help="Fits a rigid transformation instead of a similarity.",
    )


def add_ransac_parameters(parser) -> None:
    parser.add_argument(
        "--n_draws",
        type=int,
        default=None,
        help="Number of draws in RANSAC (overrides the config file).",
    )
    parser.add_argument(
        "--max_inliers_distance",
        type=float,
        default=None,
        help="Maximum distance of an inlier to the model. Leave empty to use the adaptive threshold.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed of the random number generator (overrides the config file).",
    )
    parser.add_argument(
        "--disable_progress_bars",
        action="store_true",
        help="Disables the progress bar in RANSAC.",
    )


def parse_args() -> argparse.Namespace:
    """
    Uses argparse to parse the arguments of the command line.
    """
    parser = argparse.ArgumentParser(
        description="Registration of a synthetic point cloud on a transformed and corrupted copy of itself."
    )
    parser.add_argument(
        "--config",
        type=str,
        default="./configs/default.yaml",
        help="Path to the YAML config file.",
    )
    parser.add_argument(
        "--log_level",
        choices=["DEBUG", "INFO", "WARNING"],
        type=str,
        default="INFO",
        help="Logging level.",
    )
    add_synthetic_data_parameters(parser)
    add_ransac_parameters(parser)

    return parser.parse_args()
