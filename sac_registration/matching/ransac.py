"""
RANSAC iterations applied to a sample consensus model to find the transformation supported by the most correspondences.
"""

import logging
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt
from tqdm import tqdm

from sac_registration.core import SimilarityTransform
from sac_registration.model import SampleConsensusModel


@dataclass
class RansacResult:
    """Output of the RANSAC iterations."""

    coefficients: npt.NDArray[np.float64] | None = None
    inliers: npt.NDArray[np.int64] = field(
        default_factory=lambda: np.empty(0, dtype=np.int64)
    )
    n_candidates: int = 0
    n_iterations: int = 0
    n_skipped: int = 0
    refined: bool = False

    @property
    def n_inliers(self) -> int:
        return self.inliers.shape[0]

    @property
    def inliers_ratio(self) -> float:
        return self.n_inliers / self.n_candidates if self.n_candidates > 0 else 0.0

    @property
    def transformation(self) -> SimilarityTransform | None:
        if self.coefficients is None:
            return None
        return SimilarityTransform.from_coefficients(self.coefficients)


def ransac(
    model: SampleConsensusModel,
    candidates: npt.ArrayLike | None = None,
    n_draws: int = 1000,
    distance_threshold: float | None = None,
    *,
    refine: bool = True,
    seed: int | None = 72,
    disable_progress_bar: bool = False,
) -> RansacResult:
    """
    Draws random samples among the candidate indices, fits the model on each of them and keeps the model with the
    largest consensus. The final inliers can then be used to refine the model.
    Only relies on the interface of SampleConsensusModel, the model variant can therefore be swapped freely.

    Args:
        model: The sample consensus model to fit.
        candidates: Indices the samples are drawn from. Leave to None to draw among the indices in use in the model.
        n_draws: Number of samples drawn.
        distance_threshold: Maximum distance to the model of an inlier. Leave to None to use the sample distance
        threshold of the model.
        refine: Set to False to skip the final optimization of the model on its inliers.
        seed: Seed of the random number generator.
        disable_progress_bar: Disables the progress bar.

    Returns:
        The best model found along with its inliers. The coefficients are None if no sample led to a valid model.
    """
    candidates = np.asarray(
        model.indices if candidates is None else candidates, dtype=np.int64
    ).ravel()
    if candidates.shape[0] < model.sample_size:
        raise ValueError(
            f"At least {model.sample_size} candidates are required, got {candidates.shape[0]}."
        )
    if distance_threshold is None:
        distance_threshold = getattr(model, "sample_distance_threshold", None)
        if distance_threshold is None:
            raise ValueError(f"The model {model.model_type} has no adaptive threshold.")

    rng = np.random.default_rng(seed=seed)
    result = RansacResult(n_candidates=candidates.shape[0])
    best_n_inliers = -1

    for _ in (
        pbar := tqdm(
            range(n_draws),
            desc="RANSAC",
            total=n_draws,
            disable=disable_progress_bar,
            delay=0.5,
        )
    ):
        try:
            result.n_iterations += 1
            draw = candidates[
                rng.choice(
                    candidates.shape[0], model.sample_size, replace=False, shuffle=False
                )
            ]
            if not model.is_sample_good(draw):
                result.n_skipped += 1
                continue
            coefficients = model.compute_model_coefficients(draw)
            if coefficients is None:
                result.n_skipped += 1
                continue
            n_inliers = model.count_within_distance(coefficients, distance_threshold)
            if n_inliers > best_n_inliers:
                logging.debug(
                    f"Updating best n_inliers from {max(best_n_inliers, 0)} to {n_inliers}"
                )
                best_n_inliers = n_inliers
                result.coefficients = coefficients
            pbar.set_description(f"RANSAC - current best n_inliers: {best_n_inliers}")
        except KeyboardInterrupt:
            logging.warning("RANSAC interrupted by user.")
            break

    if result.coefficients is None:
        logging.warning(
            f"No valid model found in {result.n_iterations} draws ({result.n_skipped} degenerate samples)."
        )
        return result

    result.inliers = model.select_within_distance(result.coefficients, distance_threshold)
    if refine:
        optimized_coefficients = model.optimize_model_coefficients(
            result.inliers, result.coefficients
        )
        if optimized_coefficients is None:
            logging.warning("Could not refine the model on its inliers, keeping the best sample fit.")
        else:
            result.coefficients = optimized_coefficients
            result.inliers = model.select_within_distance(
                result.coefficients, distance_threshold
            )
            result.refined = True

    logging.info(
        f"RANSAC kept {result.n_inliers} inliers out of {result.n_candidates} correspondences "
        f"({result.n_skipped} degenerate samples skipped)."
    )

    return result
