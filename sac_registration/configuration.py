"""
Classes that can contain the configuration required by the sample consensus models and the RANSAC driver.
"""

import json
import warnings
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, fields
from typing import Any, TypedDict

import yaml


@dataclass
class Config(ABC):
    """Base class that describes the structure of every config class and implements a type casting behavior."""

    def __post_init__(self):
        for field in fields(self):
            value = getattr(self, field.name)
            try:
                if not isinstance(value, field.type):
                    warnings.warn(
                        f"Expected {field.name} to be {field.type}, got {repr(value)} of type {type(value)}"
                    )
                    setattr(self, field.name, field.type(value))  # recasting the value
            except TypeError:
                ...

    def __repr__(self) -> str:
        return json.dumps(asdict(self), indent=2)

    @abstractmethod
    def help_message(self) -> str:
        """
        Creates a help message describing the behavior of the method with the set of parameters specified.

        Returns:
            The help message.
        """
        ...


@dataclass
class SampleConsensusConfig(Config):
    """Numerical parameters of the registration sample consensus models."""

    tolerance: float = 1e-8
    sample_distance_ratio: float = 1.0

    def __post_init__(self):
        super().__post_init__()
        if self.tolerance < 0:
            raise ValueError(f"The tolerance must be non-negative, got {self.tolerance}.")
        if self.sample_distance_ratio < 0:
            raise ValueError(
                f"The sample distance ratio must be non-negative, got {self.sample_distance_ratio}."
            )

    def help_message(self) -> str:
        return (
            f"Sample consensus model parameters:\n"
            f" -- numerical tolerance: {self.tolerance}\n"
            f" -- minimum squared distance between sampled points: "
            f"{self.sample_distance_ratio} x sample distance threshold"
        )


@dataclass
class RansacConfig(Config):
    """Parameters of the RANSAC method."""

    n_draws: int = 1000
    max_inliers_distance: float | None = None
    refine: bool = True
    seed: int | None = 72

    def __post_init__(self):
        super().__post_init__()
        if self.n_draws <= 0:
            raise ValueError(f"The number of draws must be positive, got {self.n_draws}.")

    def help_message(self) -> str:
        return (
            f"RANSAC parameters:\n"
            f" -- number of draws: {self.n_draws}\n"
            f" -- maximum inlier distance: "
            f"{self.max_inliers_distance if self.max_inliers_distance is not None else 'adaptive'}\n"
            f" -- refinement on the inliers: {self.refine}\n"
            f" -- seed: {self.seed}"
        )


class RegistrationConfig(TypedDict):
    model: SampleConsensusConfig
    ransac: RansacConfig


def load_config_from_yaml(
    config_file_path: str, command_line_args: dict[str, Any] | None = None
) -> RegistrationConfig:
    """
    Loads a YAML config file and overrides its values with the non-null values found in command_line_args.
    """

    def get_values(
        default_values: dict[str, Any] | None, override_values: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Overrides entries from a dictionary when values are non-null.
        """
        default_values = default_values or {}
        return {
            **default_values,
            **{
                k: v
                for k, v in override_values.items()
                if k in default_values and v is not None
            },
        }

    command_line_args = command_line_args or {}
    with open(config_file_path) as f:
        config = yaml.safe_load(f.read())["registration"]

    return {
        "model": SampleConsensusConfig(
            **get_values(config.get("model"), command_line_args),
        ),
        "ransac": RansacConfig(
            **get_values(config.get("ransac"), command_line_args),
        ),
    }
