# Copyright 2024-2025 pynlr authors. All rights reserved.

import tomllib
from abc import ABC
from typing import Literal

from pydantic import BaseModel, ConfigDict, PositiveFloat, model_validator


# --- LIKELIHOODS --------------------------------------------------------------
class LikelihoodConfig(BaseModel, ABC):
    model_config = ConfigDict(extra="forbid")

    type: Literal["gaussian", "simple_gaussian", "bernoulli"] = None


class GaussianLikelihoodConfig(LikelihoodConfig):
    # per-observation noise, either as sigma or as its inverse
    noise_sigma: list[PositiveFloat] = None
    inv_noise_sigma: list[PositiveFloat] = None

    @model_validator(mode="after")
    def check_noise_sigma(self):
        if (self.noise_sigma is None) == (self.inv_noise_sigma is None):
            raise ValueError(
                "Exactly one of noise_sigma and inv_noise_sigma must be provided."
            )
        return self


class SimpleGaussianLikelihoodConfig(LikelihoodConfig):
    noise_sigma: PositiveFloat = 1.0  # Initial dispersion


class BernoulliLikelihoodConfig(LikelihoodConfig):
    pass


def parse_config(config: dict | str) -> LikelihoodConfig:
    if isinstance(config, str):
        with open(config, "rb") as f:
            config = tomllib.load(f)

    likelihood_type = config.get("type")

    if likelihood_type == "gaussian":
        return GaussianLikelihoodConfig(**config)
    elif likelihood_type == "simple_gaussian":
        return SimpleGaussianLikelihoodConfig(**config)
    elif likelihood_type == "bernoulli":
        return BernoulliLikelihoodConfig(**config)
    else:
        raise ValueError(f"Unknown likelihood config type: {likelihood_type}")
