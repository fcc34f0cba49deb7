# Copyright 2024-2025 pynlr authors. All rights reserved.

from pynlr import ArrayLike
from pynlr.configs.likelihood_config import (
    BernoulliLikelihoodConfig,
    GaussianLikelihoodConfig,
    LikelihoodConfig,
    SimpleGaussianLikelihoodConfig,
)
from pynlr.core.likelihood import Likelihood
from pynlr.core.model import ParametricModel
from pynlr.likelihoods.approximate import ApproximateLikelihood
from pynlr.likelihoods.bernoulli import BernoulliLikelihood
from pynlr.likelihoods.gaussian import GaussianLikelihood
from pynlr.likelihoods.model_selection import (
    aic,
    aicc,
    bic,
    information_criteria,
    negative_evidence,
)
from pynlr.likelihoods.simple_gaussian import SimpleGaussianLikelihood


def get_likelihood(
    x: ArrayLike,
    y: ArrayLike,
    model: ParametricModel,
    config: LikelihoodConfig,
) -> Likelihood:
    """Instantiate the likelihood described by the configuration."""
    if isinstance(config, GaussianLikelihoodConfig):
        return GaussianLikelihood(
            x,
            y,
            model,
            noise_sigma=config.noise_sigma,
            inv_noise_sigma=config.inv_noise_sigma,
        )
    elif isinstance(config, SimpleGaussianLikelihoodConfig):
        return SimpleGaussianLikelihood(x, y, model, noise_sigma=config.noise_sigma)
    elif isinstance(config, BernoulliLikelihoodConfig):
        return BernoulliLikelihood(x, y, model)
    else:
        raise NotImplementedError(
            f"Likelihood {type(config).__name__} not implemented."
        )


__all__ = [
    "ApproximateLikelihood",
    "BernoulliLikelihood",
    "GaussianLikelihood",
    "SimpleGaussianLikelihood",
    "get_likelihood",
    "aic",
    "aicc",
    "bic",
    "information_criteria",
    "negative_evidence",
]
