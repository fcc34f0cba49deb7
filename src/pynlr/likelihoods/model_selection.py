# Copyright 2024-2025 pynlr authors. All rights reserved.
# Information criteria for comparing models fitted to the same data.

import math

from pynlr import ArrayLike
from pynlr.core.likelihood import Likelihood
from pynlr.core.model import as_parameter_vector


def aic(log_likelihood: float, dof: float) -> float:
    """Akaike information criterion 2 * dof - 2 * log L."""
    return 2.0 * dof - 2.0 * log_likelihood


def aicc(log_likelihood: float, dof: float, n_observations: int) -> float:
    """AIC with the small sample correction 2 * dof * (dof + 1) / (m - dof - 1)."""
    if n_observations - dof - 1 <= 0:
        raise ValueError(
            f"AICc requires more than {dof + 1} observations, got {n_observations}."
        )
    return aic(log_likelihood, dof) + 2.0 * dof * (dof + 1) / (
        n_observations - dof - 1
    )


def bic(log_likelihood: float, dof: float, n_observations: int) -> float:
    """Bayesian information criterion dof * log(m) - 2 * log L."""
    return dof * math.log(n_observations) - 2.0 * log_likelihood


def information_criteria(likelihood: Likelihood, p: ArrayLike) -> dict[str, float]:
    """AIC, AICc and BIC of a fitted likelihood.

    The degrees of freedom are ``likelihood.n_parameters``, which includes
    the parameters of the noise model (e.g. the dispersion of a
    homoscedastic Gaussian likelihood).

    Parameters
    ----------
    likelihood : Likelihood
        The fitted likelihood.
    p : ArrayLike
        Model parameters, usually the MLE.

    Returns
    -------
    criteria : dict[str, float]
        Values for the keys "AIC", "AICc" and "BIC".
    """
    log_likelihood = -likelihood.neg_log_likelihood(p)
    dof = likelihood.n_parameters
    m = likelihood.n_observations

    return {
        "AIC": aic(log_likelihood, dof),
        "AICc": aicc(log_likelihood, dof, m),
        "BIC": bic(log_likelihood, dof, m),
    }


def negative_evidence(likelihood: Likelihood, p: ArrayLike) -> float:
    """Negative log evidence of the parameters with the fractional Bayes factor
    b = 1 / sqrt(m).

    Notes
    -----
    -log E = (1 - b) * NLL(p) - k / 2 * log(b) where k = len(p). The
    complexity of the model expression is not taken into account.
    """
    p = as_parameter_vector(p)
    b = 1.0 / math.sqrt(likelihood.n_observations)

    return (1.0 - b) * likelihood.neg_log_likelihood(p) - 0.5 * p.size * math.log(b)
