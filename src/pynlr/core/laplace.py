# Copyright 2024-2025 pynlr authors. All rights reserved.

import logging

import numpy as np
from tabulate import tabulate

from pynlr import ArrayLike, NDArray
from pynlr.configs.pynlr_config import PynlrConfig
from pynlr.core.likelihood import Likelihood
from pynlr.core.model import as_parameter_vector
from pynlr.core.solver import SolverError
from pynlr.likelihoods.approximate import ApproximateLikelihood
from pynlr.utils import add_str_header, boxify


class LaplaceApproximation:
    """Parameter statistics of a fitted likelihood.

    Computes the Fisher information at the parameter estimate and derives
    standard errors and the correlation matrix from it. If the Fisher
    information cannot be decomposed or inverted, the problem is logged and
    only the point estimates are kept.
    """

    def __init__(
        self,
        param_est: ArrayLike,
        likelihood: Likelihood,
        config: PynlrConfig = None,
    ) -> None:
        self.config = config if config is not None else PynlrConfig()

        self.param_est: NDArray = as_parameter_vector(param_est).copy()
        self.n_observations: int = likelihood.n_observations

        self.param_std_error: NDArray = None
        self.correlation: NDArray = None
        self.covariance: NDArray = None

        fisher_information = likelihood.fisher_information(self.param_est)

        # used for preconditioning
        self.diag_hessian: NDArray = np.diag(fisher_information).copy()

        self._approximation = ApproximateLikelihood(
            likelihood.x,
            likelihood.y,
            likelihood.model,
            min_neg_log_likelihood=likelihood.neg_log_likelihood(self.param_est),
            p_opt=self.param_est,
            hessian=fisher_information,
            config=self.config,
        )

        try:
            (
                self.param_std_error,
                self.covariance,
                self.correlation,
            ) = self._approximation.calc_parameter_statistics(self.param_est)
        except SolverError:
            logging.warning(
                "Problem while calculating statistics. Prediction intervals will not work."
            )

    @property
    def has_statistics(self) -> bool:
        return self.param_std_error is not None

    @property
    def approximate_likelihood(self) -> ApproximateLikelihood:
        return self._approximation

    def get_parameter_intervals(self, alpha: float = None) -> tuple[NDArray, NDArray]:
        """Confidence intervals of the parameters, see
        :meth:`ApproximateLikelihood.get_parameter_intervals`."""
        self._check_statistics()
        if alpha is None:
            alpha = self.config.alpha

        return self._approximation.get_parameter_intervals(self.param_est, alpha)

    def get_prediction_intervals(
        self,
        x: ArrayLike,
        alpha: float = None,
    ) -> tuple[NDArray, NDArray, NDArray]:
        """Confidence intervals of the model output for the inputs x, see
        :meth:`ApproximateLikelihood.get_prediction_intervals`."""
        self._check_statistics()
        if alpha is None:
            alpha = self.config.alpha

        return self._approximation.get_prediction_intervals(self.param_est, x, alpha)

    def __str__(self) -> str:
        if self.has_statistics:
            low, high = self.get_parameter_intervals()
            values = [
                [i, p, se, lo, hi]
                for i, (p, se, lo, hi) in enumerate(
                    zip(self.param_est, self.param_std_error, low, high)
                )
            ]
            headers = ["Para", "Estimate", "Std. error", "Lower", "Upper"]
        else:
            values = [[i, p] for i, p in enumerate(self.param_est)]
            headers = ["Para", "Estimate"]

        table = tabulate(values, headers=headers, tablefmt="fancy_grid", floatfmt=".4e")
        table = add_str_header(
            title=f"Laplace approximation ({self.n_observations} observations)",
            table=table,
        )

        return boxify(table)

    def _check_statistics(self) -> None:
        if not self.has_statistics:
            raise RuntimeError(
                "Parameter statistics are not available, the Fisher information is not positive definite."
            )
