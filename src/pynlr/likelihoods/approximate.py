# Copyright 2024-2025 pynlr authors. All rights reserved.

import logging
import sys
from typing import TextIO

import numpy as np
from scipy import stats
from tabulate import tabulate

from pynlr import ArrayLike, NDArray
from pynlr.configs.pynlr_config import PynlrConfig
from pynlr.core.evaluator import ModelEvaluator
from pynlr.core.likelihood import Likelihood
from pynlr.core.model import ParametricModel, as_parameter_vector
from pynlr.core.solver import SolverError
from pynlr.solvers import get_solver


class ApproximateLikelihood(Likelihood):
    """Laplace approximation of a likelihood around its maximum likelihood
    estimate (MLE).

    The negative log-likelihood is replaced by its second order Taylor
    expansion around the MLE p_opt. The gradient at the MLE is assumed to be
    zero, so the expansion has no linear term:

    .. math:: NLL(p) = NLL_min + 0.5 (p - p_opt)^T H (p - p_opt)

    The statistics (standard errors, correlation matrix, confidence and
    prediction intervals) are only valid for the MLE.
    """

    def __init__(
        self,
        x: ArrayLike,
        y: ArrayLike,
        model: ParametricModel,
        min_neg_log_likelihood: float,
        p_opt: ArrayLike,
        hessian: ArrayLike,
        config: PynlrConfig = None,
    ) -> None:
        """Initializes the approximate likelihood.

        Parameters
        ----------
        x : ArrayLike
            Input matrix of shape (m, d). Only used for compatibility with
            the other likelihoods.
        y : ArrayLike
            Target vector of length m. Its length sets the degrees of freedom
            of the intervals.
        model : ParametricModel
            The fitted model.
        min_neg_log_likelihood : float
            Negative log-likelihood at the MLE.
        p_opt : ArrayLike
            The MLE.
        hessian : ArrayLike
            Hessian of the negative log-likelihood at the MLE.
        config : PynlrConfig, optional
            Configuration (solver type and default alpha).
        """
        super().__init__(x, y, model, n_likelihood_parameters=0)

        self.config = config if config is not None else PynlrConfig()

        p_opt = np.array(p_opt, dtype=np.float64).reshape(-1)
        hessian = np.array(hessian, dtype=np.float64)
        n = p_opt.size

        if hessian.shape != (n, n):
            raise ValueError(
                f"Hessian must have shape ({n}, {n}) for {n} parameters, got {hessian.shape}."
            )

        p_opt.flags.writeable = False
        hessian.flags.writeable = False

        self.min_neg_log_likelihood: float = float(min_neg_log_likelihood)
        self.p_opt: NDArray = p_opt
        self.hessian: NDArray = hessian

    @classmethod
    def from_likelihood(
        cls,
        likelihood: Likelihood,
        p_opt: ArrayLike,
        config: PynlrConfig = None,
    ) -> "ApproximateLikelihood":
        """Build the Laplace approximation of a fitted likelihood at its MLE."""
        p_opt = as_parameter_vector(p_opt)

        return cls(
            likelihood.x,
            likelihood.y,
            likelihood.model,
            min_neg_log_likelihood=likelihood.neg_log_likelihood(p_opt),
            p_opt=p_opt,
            hessian=likelihood.fisher_information(p_opt),
            config=config,
        )

    def neg_log_likelihood_gradient(
        self,
        p: NDArray,
        gradient: NDArray = None,
    ) -> float:
        p = self._check_snapshot_parameters(p)
        d = p - self.p_opt

        H_d = self.hessian @ d
        nll = self.min_neg_log_likelihood + 0.5 * np.dot(d, H_d)

        if gradient is not None:
            gradient[:] = H_d

        return float(nll)

    def fisher_information(self, p: NDArray) -> NDArray:
        self._check_snapshot_parameters(p)
        # the approximation is quadratic everywhere
        return np.array(self.hessian)

    def best_neg_log_likelihood(self, p: NDArray) -> float:
        return self.min_neg_log_likelihood

    def clone(self) -> "ApproximateLikelihood":
        clone = self.__class__.__new__(self.__class__)
        clone._init_from(self)

        # the snapshot is read-only
        clone.config = self.config
        clone.min_neg_log_likelihood = self.min_neg_log_likelihood
        clone.p_opt = self.p_opt
        clone.hessian = self.hessian

        return clone

    # --- Statistics -----------------------------------------------------------
    def calc_parameter_statistics(
        self, p_opt: ArrayLike
    ) -> tuple[NDArray, NDArray, NDArray]:
        """Standard errors, covariance and correlation matrix of the parameters.

        The covariance matrix is the inverse of the Hessian, computed through
        its Cholesky factor.

        Parameters
        ----------
        p_opt : ArrayLike
            The MLE.

        Returns
        -------
        std_errors : NDArray
            Standard errors of the parameters.
        inv_hessian : NDArray
            Covariance matrix of the parameters.
        correlation : NDArray
            Correlation matrix of the parameters.

        Raises
        ------
        SolverError
            If the Hessian is not symmetric positive definite or cannot be
            inverted.
        """
        n = as_parameter_vector(p_opt).size
        if n != self.hessian.shape[0]:
            raise ValueError(
                f"Expected {self.hessian.shape[0]} parameters, got {n}."
            )

        solver = get_solver(self.config.solver)
        try:
            solver.cholesky(self.hessian)
            inv_hessian = solver.full_inverse()
        except SolverError as e:
            logging.error(f"ApproximateLikelihood: {e}")
            raise

        logging.debug(
            f"ApproximateLikelihood: solver memory {solver.get_solver_memory()} bytes"
        )

        std_errors = np.sqrt(np.diag(inv_hessian))

        correlation = np.zeros((n, n), dtype=np.float64)
        for i in range(n):
            for j in range(i, n):
                correlation[i, j] = inv_hessian[j, i] / (std_errors[i] * std_errors[j])
                correlation[j, i] = correlation[i, j]

        return std_errors, inv_hessian, correlation

    def get_parameter_intervals(
        self,
        p_opt: ArrayLike,
        alpha: float,
    ) -> tuple[NDArray, NDArray]:
        """Pointwise (1 - alpha) confidence intervals of the parameters.

        Notes
        -----
        Wald-type intervals p_opt_i +/- se_i * t(1 - alpha / 2, m - k) based on
        the quadratic approximation. They are exact only for linear models.

        Returns
        -------
        low, high : NDArray
            Lower and upper bounds.
        """
        p_opt = as_parameter_vector(p_opt)

        std_errors, _, _ = self.calc_parameter_statistics(p_opt)
        t = self._t_quantile(alpha, p_opt.size)

        return p_opt - std_errors * t, p_opt + std_errors * t

    def get_prediction_intervals(
        self,
        p_opt: ArrayLike,
        x: ArrayLike,
        alpha: float,
    ) -> tuple[NDArray, NDArray, NDArray]:
        """Pointwise (1 - alpha) confidence intervals of the model output.

        Notes
        -----
        The parameter covariance is propagated linearly (delta method):
        var_i = J_i H^-1 J_i^T where J_i is the Jacobian row of the model for
        input row x_i. The bands are valid pointwise, not simultaneously.

        Parameters
        ----------
        p_opt : ArrayLike
            The MLE.
        x : ArrayLike
            Input matrix of shape (n_rows, d), may differ from the training
            inputs.
        alpha : float
            Significance level.

        Returns
        -------
        res_std_error : NDArray
            Standard error of the prediction for each row.
        low, high : NDArray
            Lower and upper bounds.
        """
        p_opt = as_parameter_vector(p_opt)
        n = p_opt.size

        x = np.asarray(x, dtype=np.float64)
        if x.ndim == 1:
            x = x.reshape(-1, 1)
        n_rows = x.shape[0]

        _, inv_hessian, _ = self.calc_parameter_statistics(p_opt)

        # the evaluator of the likelihood is bound to the training inputs
        evaluator = ModelEvaluator(
            self.model, [x[:, c] for c in range(x.shape[1])], n_rows
        )
        y_jac = np.zeros((n_rows, n), dtype=np.float64)
        y_pred = evaluator.evaluate_with_jacobian(p_opt, jac=y_jac)

        variance = np.einsum("ij,jk,ik->i", y_jac, inv_hessian, y_jac)
        res_std_error = np.sqrt(np.maximum(variance, 0.0))

        t = self._t_quantile(alpha, n)

        return res_std_error, y_pred - res_std_error * t, y_pred + res_std_error * t

    def write_statistics(
        self,
        writer: TextIO = None,
        alpha: float = None,
    ) -> str:
        """Write a table of the parameter estimates and their statistics.

        One row per parameter with the estimate, its standard error, z score,
        confidence bounds and the lower triangle of the correlation matrix.

        Returns
        -------
        table : str
            The written table.
        """
        if writer is None:
            writer = sys.stdout
        if alpha is None:
            alpha = self.config.alpha

        std_errors, _, correlation = self.calc_parameter_statistics(self.p_opt)
        low, high = self.get_parameter_intervals(self.p_opt, alpha)

        rows = []
        for i in range(self.p_opt.size):
            rows.append(
                [
                    i,
                    f"{self.p_opt[i]:.4e}",
                    f"{std_errors[i]:.4e}",
                    f"{self.p_opt[i] / std_errors[i]:.2e}",
                    f"{low[i]:.4e}",
                    f"{high[i]:.4e}",
                    " ".join(f"{c:.2f}" for c in correlation[i, : i + 1]),
                ]
            )

        table = tabulate(
            rows,
            headers=["Para", "Estimate", "Std. error", "z Score", "Lower", "Upper", "Correlation matrix"],
            tablefmt="plain",
            colalign=("right", "right", "right", "right", "right", "right", "left"),
            disable_numparse=True,
        )

        writer.write(table + "\n\n")

        return table

    def _t_quantile(self, alpha: float, n_parameters: int) -> float:
        if not 0.0 < alpha < 1.0:
            raise ValueError(f"alpha must be in (0, 1), got {alpha}.")

        dof = self.n_observations - n_parameters
        if dof <= 0:
            raise ValueError(
                f"Not enough observations ({self.n_observations}) for {n_parameters} parameters."
            )

        return stats.t.ppf(1.0 - alpha / 2.0, dof)

    def _check_snapshot_parameters(self, p: NDArray) -> NDArray:
        p = as_parameter_vector(p)
        if p.size != self.p_opt.size:
            raise ValueError(
                f"Expected {self.p_opt.size} parameters, got {p.size}."
            )
        return p
