# Copyright 2024-2025 pynlr authors. All rights reserved.

import math

import numpy as np

from pynlr import ArrayLike, NDArray
from pynlr.core.likelihood import Likelihood, clamp_neg_log_likelihood, symmetrize
from pynlr.core.model import ParametricModel


class SimpleGaussianLikelihood(Likelihood):
    """Gaussian likelihood with iid noise e_i ~ N(0, sErr).

    The noise scale sErr (the dispersion) counts as one parameter of the
    likelihood but is not part of the parameter vector p passed to the
    negative log-likelihood, its gradient or the Fisher information. It is
    estimated separately, e.g. with :meth:`estimate_dispersion`.
    """

    def __init__(
        self,
        x: ArrayLike,
        y: ArrayLike,
        model: ParametricModel,
        noise_sigma: float = 1.0,
    ) -> None:
        """Initializes the homoscedastic Gaussian likelihood."""
        super().__init__(x, y, model, n_likelihood_parameters=1)

        self.dispersion = noise_sigma

    @property
    def dispersion(self) -> float:
        """Standard deviation sErr of the noise."""
        return self._s_err

    @dispersion.setter
    def dispersion(self, value: float) -> None:
        value = float(value)
        if not math.isfinite(value) or value <= 0.0:
            raise ValueError(f"Dispersion must be positive and finite, got {value}.")
        self._s_err = value

    def neg_log_likelihood_gradient(
        self,
        p: NDArray,
        gradient: NDArray = None,
    ) -> float:
        """Evaluate the negative log-likelihood for a shared noise scale.

        Notes
        -----
        NLL = 0.5 * m * log(2 * pi * sErr^2) + 0.5 * sum_i (yhat_i - y_i)^2 / sErr^2
        """
        p = self._check_parameters(p)
        s2 = self._s_err * self._s_err

        y_pred, y_jac = self._evaluate(p, with_jacobian=gradient is not None)
        res = y_pred - self.y

        nll = self.best_neg_log_likelihood(p) + 0.5 * np.dot(res, res) / s2

        if gradient is not None:
            gradient[:] = (res @ y_jac) / s2

        return clamp_neg_log_likelihood(nll)

    def fisher_information(self, p: NDArray) -> NDArray:
        p = self._check_parameters(p)
        s2 = self._s_err * self._s_err

        y_pred, y_jac = self._evaluate(p, with_jacobian=True)
        y_hess = self._model_hessian(p)

        res = y_pred - self.y
        hessian = (y_jac.T @ y_jac + np.einsum("i,jik->jk", res, y_hess)) / s2

        return symmetrize(hessian)

    def best_neg_log_likelihood(self, p: NDArray) -> float:
        return 0.5 * self.n_observations * math.log(
            2.0 * math.pi * self._s_err * self._s_err
        )

    def estimate_dispersion(self, p: NDArray) -> float:
        """Set the dispersion to the residual standard error at p.

        Uses s = sqrt(SSR / (m - k)), the variance estimate based on m - k
        degrees of freedom.

        Returns
        -------
        s_err : float
            New dispersion.
        """
        p = self._check_parameters(p)
        dof = self.n_observations - self.n_model_parameters
        if dof <= 0:
            raise ValueError(
                f"Cannot estimate the dispersion with {self.n_observations} observations and {self.n_model_parameters} parameters."
            )

        res = self.predict(p) - self.y
        self.dispersion = math.sqrt(np.dot(res, res) / dof)

        return self.dispersion

    def clone(self) -> "SimpleGaussianLikelihood":
        clone = self.__class__.__new__(self.__class__)
        clone._init_from(self)
        clone._s_err = self._s_err

        return clone
