# Copyright 2024-2025 pynlr authors. All rights reserved.

import numpy as np

from pynlr import ArrayLike, NDArray
from pynlr.core.likelihood import Likelihood, clamp_neg_log_likelihood, symmetrize
from pynlr.core.model import ParametricModel


class BernoulliLikelihood(Likelihood):
    """Bernoulli likelihood.

    The target is binary (0/1) and the model output is interpreted as the
    probability of y = 1. Targets are validated on every evaluation.
    """

    def __init__(
        self,
        x: ArrayLike,
        y: ArrayLike,
        model: ParametricModel,
    ) -> None:
        """Initializes the Bernoulli likelihood."""
        super().__init__(x, y, model, n_likelihood_parameters=0)

    def neg_log_likelihood_gradient(
        self,
        p: NDArray,
        gradient: NDArray = None,
    ) -> float:
        """Evaluate the Bernoulli negative log-likelihood.

        Notes
        -----
        NLL = - sum_i y_i * log(yhat_i) + (1 - y_i) * log(1 - yhat_i)

        Raises
        ------
        ValueError
            If the target is not binary.
        """
        self._check_target()
        p = self._check_parameters(p)

        y_pred, y_jac = self._evaluate(p, with_jacobian=gradient is not None)
        is_one = self.y == 1.0

        with np.errstate(divide="ignore", invalid="ignore"):
            nll = -np.sum(np.log(y_pred[is_one])) - np.sum(np.log(1.0 - y_pred[~is_one]))

            if gradient is not None:
                # d/dyhat of the NLL per observation
                d_nll = np.where(is_one, -1.0 / y_pred, 1.0 / (1.0 - y_pred))
                gradient[:] = d_nll @ y_jac

        return clamp_neg_log_likelihood(nll)

    def fisher_information(self, p: NDArray) -> NDArray:
        """Hessian of the Bernoulli negative log-likelihood.

        Notes
        -----
        FIM_jk = sum_i s_i * ((yhat_i - 1) * yhat_i * H_ijk * (y_i - yhat_i)
                 + (-2 * y_i * yhat_i + yhat_i^2 + y_i) * J_ij * J_ik)
        with s_i = 1 / ((1 - yhat_i)^2 * yhat_i^2).
        """
        self._check_target()
        p = self._check_parameters(p)

        y_pred, y_jac = self._evaluate(p, with_jacobian=True)
        y_hess = self._model_hessian(p)  # parameters x observations x parameters
        y = self.y

        s = 1.0 / ((1.0 - y_pred) ** 2 * y_pred**2)
        hessian_weight = s * (y_pred - 1.0) * y_pred * (y - y_pred)
        gradient_weight = s * (-2.0 * y * y_pred + y_pred**2 + y)

        hessian = np.einsum("i,jik->jk", hessian_weight, y_hess) + (
            y_jac * gradient_weight[:, None]
        ).T @ y_jac

        return symmetrize(hessian)

    def best_neg_log_likelihood(self, p: NDArray) -> float:
        # a perfect classifier has zero loss
        return 0.0

    def clone(self) -> "BernoulliLikelihood":
        clone = self.__class__.__new__(self.__class__)
        clone._init_from(self)

        return clone

    def _check_target(self) -> None:
        if not np.all((self.y == 0.0) | (self.y == 1.0)):
            raise ValueError(
                "target variable must be binary (0/1) for Bernoulli likelihood"
            )
