# Copyright 2024-2025 pynlr authors. All rights reserved.

import numpy as np

from pynlr import ArrayLike, NDArray
from pynlr.core.likelihood import Likelihood, clamp_neg_log_likelihood, symmetrize
from pynlr.core.model import ParametricModel


class GaussianLikelihood(Likelihood):
    """Gaussian likelihood with known, observation-specific noise.

    The residuals are independent with e_i ~ N(0, sigma_i) where sigma_i is
    fixed and not estimated.
    """

    def __init__(
        self,
        x: ArrayLike,
        y: ArrayLike,
        model: ParametricModel,
        noise_sigma: ArrayLike = None,
        inv_noise_sigma: ArrayLike = None,
    ) -> None:
        """Initializes the Gaussian likelihood.

        Parameters
        ----------
        x : ArrayLike
            Input matrix of shape (m, d).
        y : ArrayLike
            Target vector of length m.
        model : ParametricModel
            Model of the expected value of y.
        noise_sigma : ArrayLike, optional
            Standard deviation sigma_i of the noise of each observation.
        inv_noise_sigma : ArrayLike, optional
            Inverse standard deviation 1 / sigma_i of each observation.
            Exactly one of noise_sigma and inv_noise_sigma must be given.
        """
        super().__init__(x, y, model, n_likelihood_parameters=0)

        if (noise_sigma is None) == (inv_noise_sigma is None):
            raise ValueError(
                "Exactly one of noise_sigma and inv_noise_sigma must be provided."
            )

        if noise_sigma is not None:
            sigma2 = np.broadcast_to(
                np.asarray(noise_sigma, dtype=np.float64) ** 2, (self.n_observations,)
            )
        else:
            sigma2 = np.broadcast_to(
                1.0 / np.asarray(inv_noise_sigma, dtype=np.float64) ** 2,
                (self.n_observations,),
            )

        if not np.all(np.isfinite(sigma2)) or np.any(sigma2 <= 0.0):
            raise ValueError("Noise sigma must be positive and finite.")

        self.sigma2: NDArray = np.array(sigma2)
        self.sigma2.flags.writeable = False

    def neg_log_likelihood_gradient(
        self,
        p: NDArray,
        gradient: NDArray = None,
    ) -> float:
        """Evaluate the Gaussian negative log-likelihood.

        Notes
        -----
        NLL = sum_i 0.5 * log(2 * pi * sigma_i^2) + 0.5 * (yhat_i - y_i)^2 / sigma_i^2
        dNLL/dp_j = sum_i (yhat_i - y_i) * J_ij / sigma_i^2

        Parameters
        ----------
        p : NDArray
            Model parameters.
        gradient : NDArray, optional
            Output buffer for the gradient.

        Returns
        -------
        nll : float
            Negative log-likelihood.
        """
        p = self._check_parameters(p)

        y_pred, y_jac = self._evaluate(p, with_jacobian=gradient is not None)
        res = y_pred - self.y

        nll = self.best_neg_log_likelihood(p) + 0.5 * np.sum(res * res / self.sigma2)

        if gradient is not None:
            gradient[:] = (res / self.sigma2) @ y_jac

        return clamp_neg_log_likelihood(nll)

    def fisher_information(self, p: NDArray) -> NDArray:
        """Hessian of the Gaussian negative log-likelihood.

        Notes
        -----
        FIM_jk = sum_i (J_ij * J_ik + (yhat_i - y_i) * H_ijk) / sigma_i^2
        """
        p = self._check_parameters(p)

        y_pred, y_jac = self._evaluate(p, with_jacobian=True)
        y_hess = self._model_hessian(p)  # parameters x observations x parameters

        res = y_pred - self.y
        w = 1.0 / self.sigma2

        hessian = (y_jac * w[:, None]).T @ y_jac + np.einsum(
            "i,jik->jk", res * w, y_hess
        )

        return symmetrize(hessian)

    def best_neg_log_likelihood(self, p: NDArray) -> float:
        # residuals are zero
        return float(np.sum(0.5 * np.log(2.0 * np.pi * self.sigma2)))

    def clone(self) -> "GaussianLikelihood":
        clone = self.__class__.__new__(self.__class__)
        clone._init_from(self)
        clone.sigma2 = self.sigma2

        return clone
