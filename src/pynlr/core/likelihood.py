# Copyright 2024-2025 pynlr authors. All rights reserved.

import threading
from abc import ABC, abstractmethod

import numpy as np

from pynlr import ArrayLike, NDArray
from pynlr.core.evaluator import ModelEvaluator
from pynlr.core.model import ParametricModel, as_parameter_vector

# Returned instead of NaN/inf negative log-likelihoods of diverging models.
NLL_SENTINEL: float = 1e300


class Likelihood(ABC):
    """Abstract core class for likelihood.

    A likelihood couples a parametric model with a dataset and a noise model.
    The parameters of the likelihood are the parameters of the model plus
    ``n_likelihood_parameters`` nuisance parameters of the noise model (e.g.
    the noise scale of a Gaussian).
    """

    def __init__(
        self,
        x: ArrayLike,
        y: ArrayLike,
        model: ParametricModel,
        n_likelihood_parameters: int = 0,
    ) -> None:
        """Initializes the likelihood.

        Parameters
        ----------
        x : ArrayLike
            Input matrix of shape (m, d).
        y : ArrayLike
            Target vector of length m.
        model : ParametricModel
            Model of the expected value of y.
        n_likelihood_parameters : int, optional
            Number of additional parameters of the noise model.
        """
        x = np.array(x, dtype=np.float64)
        if x.ndim == 1:
            x = x.reshape(-1, 1)
        y = np.array(y, dtype=np.float64).reshape(-1)

        if x.ndim != 2 or x.shape[0] != y.size:
            raise ValueError(
                f"x must be a matrix with one row per observation, got shape {x.shape} for {y.size} observations."
            )

        x.flags.writeable = False
        y.flags.writeable = False

        self._x: NDArray = x
        self._y: NDArray = y
        self._x_columns: tuple[NDArray, ...] = tuple(
            np.ascontiguousarray(x[:, c]) for c in range(x.shape[1])
        )
        for column in self._x_columns:
            column.flags.writeable = False

        self.n_observations: int = y.size
        self.n_likelihood_parameters: int = n_likelihood_parameters

        self._model_lock = threading.Lock()
        self.model = model

    def _init_from(self, other: "Likelihood") -> None:
        """Initialize a clone of other.

        The read-only dataset is shared, the evaluators are rebuilt for the
        clone.
        """
        self._x = other._x
        self._y = other._y
        self._x_columns = other._x_columns

        self.n_observations = other.n_observations
        self.n_likelihood_parameters = other.n_likelihood_parameters

        self._model_lock = threading.Lock()
        self.model = other.model

    # --- Model and derived artifacts ----------------------------------------
    @property
    def model(self) -> ParametricModel:
        return self._model

    @model.setter
    def model(self, model: ParametricModel) -> None:
        # derived artifacts are built first and published together
        with self._model_lock:
            n_model_parameters = model.n_parameters
            evaluator = ModelEvaluator(model, self._x_columns, self.n_observations)
            gradient_evaluators = [
                ModelEvaluator(df_dpj, self._x_columns, self.n_observations)
                for df_dpj in model.gradient()
            ]

            self._model = model
            self._n_model_parameters = n_model_parameters
            self.evaluator = evaluator
            self.gradient_evaluators = gradient_evaluators

    @property
    def x(self) -> NDArray:
        return self._x

    @property
    def y(self) -> NDArray:
        return self._y

    @property
    def x_columns(self) -> tuple[NDArray, ...]:
        return self._x_columns

    @property
    def n_model_parameters(self) -> int:
        return self._n_model_parameters

    @property
    def n_parameters(self) -> int:
        return self._n_model_parameters + self.n_likelihood_parameters

    # --- Likelihood protocol --------------------------------------------------
    def neg_log_likelihood(self, p: NDArray) -> float:
        """Evaluate the negative log-likelihood at p."""
        return self.neg_log_likelihood_gradient(p, gradient=None)

    @abstractmethod
    def neg_log_likelihood_gradient(
        self,
        p: NDArray,
        gradient: NDArray = None,
    ) -> float:
        """Evaluate the negative log-likelihood and optionally its gradient.

        Parameters
        ----------
        p : NDArray
            Parameter vector.
        gradient : NDArray, optional
            Output buffer of length len(p). When given it is overwritten with
            the gradient of the negative log-likelihood. When omitted the
            gradient is not computed.

        Returns
        -------
        nll : float
            Negative log-likelihood.
        """
        ...

    @abstractmethod
    def fisher_information(self, p: NDArray) -> NDArray:
        """Evaluate the Fisher information matrix at p.

        The Fisher information is the negative Hessian of the log-likelihood,
        i.e. the Hessian of the negative log-likelihood. It is symmetric.

        Parameters
        ----------
        p : NDArray
            Parameter vector.

        Returns
        -------
        fisher_information : NDArray
            Matrix of shape (len(p), len(p)).
        """
        ...

    @abstractmethod
    def best_neg_log_likelihood(self, p: NDArray) -> float:
        """Negative log-likelihood of a model without residual error."""
        ...

    @abstractmethod
    def clone(self) -> "Likelihood":
        """Return an independent copy sharing the dataset and the model."""
        ...

    def deviance(self, p: NDArray) -> float:
        """Deviance 2 * (NLL(p) - NLL_best(p))."""
        return 2.0 * (self.neg_log_likelihood(p) - self.best_neg_log_likelihood(p))

    def predict(self, p: NDArray) -> NDArray:
        """Model predictions for the training inputs."""
        return self.evaluator.evaluate(p)

    # --- Shared derivative bookkeeping ---------------------------------------
    def _evaluate(
        self,
        p: NDArray,
        with_jacobian: bool,
    ) -> tuple[NDArray, NDArray]:
        """Predictions and, if requested, the Jacobian (m x k) of the model."""
        p = as_parameter_vector(p)
        f = np.zeros(self.n_observations, dtype=np.float64)

        if not with_jacobian:
            return self.evaluator.evaluate(p, f), None

        jac = np.zeros((self.n_observations, p.size), dtype=np.float64)
        self.evaluator.evaluate_with_jacobian(p, f, jac)

        return f, jac

    def _model_hessian(self, p: NDArray) -> NDArray:
        """Second derivatives of the model predictions.

        Returns
        -------
        hessian : NDArray
            Tensor of shape (k, m, k) where layer j is the Jacobian of the
            partial derivative df/dp_j for all observations.
        """
        p = as_parameter_vector(p)
        n = p.size

        hessian = np.zeros((n, self.n_observations, n), dtype=np.float64)
        for j in range(n):
            self.gradient_evaluators[j].jacobian(p, jac=hessian[j])

        return hessian

    def _check_parameters(self, p: NDArray) -> NDArray:
        p = as_parameter_vector(p)
        if p.size != self.n_model_parameters:
            raise ValueError(
                f"Expected {self.n_model_parameters} model parameters, got {p.size}."
            )
        return p


def symmetrize(A: NDArray) -> NDArray:
    """Average A with its transpose so that A is exactly symmetric."""
    return 0.5 * (A + A.T)


def clamp_neg_log_likelihood(nll: float) -> float:
    """Replace NaN and infinite negative log-likelihoods by NLL_SENTINEL."""
    if not np.isfinite(nll):
        return NLL_SENTINEL
    return float(nll)
