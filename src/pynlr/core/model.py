# Copyright 2024-2025 pynlr authors. All rights reserved.

from typing import Callable

import numpy as np
from autograd.core import make_vjp
from autograd.extend import vspace

from pynlr import NDArray

ModelFunction = Callable[[NDArray, NDArray], NDArray]


class ParametricModel:
    """Parametric regression model f(p, X).

    The model function maps a parameter vector ``p`` of length
    ``n_parameters`` and an input matrix ``X`` of shape (m, d) to the vector
    of the m predictions. It must be written with ``autograd.numpy`` so that
    its partial derivatives with respect to ``p`` can be derived.

    Parameters
    ----------
    func : ModelFunction
        Model function ``func(p, X) -> yhat``.
    n_parameters : int
        Number of parameters of the model.
    name : str, optional
        Human readable name, used in reports.

    Examples
    --------
    >>> import autograd.numpy as anp
    >>> model = ParametricModel(lambda p, X: p[0] * anp.exp(p[1] * X[:, 0]), 2)
    """

    def __init__(
        self,
        func: ModelFunction,
        n_parameters: int,
        name: str = None,
    ) -> None:
        if n_parameters < 0:
            raise ValueError(
                f"n_parameters must be non-negative, got {n_parameters}."
            )

        self.func: ModelFunction = func
        self.n_parameters: int = int(n_parameters)
        self.name: str = name if name is not None else getattr(func, "__name__", "f")

    def __call__(self, p: NDArray, X: NDArray) -> NDArray:
        return self.func(p, X)

    def __repr__(self) -> str:
        return f"ParametricModel({self.name}, n_parameters={self.n_parameters})"

    def partial_derivative(self, index: int) -> "ParametricModel":
        """Return the model of the partial derivative df/dp_index.

        The derivative is the Jacobian-vector product of the model in the
        direction of the unit vector e_index, so evaluating it costs a small
        multiple of one model evaluation, independent of the number of rows.
        The returned model has the same parameters as this model and can be
        differentiated again, which is how second derivatives of the model
        are obtained.
        """
        if not 0 <= index < self.n_parameters:
            raise ValueError(
                f"Parameter index {index} out of range for a model with {self.n_parameters} parameters."
            )

        func = self.func
        direction = np.zeros(self.n_parameters, dtype=np.float64)
        direction[index] = 1.0

        def _partial_derivative(p, X):
            _, jvp = linearize(func, p, X)
            return jvp(direction)

        return ParametricModel(
            _partial_derivative,
            self.n_parameters,
            name=f"d{self.name}/dp{index}",
        )

    def gradient(self) -> list["ParametricModel"]:
        """Return the partial derivative models for all parameters."""
        return [self.partial_derivative(j) for j in range(self.n_parameters)]


def linearize(func: ModelFunction, p: NDArray, X: NDArray):
    """Evaluate func(p, X) and build its Jacobian-vector product.

    The vector-Jacobian product of the model is linear in its argument, so
    differentiating it once more gives the Jacobian-vector product
    (reverse-over-reverse). Each call of the returned ``jvp(v)`` is one
    backward pass over the recorded graph, i.e. one column J @ v of the
    Jacobian for all rows at once.

    Returns
    -------
    f : NDArray
        Model output at p.
    jvp : Callable[[NDArray], NDArray]
        Function v -> J(p) @ v.
    """
    vjp, f = make_vjp(lambda q: func(q, X), p)
    jvp, _ = make_vjp(vjp, vspace(f).zeros())

    return f, jvp


def as_parameter_vector(p: NDArray) -> NDArray:
    """Convert p into a contiguous float64 vector."""
    return np.ascontiguousarray(p, dtype=np.float64).reshape(-1)
