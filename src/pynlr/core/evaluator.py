# Copyright 2024-2025 pynlr authors. All rights reserved.

from typing import Sequence

import numpy as np

from pynlr import NDArray
from pynlr.core.model import ParametricModel, as_parameter_vector, linearize


class ModelEvaluator:
    """Evaluates a parametric model and its Jacobian on a fixed input matrix.

    The evaluator is bound to one dataset. Evaluating the same model on new
    inputs requires a new evaluator.

    Parameters
    ----------
    model : ParametricModel
        Model to evaluate.
    x_columns : Sequence[NDArray]
        Input matrix given column-wise (d arrays of length m).
    n_rows : int
        Number of rows m. Required because ``x_columns`` may be empty.
    """

    def __init__(
        self,
        model: ParametricModel,
        x_columns: Sequence[NDArray],
        n_rows: int,
    ) -> None:
        self.model = model
        self.n_rows = n_rows

        if len(x_columns) > 0:
            self.X: NDArray = np.asfortranarray(np.column_stack(x_columns), dtype=np.float64)
        else:
            self.X: NDArray = np.zeros((n_rows, 0), dtype=np.float64, order="F")

        if self.X.shape[0] != n_rows:
            raise ValueError(
                f"Input columns have {self.X.shape[0]} rows but n_rows is {n_rows}."
            )

        self._func = model.func

    def evaluate(
        self,
        p: NDArray,
        f: NDArray = None,
    ) -> NDArray:
        """Evaluate the model.

        Parameters
        ----------
        p : NDArray
            Parameter vector.
        f : NDArray, optional
            Output buffer of length m. Overwritten when given.

        Returns
        -------
        f : NDArray
            Model predictions.
        """
        p = as_parameter_vector(p)
        f_eval = np.broadcast_to(
            np.asarray(self._func(p, self.X), dtype=np.float64), (self.n_rows,)
        )

        if f is None:
            return np.array(f_eval)

        f[:] = f_eval
        return f

    def evaluate_with_jacobian(
        self,
        p: NDArray,
        f: NDArray = None,
        jac: NDArray = None,
    ) -> NDArray:
        """Evaluate the model and, if a buffer is given, its Jacobian.

        Parameters
        ----------
        p : NDArray
            Parameter vector.
        f : NDArray, optional
            Output buffer of length m for the predictions.
        jac : NDArray, optional
            Output buffer of shape (m, k) for the Jacobian. When omitted the
            Jacobian is not computed.

        Returns
        -------
        f : NDArray
            Model predictions.
        """
        if jac is None:
            return self.evaluate(p, f)

        p = as_parameter_vector(p)
        f_eval = np.broadcast_to(
            np.asarray(self._fill_jacobian(p, jac), dtype=np.float64), (self.n_rows,)
        )

        if f is None:
            return np.array(f_eval)

        f[:] = f_eval
        return f

    def jacobian(
        self,
        p: NDArray,
        jac: NDArray = None,
    ) -> NDArray:
        """Evaluate only the Jacobian (m x k) of the model.

        The buffer ``jac`` is overwritten when given.
        """
        p = as_parameter_vector(p)
        if jac is None:
            jac = np.zeros((self.n_rows, p.size), dtype=np.float64)

        self._fill_jacobian(p, jac)

        return jac

    def _fill_jacobian(self, p: NDArray, jac: NDArray) -> NDArray:
        # one Jacobian-vector product per parameter, each covering all rows
        f_eval, jvp = linearize(self._func, p, self.X)

        for j, direction in enumerate(np.eye(p.size)):
            jac[:, j] = jvp(direction)

        return f_eval
