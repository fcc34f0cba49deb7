# Copyright 2024-2025 pynlr authors. All rights reserved.

import numpy as np
from scipy.linalg import solve_triangular

from pynlr import NDArray
from pynlr.configs.pynlr_config import SolverConfig
from pynlr.core.solver import Solver, SolverError


class DenseSolver(Solver):
    def __init__(
        self,
        config: SolverConfig,
        **kwargs,
    ) -> None:
        """Initializes the DenseSolver class.

        The solver works on the lower Cholesky factor L with A = L L^T.

        Parameters
        ----------
        config : SolverConfig
            Configuration object for the solver.

        Returns
        -------
        None
        """
        super().__init__(config)

        self.L: NDArray = None
        self.A_inv: NDArray = None

    def cholesky(self, A: NDArray, **kwargs) -> None:
        A = np.array(A, dtype=np.float64)
        self.L = None

        if not np.all(np.isfinite(A)):
            raise SolverError("Cannot decompose Hessian (Hessian not SPD?)")

        try:
            self.L = np.linalg.cholesky(A)
        except np.linalg.LinAlgError as e:
            raise SolverError("Cannot decompose Hessian (Hessian not SPD?)") from e

        self.A_inv = None

    def full_inverse(self, **kwargs) -> NDArray:
        if self.L is None:
            raise ValueError("Cholesky factor not computed")

        L_inv = solve_triangular(
            self.L, np.eye(self.L.shape[0]), lower=True
        )
        A_inv = L_inv.T @ L_inv

        if not np.all(np.isfinite(A_inv)):
            raise SolverError("Cannot invert Hessian")

        self.A_inv = A_inv

        return self.A_inv

    def get_solver_memory(self) -> int:
        """Return the memory used by the solver in number of bytes."""
        n_bytes = 0
        if self.L is not None:
            n_bytes += self.L.nbytes
        if self.A_inv is not None:
            n_bytes += self.A_inv.nbytes
        return n_bytes
