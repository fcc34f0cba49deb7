# Copyright 2024-2025 pynlr authors. All rights reserved.

import numpy as np
from scipy.linalg import LinAlgError, cholesky
from scipy.linalg.lapack import dpotri

from pynlr import NDArray
from pynlr.configs.pynlr_config import SolverConfig
from pynlr.core.solver import Solver, SolverError


class ScipySolver(Solver):
    """Solver based on the upper Cholesky factor U with A = U^T U."""

    def __init__(
        self,
        config: SolverConfig,
        **kwargs,
    ) -> None:
        """Initializes the solver."""
        super().__init__(config)

        self.U: NDArray = None
        self.A_inv: NDArray = None

    def cholesky(self, A: NDArray, **kwargs) -> None:
        """Compute Cholesky factor of input matrix."""

        A = np.array(A, dtype=np.float64)

        try:
            self.U = cholesky(A, lower=False, check_finite=True)
        except (LinAlgError, ValueError) as e:
            self.U = None
            raise SolverError("Cannot decompose Hessian (Hessian not SPD?)") from e

        self.A_inv = None

    def full_inverse(self, **kwargs) -> NDArray:
        """Compute inverse of input matrix using Cholesky factor.

        LAPACK only fills the upper triangle of the inverse, the lower
        triangle is mirrored from it.
        """

        if self.U is None:
            raise ValueError("Cholesky factor not computed")

        A_inv, info = dpotri(self.U, lower=0)
        if info != 0:
            raise SolverError("Cannot invert Hessian")

        A_inv = np.triu(A_inv) + np.triu(A_inv, k=1).T

        if not np.all(np.isfinite(A_inv)):
            raise SolverError("Cannot invert Hessian")

        self.A_inv = A_inv

        return self.A_inv

    def get_solver_memory(self) -> int:
        """Return the memory used by the solver in number of bytes."""
        n_bytes = 0
        if self.U is not None:
            n_bytes += self.U.nbytes
        if self.A_inv is not None:
            n_bytes += self.A_inv.nbytes
        return n_bytes
