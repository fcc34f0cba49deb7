# Copyright 2024-2025 pynlr authors. All rights reserved.

from abc import ABC, abstractmethod

from pynlr import NDArray
from pynlr.configs.pynlr_config import SolverConfig


class SolverError(RuntimeError):
    """Raised when the Cholesky decomposition or the inversion of a matrix fails."""


class Solver(ABC):
    """Abstract core class for numerical solvers of symmetric positive
    definite systems."""

    def __init__(
        self,
        config: SolverConfig,
        **kwargs,
    ) -> None:
        """Initializes the solver.

        Parameters
        ----------
        config : SolverConfig
            Configuration object for the solver.
        """
        self.config = config

    @abstractmethod
    def cholesky(self, A: NDArray, **kwargs) -> None:
        """Compute Cholesky factor of input matrix.

        Parameters
        ----------
        A : NDArray
            Symmetric positive definite input matrix.

        Raises
        ------
        SolverError
            If the matrix cannot be decomposed.
        """
        ...

    @abstractmethod
    def full_inverse(self, **kwargs) -> NDArray:
        """Compute the inverse of the input matrix using Cholesky factor.

        Raises
        ------
        SolverError
            If the matrix cannot be inverted.
        """
        ...

    @abstractmethod
    def get_solver_memory(self) -> int:
        """Return the memory used by the solver in number of bytes"""
        ...
