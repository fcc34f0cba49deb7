# Copyright 2024-2025 pynlr authors. All rights reserved.

import numpy as np
import pytest

from pynlr.configs.pynlr_config import SolverConfig
from pynlr.solvers.dense_solver import DenseSolver
from pynlr.solvers.scipy_solver import ScipySolver

SOLVER = [
    pytest.param((DenseSolver, "dense"), id="DenseSolver"),
    pytest.param((ScipySolver, "scipy"), id="ScipySolver"),
]


@pytest.fixture(params=SOLVER, autouse=False)
def solver_instance(request):
    solver, solver_type = request.param
    return solver(SolverConfig(type=solver_type))


@pytest.fixture(params=[1, 2, 5], autouse=False)
def n_parameters(request):
    return request.param


@pytest.fixture(scope="function", autouse=False)
def spd_dense(n_parameters: int):
    """Returns a random, symmetric positive definite matrix."""
    rng = np.random.default_rng(n_parameters)

    A = rng.uniform(-1.0, 1.0, size=(n_parameters, n_parameters))
    A = (A + A.T) / 2

    # Make the matrix diagonally dominant
    for i in range(n_parameters):
        A[i, i] = 1 + np.sum(np.abs(A[i, :]))

    return A
