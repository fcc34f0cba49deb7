# Copyright 2024-2025 pynlr authors. All rights reserved.

from pynlr.configs.pynlr_config import SolverConfig
from pynlr.core.solver import Solver
from pynlr.solvers.dense_solver import DenseSolver
from pynlr.solvers.scipy_solver import ScipySolver


def get_solver(config: SolverConfig) -> Solver:
    """Instantiate the solver selected in the configuration."""
    if config.type == "dense":
        return DenseSolver(config=config)
    elif config.type == "scipy":
        return ScipySolver(config=config)
    else:
        raise ValueError(f"Unknown solver type: {config.type}")


__all__ = ["DenseSolver", "ScipySolver", "get_solver"]
