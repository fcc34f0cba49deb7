# Copyright 2024-2025 pynlr authors. All rights reserved.

from os import environ

import autograd.numpy as anp
import numpy as np
import pytest

from pynlr.configs.pynlr_config import PynlrConfig
from pynlr.core.model import ParametricModel

environ["OMP_NUM_THREADS"] = "1"


def exponential(p, X):
    return p[0] * anp.exp(p[1] * X[:, 0])


def logistic(p, X):
    return 1.0 / (1.0 + anp.exp(-(p[0] + p[1] * X[:, 0])))


def straight_line(p, X):
    return p[0] + p[1] * X[:, 0]


@pytest.fixture(scope="function", autouse=False)
def exponential_model() -> ParametricModel:
    return ParametricModel(exponential, 2)


@pytest.fixture(scope="function", autouse=False)
def logistic_model() -> ParametricModel:
    return ParametricModel(logistic, 2)


@pytest.fixture(scope="function", autouse=False)
def linear_model() -> ParametricModel:
    return ParametricModel(straight_line, 2)


@pytest.fixture(scope="function", autouse=False)
def pynlr_config() -> PynlrConfig:
    return PynlrConfig()
