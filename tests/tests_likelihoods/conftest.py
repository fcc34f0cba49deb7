# Copyright 2024-2025 pynlr authors. All rights reserved.

import numpy as np
import pytest

N_OBSERVATIONS = [
    pytest.param(5, id="5_observations"),
    pytest.param(20, id="20_observations"),
    pytest.param(100, id="100_observations"),
]


SEEDS = [
    pytest.param(0, id="seed_0"),
    pytest.param(1, id="seed_1"),
]


@pytest.fixture(params=N_OBSERVATIONS, autouse=False)
def n_observations(request):
    return request.param


@pytest.fixture(params=SEEDS, autouse=False)
def seed(request):
    return request.param


@pytest.fixture(scope="function", autouse=False)
def generate_gaussian_data(n_observations: int, seed: int):
    """Noisy observations of p0 * exp(p1 * x) with observation specific noise."""
    rng = np.random.default_rng(seed)

    x = rng.uniform(0.0, 1.0, size=(n_observations, 1))
    p_true = np.array([2.0, -1.5])
    sigma = rng.uniform(0.1, 0.5, size=n_observations)
    y = p_true[0] * np.exp(p_true[1] * x[:, 0]) + sigma * rng.standard_normal(
        n_observations
    )

    # evaluate away from the data generating parameters
    p = p_true + rng.uniform(-0.2, 0.2, size=2)

    return x, y, sigma, p


@pytest.fixture(scope="function", autouse=False)
def generate_bernoulli_data(n_observations: int, seed: int):
    """Binary observations with a logistic success probability."""
    rng = np.random.default_rng(seed)

    x = rng.uniform(-2.0, 2.0, size=(n_observations, 1))
    p_true = np.array([0.5, 1.5])
    prob = 1.0 / (1.0 + np.exp(-(p_true[0] + p_true[1] * x[:, 0])))
    y = rng.binomial(n=1, p=prob).astype(np.float64)

    p = p_true + rng.uniform(-0.2, 0.2, size=2)

    return x, y, p
