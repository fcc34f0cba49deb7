# Copyright 2024-2025 pynlr authors. All rights reserved.

import math

import autograd.numpy as anp
import numpy as np
import pytest
from autograd import grad, hessian
from scipy.stats import norm

from pynlr.likelihoods.gaussian import GaussianLikelihood
from pynlr.likelihoods.simple_gaussian import SimpleGaussianLikelihood


def simple_gaussian_nll_autodiff(model, x, y, s_err):
    def nll(p):
        res = model(p, x) - y
        return 0.5 * y.size * anp.log(2.0 * anp.pi * s_err**2) + 0.5 * anp.sum(
            res**2
        ) / s_err**2

    return nll


@pytest.mark.parametrize(
    "s_err",
    [pytest.param(0.3, id="s_err_0.3"), pytest.param(1.7, id="s_err_1.7")],
)
def test_simple_gaussian_evaluate_likelihood(generate_gaussian_data, exponential_model, s_err):
    x, y, _, p = generate_gaussian_data

    likelihood_instance = SimpleGaussianLikelihood(x, y, exponential_model, noise_sigma=s_err)

    nll = likelihood_instance.neg_log_likelihood(p)
    nll_ref = -np.sum(norm.logpdf(y, loc=exponential_model(p, x), scale=s_err))

    assert np.allclose(nll, nll_ref)

    # equivalent to a Gaussian likelihood with a constant noise vector
    gaussian = GaussianLikelihood(
        x, y, exponential_model, noise_sigma=np.full(y.size, s_err)
    )
    assert np.isclose(nll, gaussian.neg_log_likelihood(p))


def test_simple_gaussian_derivatives(generate_gaussian_data, exponential_model):
    x, y, _, p = generate_gaussian_data
    s_err = 0.4

    likelihood_instance = SimpleGaussianLikelihood(x, y, exponential_model, noise_sigma=s_err)

    gradient = np.zeros(2)
    nll = likelihood_instance.neg_log_likelihood_gradient(p, gradient)
    fisher_information = likelihood_instance.fisher_information(p)

    nll_autodiff = simple_gaussian_nll_autodiff(exponential_model, x, y, s_err)

    assert nll == likelihood_instance.neg_log_likelihood(p)
    assert np.allclose(gradient, grad(nll_autodiff)(p))
    assert np.array_equal(fisher_information, fisher_information.T)
    assert np.allclose(fisher_information, hessian(nll_autodiff)(p))


def test_simple_gaussian_parameter_count(generate_gaussian_data, exponential_model):
    x, y, _, _ = generate_gaussian_data

    likelihood_instance = SimpleGaussianLikelihood(x, y, exponential_model)

    assert likelihood_instance.dispersion == 1.0
    assert likelihood_instance.n_model_parameters == 2
    assert likelihood_instance.n_likelihood_parameters == 1
    assert likelihood_instance.n_parameters == 3


@pytest.mark.parametrize(
    "s_err",
    [
        pytest.param(0.0, id="zero"),
        pytest.param(-1.0, id="negative"),
        pytest.param(np.nan, id="nan"),
        pytest.param(np.inf, id="inf"),
    ],
)
def test_simple_gaussian_invalid_dispersion(exponential_model, s_err):
    x = np.linspace(0.0, 1.0, 5)
    y = np.ones(5)

    with pytest.raises(ValueError):
        SimpleGaussianLikelihood(x, y, exponential_model, noise_sigma=s_err)

    likelihood_instance = SimpleGaussianLikelihood(x, y, exponential_model)
    with pytest.raises(ValueError):
        likelihood_instance.dispersion = s_err

    assert likelihood_instance.dispersion == 1.0


def test_simple_gaussian_best_neg_log_likelihood(generate_gaussian_data, exponential_model):
    x, y, _, p = generate_gaussian_data
    s_err = 0.25

    likelihood_instance = SimpleGaussianLikelihood(x, y, exponential_model, noise_sigma=s_err)

    best_nll = likelihood_instance.best_neg_log_likelihood(p)

    assert np.isclose(best_nll, 0.5 * y.size * math.log(2.0 * math.pi * s_err**2))
    assert likelihood_instance.neg_log_likelihood(p) >= best_nll

    res = exponential_model(p, x) - y
    assert np.isclose(likelihood_instance.deviance(p), np.sum(res**2) / s_err**2)


def test_simple_gaussian_estimate_dispersion(generate_gaussian_data, exponential_model):
    x, y, _, p = generate_gaussian_data

    likelihood_instance = SimpleGaussianLikelihood(x, y, exponential_model)

    s_err = likelihood_instance.estimate_dispersion(p)

    res = exponential_model(p, x) - y
    assert np.isclose(s_err, np.sqrt(np.sum(res**2) / (y.size - 2)))
    assert likelihood_instance.dispersion == s_err


def test_simple_gaussian_estimate_dispersion_without_dof(exponential_model):
    x = np.array([[0.0], [1.0]])
    y = np.array([1.0, 2.0])

    likelihood_instance = SimpleGaussianLikelihood(x, y, exponential_model)

    with pytest.raises(ValueError):
        likelihood_instance.estimate_dispersion(np.array([1.0, 1.0]))


def test_simple_gaussian_clone(generate_gaussian_data, exponential_model):
    x, y, _, p = generate_gaussian_data

    likelihood_instance = SimpleGaussianLikelihood(x, y, exponential_model, noise_sigma=0.5)
    clone = likelihood_instance.clone()

    assert clone.dispersion == 0.5
    assert clone.neg_log_likelihood(p) == likelihood_instance.neg_log_likelihood(p)

    # the dispersion is not shared
    clone.dispersion = 2.0
    assert likelihood_instance.dispersion == 0.5
    assert clone.neg_log_likelihood(p) != likelihood_instance.neg_log_likelihood(p)
