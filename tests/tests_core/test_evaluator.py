# Copyright 2024-2025 pynlr authors. All rights reserved.

import autograd.numpy as anp
import numpy as np
import pytest

from pynlr.core.evaluator import ModelEvaluator
from pynlr.core.model import ParametricModel


def test_evaluate(exponential_model):
    x = np.linspace(0.0, 1.0, 6)
    p = np.array([1.5, 0.5])

    evaluator = ModelEvaluator(exponential_model, [x], x.size)

    f_ref = p[0] * np.exp(p[1] * x)

    assert np.allclose(evaluator.evaluate(p), f_ref)
    assert evaluator.X.flags.f_contiguous

    f = np.full(x.size, np.nan)
    out = evaluator.evaluate(p, f)
    assert out is f
    assert np.allclose(f, f_ref)


def test_evaluate_with_jacobian(exponential_model):
    x = np.linspace(0.0, 1.0, 6)
    p = np.array([1.5, 0.5])

    evaluator = ModelEvaluator(exponential_model, [x], x.size)

    f = np.zeros(x.size)
    jac = np.full((x.size, 2), np.nan)
    evaluator.evaluate_with_jacobian(p, f, jac)

    jac_ref = np.column_stack([np.exp(p[1] * x), p[0] * x * np.exp(p[1] * x)])

    assert np.allclose(f, p[0] * np.exp(p[1] * x))
    assert np.allclose(jac, jac_ref)


def test_evaluate_multiple_columns():
    model = ParametricModel(lambda p, X: p[0] * X[:, 0] + p[1] * X[:, 1] ** 2, 2)
    x0 = np.array([1.0, 2.0, 3.0])
    x1 = np.array([-1.0, 0.0, 2.0])

    evaluator = ModelEvaluator(model, [x0, x1], 3)

    jac = np.zeros((3, 2))
    f = evaluator.evaluate_with_jacobian(np.array([2.0, 3.0]), jac=jac)

    assert np.allclose(f, 2.0 * x0 + 3.0 * x1**2)
    assert np.allclose(jac, np.column_stack([x0, x1**2]))


def test_evaluate_constant_model():
    # a model without inputs is broadcast to all rows
    model = ParametricModel(lambda p, X: p[0] * anp.ones(X.shape[0]), 1)

    evaluator = ModelEvaluator(model, [], 4)

    assert evaluator.X.shape == (4, 0)
    assert np.allclose(evaluator.evaluate(np.array([3.0])), 3.0)


def test_row_mismatch(exponential_model):
    with pytest.raises(ValueError):
        ModelEvaluator(exponential_model, [np.ones(3)], 4)


def test_jacobian_only(exponential_model):
    x = np.linspace(0.0, 1.0, 6)
    p = np.array([1.5, 0.5])

    evaluator = ModelEvaluator(exponential_model, [x], x.size)

    jac = evaluator.jacobian(p)
    jac_buffer = np.full((x.size, 2), np.nan)
    out = evaluator.jacobian(p, jac_buffer)

    jac_ref = np.column_stack([np.exp(p[1] * x), p[0] * x * np.exp(p[1] * x)])

    assert out is jac_buffer
    assert np.allclose(jac, jac_ref)
    assert np.array_equal(jac, jac_buffer)


def test_jacobian_of_linear_model(linear_model):
    x = np.array([-1.0, 0.0, 2.0])

    evaluator = ModelEvaluator(linear_model, [x], 3)

    assert np.allclose(
        evaluator.jacobian(np.array([0.3, 0.7])), np.column_stack([np.ones(3), x])
    )
