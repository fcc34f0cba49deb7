# Copyright 2024-2025 pynlr authors. All rights reserved.
# Central finite differences of scalar functions of parameter vectors, used to
# cross-check analytic gradients and Fisher information matrices.

import numpy as np

from pynlr import ArrayLike, NDArray


def _shifted(x0: ArrayLike, *steps: tuple[int, float]) -> NDArray:
    """Copy of x0 with x0[i] += step for every (i, step) pair."""
    x = np.array(x0, dtype=np.float64)
    for i, step in steps:
        x[i] += step
    return x


def gradient_finite_difference_3pt(f, x0: ArrayLike, *args, h: float = 1e-3) -> NDArray:
    """
    Gradient of f at x0 from the 3-point central stencil.

    Parameters
    ----------
    f: function
        scalar function f(x, *args)
    x0: ArrayLike
        evaluation point
    *args: tuple
        additional arguments to be passed to f
    h: float. default 1e-3
        stepsize.

    Returns
    -------
    gradient: NDArray
        df/dx_i for every component of x0.
    """
    grad = np.zeros(len(x0))

    for i in range(grad.size):
        grad[i] = f(_shifted(x0, (i, h)), *args) - f(_shifted(x0, (i, -h)), *args)

    return grad / (2 * h)


def gradient_finite_difference_5pt(f, x0: ArrayLike, *args, h: float = 1e-3) -> NDArray:
    """Five-point stencil version of :func:`gradient_finite_difference_3pt`."""
    grad = np.zeros(len(x0))

    for i in range(grad.size):
        grad[i] = (
            8 * (f(_shifted(x0, (i, h)), *args) - f(_shifted(x0, (i, -h)), *args))
            - (f(_shifted(x0, (i, 2 * h)), *args) - f(_shifted(x0, (i, -2 * h)), *args))
        )

    return grad / (12 * h)


def hessian_finite_difference_3pt(f, x0: ArrayLike, *args, h: float = 1e-3) -> NDArray:
    """
    Full Hessian of f at x0 from second order central differences.

    Diagonal entries use the 3-point second derivative stencil, off-diagonal
    entries the 4-point mixed stencil. The result is symmetric.

    Parameters
    ----------
    f : function
        Scalar function f(x, *args).
    x0 : ArrayLike
        The point at which to evaluate the Hessian.
    *args : tuple
        Additional arguments to be passed to the function `f`.
    h : float, optional
        The step size for the finite difference approximation. Defaults to 1e-3.

    Returns
    -------
    hessian : NDArray
        Symmetric Hessian matrix of f evaluated at x0.
    """
    n = len(x0)
    hessian = np.zeros((n, n))
    f0 = f(_shifted(x0), *args)

    for i in range(n):
        hessian[i, i] = (
            f(_shifted(x0, (i, h)), *args) - 2 * f0 + f(_shifted(x0, (i, -h)), *args)
        ) / h**2

        for j in range(i + 1, n):
            hessian[i, j] = (
                f(_shifted(x0, (i, h), (j, h)), *args)
                - f(_shifted(x0, (i, h), (j, -h)), *args)
                - f(_shifted(x0, (i, -h), (j, h)), *args)
                + f(_shifted(x0, (i, -h), (j, -h)), *args)
            ) / (4 * h**2)
            hessian[j, i] = hessian[i, j]

    return hessian
