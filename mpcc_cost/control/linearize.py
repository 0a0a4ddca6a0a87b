import numpy as np


def numerical_jacobian(f, x, eps=1e-6):
    """
    Forward-difference Jacobian of f at x.

    Args:
        f: Callable mapping a vector to a scalar or vector
        x: Expansion point
        eps: Perturbation size

    Returns:
        A: Jacobian with shape (len(f(x)), len(x))
        f0: f evaluated at x
    """
    x = np.asarray(x, dtype=float)
    f0 = np.atleast_1d(np.asarray(f(x), dtype=float))
    nx = len(x)

    A = np.zeros((len(f0), nx))
    for i in range(nx):
        dx = np.zeros(nx)
        dx[i] = eps
        A[:, i] = (np.atleast_1d(f(x + dx)) - f0) / eps

    return A, f0
