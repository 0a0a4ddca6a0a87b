import numpy as np

from mpcc_cost.control.linearize import numerical_jacobian


def test_linear_map():
    A = np.array([[1.0, 2.0, 0.0], [0.0, -1.0, 3.0]])
    x = np.array([0.5, -1.0, 2.0])
    J, f0 = numerical_jacobian(lambda z: A @ z, x)
    np.testing.assert_allclose(J, A, atol=1e-6)
    np.testing.assert_allclose(f0, A @ x)


def test_scalar_function():
    J, f0 = numerical_jacobian(lambda z: z[0]**2 + 3.0*z[1], np.array([2.0, 1.0]), eps=1e-7)
    assert J.shape == (1, 2)
    np.testing.assert_allclose(J[0], [4.0, 3.0], atol=1e-5)
    assert f0[0] == 7.0
