"""
Quadratic stage cost of the model-predictive contouring controller.

For every stage k the nonlinear contouring objective is expanded around the
predicted state x_k into the solver form

    0.5 x^T Q x + q^T x + 0.5 u^T R u + r^T u + 0.5 s^T Z s + z^T s

with u the input rates and s the constraint slacks. Q and R are therefore
twice the weights of the underlying squared penalties.
"""
import logging
from typing import NamedTuple

import numpy as np

from mpcc_cost.track.track import Path
from mpcc_cost.vehicle.state import NS, NU, NX, SI

logger = logging.getLogger(__name__)

# curvature is only evaluated when ddx^2 + ddy^2 reaches this value
CURVATURE_DENOMINATOR_MIN = 1.0


class TrackPoint(NamedTuple):
    x_ref: float
    y_ref: float
    dx_ref: float
    dy_ref: float
    theta_ref: float
    dtheta_ref: float


class ErrorInfo(NamedTuple):
    error: np.ndarray    # (2,) contouring, lag
    d_error: np.ndarray  # (2, NX)


class CostMatrix(NamedTuple):
    Q: np.ndarray
    R: np.ndarray
    S: np.ndarray
    q: np.ndarray
    r: np.ndarray
    Z: np.ndarray
    z: np.ndarray


def _cost_matrix(Q=None, R=None, q=None, r=None, Z=None, z=None):
    """Bundle the given blocks, zero-filling the rest, as read-only arrays."""
    blocks = dict(
        Q=np.zeros((NX, NX)) if Q is None else Q,
        R=np.zeros((NU, NU)) if R is None else R,
        S=np.zeros((NX, NU)),
        q=np.zeros(NX) if q is None else q,
        r=np.zeros(NU) if r is None else r,
        Z=np.zeros((NS, NS)) if Z is None else Z,
        z=np.zeros(NS) if z is None else z,
    )
    for name, block in blocks.items():
        block = np.array(block, dtype=float)
        block.setflags(write=False)
        blocks[name] = block
    return CostMatrix(**blocks)


class Cost:
    """
    Builds the per-stage quadratic cost for a horizon of N stages.

    Stage k == N is terminal and uses the terminal multipliers on the
    contouring and yaw rate weights. The lag weight is never multiplied.

    Args:
        cost_params: Cost weight dictionary, see config.params.COST
        N: Horizon length
    """

    def __init__(self, cost_params, N):
        self.cost_param = dict(cost_params)
        self.N = N
        logger.debug("Cost initialised for horizon N=%d", N)

    def get_ref_point(self, track, x):
        """
        Evaluate the path geometry at the arc length held in the state.

        The curvature term is forced to zero unless ddx^2 + ddy^2 is at least
        CURVATURE_DENOMINATOR_MIN.
        """
        s = x[SI.s]

        x_ref, y_ref = track.position(s)
        dx_ref, dy_ref = track.first_derivative(s)
        theta_ref = np.arctan2(dy_ref, dx_ref)
        ddx_ref, ddy_ref = track.second_derivative(s)

        dtheta_ref = 0.0
        denominator = ddx_ref*ddx_ref + ddy_ref*ddy_ref
        if abs(denominator) >= CURVATURE_DENOMINATOR_MIN:
            dtheta_ref = (dx_ref*ddy_ref - dy_ref*ddx_ref) / denominator

        return TrackPoint(float(x_ref), float(y_ref), float(dx_ref), float(dy_ref),
                          float(theta_ref), float(dtheta_ref))

    def get_error_info(self, track, x):
        """
        Contouring and lag error of the position (X, Y) with respect to the
        reference point at s, together with their Jacobian w.r.t. the state.

        Only the X, Y and s columns of the Jacobian are non-zero.
        """
        X = x[SI.X]
        Y = x[SI.Y]
        tp = self.get_ref_point(track, x)
        sin_t, cos_t = np.sin(tp.theta_ref), np.cos(tp.theta_ref)

        contouring_error = -sin_t*(tp.x_ref - X) + cos_t*(tp.y_ref - Y)
        lag_error = cos_t*(tp.x_ref - X) + sin_t*(tp.y_ref - Y)

        # derivatives w.r.t. s, through theta_ref(s) and the reference position
        d_contouring_ds = (tp.dtheta_ref*cos_t*(X - tp.x_ref)
                           + tp.dtheta_ref*sin_t*(Y - tp.y_ref)
                           - tp.dx_ref*sin_t
                           + tp.dy_ref*cos_t)
        d_lag_ds = (tp.dtheta_ref*sin_t*(X - tp.x_ref)
                    - tp.dtheta_ref*cos_t*(Y - tp.y_ref)
                    + tp.dx_ref*cos_t
                    + tp.dy_ref*sin_t)

        d_error = np.zeros((2, NX))
        d_error[0, SI.X] = sin_t
        d_error[0, SI.Y] = -cos_t
        d_error[0, SI.s] = d_contouring_ds

        d_error[1, SI.X] = -cos_t
        d_error[1, SI.Y] = -sin_t
        d_error[1, SI.s] = d_lag_ds

        return ErrorInfo(np.array([contouring_error, lag_error]), d_error)

    def get_beta_cost(self, x):
        """
        Linearised side slip penalty (q_beta * beta)^2 with beta = atan(vy/vx).

        Requires vx bounded away from zero; at standstill the slip angle and
        its Jacobian are undefined and the result is not finite.
        """
        vx = x[SI.vx]
        vy = x[SI.vy]

        d_beta = np.zeros(NX)
        d_beta[SI.vx] = -vy/(vx*vx + vy*vy)
        d_beta[SI.vy] = vx/(vx*vx + vy*vy)

        # zero order term of the beta approximation
        beta_zero = np.arctan(vy/vx) - d_beta @ x

        q_beta = self.cost_param["q_beta"]
        Q_beta = 2.0*q_beta*np.outer(d_beta, d_beta)
        q_beta_lin = q_beta*2.0*beta_zero*d_beta

        return _cost_matrix(Q=Q_beta, q=q_beta_lin)

    def get_contouring_cost(self, track, x, k):
        """
        Second order expansion of the contouring and lag error penalty at x,
        plus yaw rate regularisation and the progress reward.
        """
        p = self.cost_param
        error_info = self.get_error_info(track, x)
        d_error = error_info.d_error

        terminal = k >= self.N
        contouring_weight = np.diag([
            p["q_c_N_mult"]*p["q_c"] if terminal else p["q_c"],
            p["q_l"],
        ])

        Q_contouring = d_error.T @ contouring_weight @ d_error
        Q_contouring[SI.r, SI.r] += p["q_r_N_mult"]*p["q_r"] if terminal else p["q_r"]
        Q_contouring = 2.0*Q_contouring

        gradient = error_info.error @ contouring_weight @ d_error
        q_contouring = 2.0*gradient - 2.0*(x @ d_error.T @ contouring_weight @ d_error)
        # progress maximisation
        q_contouring[SI.vs] = -p["q_vs"]

        return _cost_matrix(Q=Q_contouring, q=q_contouring)

    def get_input_cost(self):
        """Cost on the physical inputs (in the state) and on their rates."""
        p = self.cost_param
        Q_input = np.zeros((NX, NX))
        R_input = np.zeros((NU, NU))

        Q_input[SI.D, SI.D] = p["r_D"]
        Q_input[SI.delta, SI.delta] = p["r_delta"]
        Q_input[SI.vs, SI.vs] = p["r_vs"]

        R_input[SI.dD, SI.dD] = p["r_dD"]
        R_input[SI.dDelta, SI.dDelta] = p["r_dDelta"]
        R_input[SI.dVs, SI.dVs] = p["r_dVs"]

        return _cost_matrix(Q=2.0*Q_input, R=2.0*R_input)

    def get_soft_constraint_cost(self):
        p = self.cost_param
        Z_cost = np.zeros((NS, NS))
        z_cost = np.zeros(NS)

        Z_cost[SI.con_track, SI.con_track] = p["sc_quad_track"]
        Z_cost[SI.con_tire, SI.con_tire] = p["sc_quad_tire"]
        Z_cost[SI.con_alpha, SI.con_alpha] = p["sc_quad_alpha"]

        z_cost[SI.con_track] = p["sc_lin_track"]
        z_cost[SI.con_tire] = p["sc_lin_tire"]
        z_cost[SI.con_alpha] = p["sc_lin_alpha"]

        return _cost_matrix(Z=Z_cost, z=z_cost)

    def get_cost(self, track: Path, x, k):
        """
        Full quadratic cost of stage k, expanded around the state x.

        Args:
            track: Reference path exposing position, first_derivative and
                second_derivative of the arc length
            x: Predicted state at stage k, shape (NX,)
            k: Stage index, 0..N

        Returns:
            CostMatrix with a symmetric Q and a zero cross term S
        """
        x = np.asarray(x, dtype=float)
        contouring_cost = self.get_contouring_cost(track, x, k)
        input_cost = self.get_input_cost()
        beta_cost = self.get_beta_cost(x)
        soft_con_cost = self.get_soft_constraint_cost()

        Q_not_sym = contouring_cost.Q + input_cost.Q + beta_cost.Q
        Q = 0.5*(Q_not_sym.T + Q_not_sym)
        R = contouring_cost.R + input_cost.R + beta_cost.R
        q = contouring_cost.q + input_cost.q + beta_cost.q
        r = contouring_cost.r + input_cost.r + beta_cost.r

        return _cost_matrix(Q=Q, R=R, q=q, r=r, Z=soft_con_cost.Z, z=soft_con_cost.z)
