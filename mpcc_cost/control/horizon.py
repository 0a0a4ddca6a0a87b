import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import scipy.sparse as sp

from mpcc_cost.vehicle.state import NX

logger = logging.getLogger(__name__)


def horizon_cost(cost, track, states, max_workers=None):
    """
    Expand the stage cost around every predicted state of the horizon.

    Stages only read the track and the cost weights, so they may be evaluated
    concurrently; the result is identical for any worker count.

    Args:
        cost: Cost instance with horizon length N
        track: Reference path
        states: Predicted states x_0..x_N, shape (N+1, NX)
        max_workers: Evaluate stages on a thread pool of this size when given

    Returns:
        costs: List of N+1 CostMatrix, one per stage
    """
    states = np.asarray(states, dtype=float)
    if states.ndim != 2 or states.shape[1] != NX:
        raise ValueError(f"States must have shape (N+1, {NX}), got {states.shape}")
    if len(states) != cost.N + 1:
        raise ValueError(f"Expected {cost.N + 1} states for horizon {cost.N}, got {len(states)}")

    stages = range(cost.N + 1)
    if max_workers is None:
        costs = [cost.get_cost(track, states[k], k) for k in stages]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            costs = list(pool.map(lambda k: cost.get_cost(track, states[k], k), stages))

    logger.debug("Assembled %d stage costs (workers=%s)", len(costs), max_workers)
    return costs


def stack_cost(costs):
    """
    Stack per-stage costs into one sparse QP objective 0.5 z^T P z + q^T z.

    Decision vector z is stacked as:
    [x_0, ..., x_N, u_0, ..., u_N, s_0, ..., s_N]
    The state-input cross terms S_k land in the off-diagonal x_k/u_k blocks.
    """
    if len(costs) == 0:
        raise ValueError("At least one stage cost required")

    n_stages = len(costs)
    nx, nu = costs[0].S.shape
    ns = costs[0].Z.shape[0]

    state_block = sp.block_diag([c.Q for c in costs])
    input_block = sp.block_diag([c.R for c in costs])
    slack_block = sp.block_diag([c.Z for c in costs])
    cross_block = sp.block_diag([c.S for c in costs])

    zeros_xs = sp.csc_matrix((n_stages * nx, n_stages * ns))
    zeros_us = sp.csc_matrix((n_stages * nu, n_stages * ns))
    P = sp.bmat([
        [state_block, cross_block, zeros_xs],
        [cross_block.T, input_block, zeros_us],
        [zeros_xs.T, zeros_us.T, slack_block],
    ], format="csc")

    q = np.hstack([c.q for c in costs] + [c.r for c in costs] + [c.z for c in costs])

    return P, q


def evaluate_cost(cost_matrix, x, u, slack):
    """Value of the quadratic stage model at (x, u, slack)."""
    c = cost_matrix
    return float(
        0.5 * x @ c.Q @ x + c.q @ x
        + 0.5 * u @ c.R @ u + c.r @ u
        + 0.5 * slack @ c.Z @ slack + c.z @ slack
        + x @ c.S @ u
    )
