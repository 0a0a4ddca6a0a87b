"""
Command line demo: expand the contouring cost along a horizon on a demo track
"""
import argparse
import logging

import numpy as np

from mpcc_cost.config.loader import load_cost_params
from mpcc_cost.config.params import COST, DT, HORIZON, REFERENCE_SPEED, TRACK
from mpcc_cost.control.cost import Cost
from mpcc_cost.control.horizon import horizon_cost, stack_cost
from mpcc_cost.track.track import ArcLengthSpline, circular_track, sinusoidal_track, straight_track
from mpcc_cost.vehicle.state import make_state

logger = logging.getLogger(__name__)


def build_track(track_type):
    if track_type == "circle":
        center, width = circular_track(radius=TRACK["radius"], width=TRACK["width"], points=TRACK["points"])
        return ArcLengthSpline(center, closed=True), width
    elif track_type == "sine":
        center, width = sinusoidal_track(length=TRACK["length"], amplitude=TRACK["amplitude"],
                                         width=TRACK["width"], points=TRACK["points"])
    elif track_type == "straight":
        center, width = straight_track(length=TRACK["length"], width=TRACK["width"])
    else:
        raise ValueError(f"Unknown track type: {track_type}")
    return ArcLengthSpline(center), width


def reference_states(track, horizon, speed, offset):
    """
    States placed along the center line at constant speed, shifted sideways
    by offset (positive to the left of the path).
    """
    states = []
    for k in range(horizon + 1):
        s = k * speed * DT
        pos = track.position(s)
        tangent = track.first_derivative(s)
        tangent = tangent / np.linalg.norm(tangent)
        normal = np.array([-tangent[1], tangent[0]])
        X, Y = pos + offset * normal
        states.append(make_state(X=X, Y=Y, phi=np.arctan2(tangent[1], tangent[0]),
                                 vx=speed, s=s, vs=speed))
    return np.array(states)


def run(track_type="sine", horizon=HORIZON, speed=REFERENCE_SPEED, offset=0.5,
        cost_file=None, workers=None):
    cost_params = load_cost_params(cost_file) if cost_file else COST
    track, width = build_track(track_type)
    logger.info("Track '%s': length %.1f m, width %.1f m", track_type, track.length, width)

    cost = Cost(cost_params, horizon)
    states = reference_states(track, horizon, speed, offset)
    costs = horizon_cost(cost, track, states, max_workers=workers)

    for k in range(0, horizon + 1, max(1, horizon // 8)):
        e_c, e_l = cost.get_error_info(track, states[k]).error
        min_eig = np.linalg.eigvalsh(costs[k].Q).min()
        logger.info("Stage %3d: contouring %+.3f, lag %+.3f, min eig(Q) %.2e", k, e_c, e_l, min_eig)

    P, q = stack_cost(costs)
    logger.info("Stacked QP: %d variables, %d non-zeros", P.shape[0], P.nnz)
    return costs


def main(argv=None):
    parser = argparse.ArgumentParser(description='MPCC stage cost expansion along a horizon')
    parser.add_argument('--track', type=str, default='sine',
                        choices=['circle', 'sine', 'straight'],
                        help='Demo track')
    parser.add_argument('--horizon', type=int, default=HORIZON,
                        help='Horizon length N')
    parser.add_argument('--speed', type=float, default=REFERENCE_SPEED,
                        help='Speed along the path (m/s)')
    parser.add_argument('--offset', type=float, default=0.5,
                        help='Lateral offset from the center line (m)')
    parser.add_argument('--cost', type=str, default=None,
                        help='JSON cost file, defaults to config.params.COST')
    parser.add_argument('--workers', type=int, default=None,
                        help='Evaluate stages on a thread pool')
    parser.add_argument('--verbose', action='store_true',
                        help='Debug logging')

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    run(args.track, args.horizon, args.speed, args.offset, args.cost, args.workers)


if __name__ == "__main__":
    main()
