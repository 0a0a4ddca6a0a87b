"""
State, input and slack layout shared by every cost component.

State x = [X, Y, phi, vx, vy, r, s, D, delta, vs]
Input u = [dD, dDelta, dVs]
Slack   = [con_track, con_tire, con_alpha]

The physical inputs D, delta and vs are part of the state; the optimizer
controls their rates of change.
"""
from types import MappingProxyType

import numpy as np


STATE_FIELDS = ("X", "Y", "phi", "vx", "vy", "r", "s", "D", "delta", "vs")
INPUT_FIELDS = ("dD", "dDelta", "dVs")
SLACK_FIELDS = ("con_track", "con_tire", "con_alpha")

NX = len(STATE_FIELDS)
NU = len(INPUT_FIELDS)
NS = len(SLACK_FIELDS)


def _check_bijection(offsets, size, kind):
    if sorted(offsets.values()) != list(range(size)):
        raise ValueError(
            f"{kind} offsets {dict(offsets)} must map onto 0..{size - 1} exactly once"
        )


class IndexTable:
    """
    Name -> offset lookup into the state, input and slack vectors.

    Offsets are reachable as attributes, e.g. ``SI.vx`` or ``SI.con_tire``.
    """

    def __init__(self, state, inputs, slacks):
        _check_bijection(state, len(state), "State")
        _check_bijection(inputs, len(inputs), "Input")
        _check_bijection(slacks, len(slacks), "Slack")

        clash = (set(state) & set(inputs)) | (set(state) & set(slacks)) | (set(inputs) & set(slacks))
        if clash:
            raise ValueError(f"Field names used in more than one vector: {sorted(clash)}")

        object.__setattr__(self, "state", MappingProxyType(dict(state)))
        object.__setattr__(self, "inputs", MappingProxyType(dict(inputs)))
        object.__setattr__(self, "slacks", MappingProxyType(dict(slacks)))

    @property
    def nx(self):
        return len(self.state)

    @property
    def nu(self):
        return len(self.inputs)

    @property
    def ns(self):
        return len(self.slacks)

    def __getattr__(self, name):
        for table in ("state", "inputs", "slacks"):
            offsets = object.__getattribute__(self, table)
            if name in offsets:
                return offsets[name]
        raise AttributeError(name)

    def __setattr__(self, name, value):
        raise AttributeError("IndexTable is read-only")


SI = IndexTable(
    state={name: i for i, name in enumerate(STATE_FIELDS)},
    inputs={name: i for i, name in enumerate(INPUT_FIELDS)},
    slacks={name: i for i, name in enumerate(SLACK_FIELDS)},
)


def make_state(**fields):
    """
    Build a state vector from named fields; missing fields are zero.

    Example:
        x = make_state(X=1.0, Y=2.0, vx=10.0)
    """
    x = np.zeros(NX)
    for name, value in fields.items():
        if name not in SI.state:
            raise KeyError(f"Unknown state field '{name}'")
        x[SI.state[name]] = value
    return x
