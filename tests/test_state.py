import numpy as np
import pytest

from mpcc_cost.vehicle.state import (
    INPUT_FIELDS, NS, NU, NX, SI, SLACK_FIELDS, STATE_FIELDS, IndexTable, make_state,
)


def test_dimensions():
    assert (NX, NU, NS) == (10, 3, 3)
    assert (SI.nx, SI.nu, SI.ns) == (NX, NU, NS)


def test_offsets_are_a_bijection():
    assert sorted(SI.state.values()) == list(range(NX))
    assert sorted(SI.inputs.values()) == list(range(NU))
    assert sorted(SI.slacks.values()) == list(range(NS))
    for i, name in enumerate(STATE_FIELDS):
        assert getattr(SI, name) == i
    assert [getattr(SI, n) for n in INPUT_FIELDS] == [0, 1, 2]
    assert [getattr(SI, n) for n in SLACK_FIELDS] == [0, 1, 2]


@pytest.mark.parametrize("state", [
    {"X": 0, "Y": 0},        # duplicate offset
    {"X": 0, "Y": 2},        # gap
    {"X": 1, "Y": 2},        # does not start at zero
])
def test_non_bijective_table_rejected(state):
    with pytest.raises(ValueError):
        IndexTable(state=state, inputs={"dD": 0}, slacks={"con_track": 0})


def test_shared_names_rejected():
    with pytest.raises(ValueError):
        IndexTable(state={"X": 0, "dD": 1}, inputs={"dD": 0}, slacks={"con_track": 0})


def test_table_is_read_only():
    with pytest.raises(AttributeError):
        SI.X = 3
    with pytest.raises(TypeError):
        SI.state["X"] = 3
    with pytest.raises(AttributeError):
        SI.not_a_field


def test_make_state():
    x = make_state(X=1.0, vx=10.0, s=2.5)
    assert x.shape == (NX,)
    assert x[SI.X] == 1.0
    assert x[SI.vx] == 10.0
    assert x[SI.s] == 2.5
    assert np.count_nonzero(x) == 3


def test_make_state_unknown_field():
    with pytest.raises(KeyError):
        make_state(Z=1.0)
