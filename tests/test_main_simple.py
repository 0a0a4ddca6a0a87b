import json
import logging

import numpy as np
import pytest

from mpcc_cost.config.loader import COST_KEYS
from mpcc_cost.main_simple import build_track, main, reference_states, run
from mpcc_cost.vehicle.state import SI


@pytest.mark.parametrize("track_type", ["circle", "sine", "straight"])
def test_run(track_type):
    costs = run(track_type, horizon=5, speed=2.0, offset=0.3)
    assert len(costs) == 6
    for c in costs:
        np.testing.assert_array_equal(c.Q, c.Q.T)


def test_reference_states_offset():
    track, _ = build_track("straight")
    states = reference_states(track, horizon=4, speed=2.0, offset=0.5)
    assert states.shape == (5, 10)
    np.testing.assert_allclose(states[:, SI.Y], 0.5, atol=1e-9)
    np.testing.assert_allclose(states[:, SI.X], states[:, SI.s], atol=1e-9)


def test_unknown_track():
    with pytest.raises(ValueError):
        build_track("oval")


def test_main_with_cost_file(tmp_path, caplog):
    path = tmp_path / "cost.json"
    path.write_text(json.dumps({json_key: 1.0 for json_key in COST_KEYS}))
    caplog.set_level(logging.INFO)

    main(["--track", "circle", "--horizon", "8", "--cost", str(path), "--workers", "2"])

    assert "Stacked QP" in caplog.text
    assert "Loaded 19 cost parameters" in caplog.text
