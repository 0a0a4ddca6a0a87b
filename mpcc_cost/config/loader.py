"""
Load contouring cost weights from a JSON cost file
"""
import json
import logging

logger = logging.getLogger(__name__)

# JSON key -> cost parameter name
COST_KEYS = dict(
    qC="q_c",
    qCNmult="q_c_N_mult",
    qL="q_l",
    qVs="q_vs",
    qR="q_r",
    qRNmult="q_r_N_mult",
    qBeta="q_beta",
    rD="r_D",
    rDelta="r_delta",
    rVs="r_vs",
    rdD="r_dD",
    rdDelta="r_dDelta",
    rdVs="r_dVs",
    scQuadTrack="sc_quad_track",
    scQuadTire="sc_quad_tire",
    scQuadAlpha="sc_quad_alpha",
    scLinTrack="sc_lin_track",
    scLinTire="sc_lin_tire",
    scLinAlpha="sc_lin_alpha"
)


def cost_params_from_dict(raw):
    """
    Translate a camelCase cost dictionary into cost parameters.

    Values are converted to float but not range checked. Keys that are not
    cost weights are ignored.

    Raises:
        KeyError: If a cost weight is missing.
    """
    params = {}
    for json_key, name in COST_KEYS.items():
        if json_key not in raw:
            raise KeyError(f"Cost parameter '{json_key}' missing from cost file")
        params[name] = float(raw[json_key])

    unused = sorted(set(raw) - set(COST_KEYS))
    if unused:
        logger.debug("Ignoring unknown cost keys: %s", unused)
    return params


def load_cost_params(path):
    """
    Args:
        path: Path to a JSON file holding the cost weights

    Returns:
        params: Cost parameter dictionary keyed like config.params.COST
    """
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    params = cost_params_from_dict(raw)
    logger.info("Loaded %d cost parameters from %s", len(params), path)
    return params
