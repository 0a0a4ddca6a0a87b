HORIZON = 40  # stages 0..N, N is terminal

# Contouring cost weights
COST = dict(
    q_c=0.1,
    q_c_N_mult=10000.0,
    q_l=1000.0,
    q_vs=0.02,
    q_r=1e-7,
    q_r_N_mult=10.0,
    q_beta=0.1,
    r_D=1e-4,
    r_delta=1e-4,
    r_vs=1e-4,
    r_dD=0.01,
    r_dDelta=1.0,
    r_dVs=0.001,
    sc_quad_track=100.0,
    sc_quad_tire=1.0,
    sc_quad_alpha=1.0,
    sc_lin_track=0.0,
    sc_lin_tire=1.0,
    sc_lin_alpha=0.0
)

# Demo track used by main_simple
TRACK = dict(
    radius=8.0,
    length=60.0,
    amplitude=5.0,
    width=7.4,
    points=250
)

REFERENCE_SPEED = 2.0
DT = 0.05
