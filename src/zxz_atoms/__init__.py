"""zxz_atoms – Initial-guess trajectories and pulse plots for Rydberg atom chains."""

__version__ = "0.1.0"

from .isomorphisms import (
    iso_vec_to_operator,
    iso_vec_unitary_fidelity,
    operator_to_iso_vec,
    unitary_fidelity,
)
from .named_trajectory import NamedTrajectory, derivative
from .plotting import plot_controls
from .pulses import blackman_controls, blackman_pulse, constant_controls
from .trajectories import add_derivatives, unitary_rollout_trajectory, unitary_trajectory

__all__ = [
    "NamedTrajectory",
    "add_derivatives",
    "blackman_controls",
    "blackman_pulse",
    "constant_controls",
    "derivative",
    "iso_vec_to_operator",
    "iso_vec_unitary_fidelity",
    "operator_to_iso_vec",
    "plot_controls",
    "unitary_fidelity",
    "unitary_rollout_trajectory",
    "unitary_trajectory",
]
