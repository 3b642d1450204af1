"""Example: build an initial-guess trajectory for a two-atom Rydberg chain.

A global Blackman-shaped Rabi drive and a linear detuning sweep are rolled
out through a toy blockade Hamiltonian built with QuTiP. The result is
packaged with a CZ goal, lifted to second-derivative controls, and the
pulses are plotted. It requires QuTiP to be installed.
"""

import numpy as np
import qutip

from zxz_atoms import (
    add_derivatives,
    iso_vec_to_operator,
    plot_controls,
    unitary_fidelity,
    unitary_rollout_trajectory,
)
from zxz_atoms.pulses import blackman_controls, linear_sweep, stack_controls

N_ATOMS = 2
V_BLOCKADE = 2 * np.pi * 24.0  # rad/μs
T_GATE = 0.6  # μs

n_op = qutip.basis(2, 1) * qutip.basis(2, 1).dag()


def site_op(op, i):
    ops = [qutip.qeye(2)] * N_ATOMS
    ops[i] = op
    return qutip.tensor(ops)


H_drive = 0.5 * sum(site_op(qutip.sigmax(), i) for i in range(N_ATOMS)).full()
H_detuning = -sum(site_op(n_op, i) for i in range(N_ATOMS)).full()
H_blockade = V_BLOCKADE * (site_op(n_op, 0) * site_op(n_op, 1)).full()


def G(u, t):
    omega, delta = u
    return omega * H_drive + delta * H_detuning + H_blockade


u_fn = stack_controls(
    blackman_controls(2 * np.pi * 4.0, 0.1, T_GATE),
    linear_sweep(-2 * np.pi * 5.0, 2 * np.pi * 5.0, T_GATE),
)

U_goal = np.diag([1, 1, 1, -1]).astype(np.complex128)

traj = unitary_rollout_trajectory(
    u_fn,
    G,
    T_GATE,
    samples=101,
    U_goal=U_goal,
    control_bounds=[2 * np.pi * 5.0, 2 * np.pi * 10.0],
    verbose=True,
)

U_final = iso_vec_to_operator(traj["U"][:, -1])
print(f"Initial-guess CZ fidelity: {unitary_fidelity(U_final, U_goal):.6f}")

traj = add_derivatives(traj, "u", order=2, rand_data=False)
print(traj)

fig = plot_controls(traj, title="Initial-Guess Rydberg Pulses", save_path="rollout_demo.png")
