"""Initial-guess trajectories for unitary optimal control.

Three steps prepare an optimization problem:

1. :func:`unitary_rollout_trajectory` forward-integrates the Schrödinger
   equation for the evolution operator under a fixed control law.
2. :func:`unitary_trajectory` packages state samples, control samples and
   time grid into a :class:`~zxz_atoms.named_trajectory.NamedTrajectory`
   with bounds and initial / final / goal pins.
3. :func:`add_derivatives` optionally lifts a component to a chain of
   derivatives so that only the highest derivative is a free control.

Component names used throughout: ``"U"`` (isomorphic evolution operator),
``"u"`` (controls), ``"Δt"`` (timestep), ``"t"`` (sample times).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from scipy import integrate

from zxz_atoms.isomorphisms import (
    hamiltonian_generator,
    ket_dim_from_iso_vec,
    operator_to_iso_vec,
)
from zxz_atoms.named_trajectory import NamedTrajectory, derivative

if TYPE_CHECKING:
    from collections.abc import Callable

    from numpy.typing import ArrayLike, NDArray


DEFAULT_SAMPLES = 100
DEFAULT_METHOD = "DOP853"
DEFAULT_ATOL = 1e-12
DEFAULT_RTOL = 1e-12

STATE_NAME = "U"
CONTROL_NAME = "u"
TIMESTEP_NAME = "Δt"
TIME_NAME = "t"
DERIVATIVE_MARKER = "d"


# ==================================================================
# ROLLOUT
# ==================================================================


def _real_generator(M, isomorphic: bool) -> NDArray[np.floating]:
    """Turn the output of a generator function into a real ``2n x 2n`` matrix."""
    M = np.asarray(M)
    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise ValueError(f"Generator must return a square matrix, got shape {M.shape}.")
    if not isomorphic:
        return hamiltonian_generator(M)
    if M.shape[0] % 2 != 0:
        raise ValueError(
            f"Isomorphic generator must have even dimension, got {M.shape[0]}."
        )
    if np.iscomplexobj(M) and np.any(M.imag != 0):
        raise ValueError("Isomorphic generator must be real-valued.")
    return np.asarray(M.real, dtype=np.float64)


def unitary_rollout_trajectory(
    u_fn: Callable[[float], ArrayLike],
    G: Callable[[NDArray, float], ArrayLike],
    T: float,
    *,
    samples: int = DEFAULT_SAMPLES,
    atol: float = DEFAULT_ATOL,
    rtol: float = DEFAULT_RTOL,
    method: str = DEFAULT_METHOD,
    isomorphic: bool = False,
    verbose: bool = False,
    **kwargs,
) -> NamedTrajectory:
    """Roll out the evolution operator under a fixed control law.

    Solves ``dU/dt = -i H(u(t), t) U`` with ``U(0) = I`` on ``[0, T]`` and
    samples it at ``samples`` equally spaced times.

    Parameters
    ----------
    u_fn : callable
        ``u_fn(t)`` returning the control vector at time ``t``.
    G : callable
        ``G(u, t)`` returning the complex Hamiltonian ``H`` (``n x n``). With
        ``isomorphic=True`` it must instead return the real ``2n x 2n``
        generator acting on isomorphic kets.
    T : float
        Total duration.
    samples : int, default=100
        Number of saved time points, including both endpoints.
    atol, rtol : float, default=1e-12
        Solver tolerances. Kept tight since the result seeds a
        high-precision optimization.
    method : str, default='DOP853'
        Explicit adaptive Runge-Kutta method passed to
        :func:`scipy.integrate.solve_ivp`.
    isomorphic : bool, default=False
        Interpret the output of ``G`` as an already-isomorphic generator.
    verbose : bool, default=False
        Print solver statistics.
    **kwargs
        Forwarded unchanged to :func:`unitary_trajectory`.

    Returns
    -------
    NamedTrajectory

    Raises
    ------
    ValueError
        If ``G`` returns a non-square matrix (or odd-dimensional in
        isomorphic mode), or if ``samples < 2`` or ``T <= 0``.
    RuntimeError
        If the ODE solver reports failure.
    """
    if samples < 2:
        raise ValueError(f"Rollout needs at least 2 samples, got {samples}.")
    if T <= 0:
        raise ValueError(f"Duration must be positive, got {T}.")

    ketdim = _real_generator(G(u_fn(0.0), 0.0), isomorphic).shape[0] // 2
    U_init = operator_to_iso_vec(np.eye(ketdim))

    def schrodinger_rhs(t, x):
        Gt = _real_generator(G(u_fn(t), t), isomorphic)
        # (I ⊗ G) x: each isomorphic column of U evolves independently
        return (x.reshape(ketdim, 2 * ketdim) @ Gt.T).ravel()

    times = np.linspace(0.0, T, samples)
    sol = integrate.solve_ivp(
        schrodinger_rhs,
        [0.0, T],
        U_init,
        t_eval=times,
        method=method,
        rtol=rtol,
        atol=atol,
    )
    if not sol.success:
        raise RuntimeError(f"Rollout integration failed: {sol.message}")
    if verbose:
        print(f"Rollout: ketdim={ketdim}, samples={samples}, RHS evaluations={sol.nfev}")

    controls = np.stack(
        [np.atleast_1d(np.asarray(u_fn(t), dtype=np.float64)) for t in times], axis=1
    )
    return unitary_trajectory(sol.y, controls, times, **kwargs)


# ==================================================================
# PACKAGING
# ==================================================================


def unitary_trajectory(
    U_iso_traj: ArrayLike,
    controls: ArrayLike,
    times: ArrayLike,
    *,
    U_goal: ArrayLike | None = None,
    control_bounds=None,
    dt_min: float | None = None,
    dt_max: float | None = None,
) -> NamedTrajectory:
    """Package a unitary trajectory for optimization.

    Parameters
    ----------
    U_iso_traj : array_like
        Isomorphic evolution-operator samples, shape ``(2n^2, T)``.
    controls : array_like
        Control samples, shape ``(n_controls, T)``.
    times : array_like
        Sample times, length ``T``.
    U_goal : array_like, optional
        Target unitary (``n x n``), stored as the goal of ``"U"``.
    control_bounds : optional
        Bounds for ``"u"`` (see :class:`NamedTrajectory`). Controls are
        unbounded when omitted.
    dt_min, dt_max : float, optional
        Timestep bounds; default to ``1e-3 * min(diff(times))`` and
        ``2 * max(diff(times))``.

    Returns
    -------
    NamedTrajectory
        Components ``U``, ``u``, ``Δt``, ``t``; controls ``u`` and ``Δt``.
    """
    U_iso_traj = np.atleast_2d(np.asarray(U_iso_traj, dtype=np.float64))
    controls = np.atleast_2d(np.asarray(controls, dtype=np.float64))
    times = np.asarray(times, dtype=np.float64).ravel()

    if times.size < 2:
        raise ValueError(f"Need at least 2 sample times, got {times.size}.")

    u_dim = controls.shape[0]
    ketdim = ket_dim_from_iso_vec(U_iso_traj.shape[0])

    dt = np.diff(times)
    if dt_min is None:
        dt_min = 1e-3 * dt.min()
    if dt_max is None:
        dt_max = 2 * dt.max()
    dt = np.append(dt, dt[-1])

    data = {
        STATE_NAME: U_iso_traj,
        CONTROL_NAME: controls,
        TIMESTEP_NAME: dt,
        TIME_NAME: times,
    }

    initial = {
        STATE_NAME: operator_to_iso_vec(np.eye(ketdim)),
        CONTROL_NAME: np.zeros(u_dim),
    }
    final = {CONTROL_NAME: np.zeros(u_dim)}

    goal = {}
    if U_goal is not None:
        goal[STATE_NAME] = operator_to_iso_vec(U_goal)

    bounds = {
        STATE_NAME: (-np.ones(U_iso_traj.shape[0]), np.ones(U_iso_traj.shape[0])),
        TIMESTEP_NAME: (dt_min, dt_max),
    }
    if control_bounds is not None:
        bounds[CONTROL_NAME] = control_bounds

    return NamedTrajectory(
        data,
        controls=CONTROL_NAME,
        timestep=TIMESTEP_NAME,
        bounds=bounds,
        initial=initial,
        final=final,
        goal=goal,
    )


# ==================================================================
# DERIVATIVES
# ==================================================================


def add_derivatives(
    traj: NamedTrajectory,
    name: str,
    *,
    order: int = 1,
    rand_data: bool = True,
    rng=None,
) -> NamedTrajectory:
    """Return a copy of ``traj`` with ``order`` derivatives of ``name`` appended.

    The ``k``-th derivative of ``X`` is named ``"d" * k + X``. Only the
    highest derivative is a control; ``name`` and the intermediate
    derivatives become states. The timestep stays last in both
    ``names`` and ``control_names``. ``traj`` itself is not modified.

    Parameters
    ----------
    traj : NamedTrajectory
        Source trajectory.
    name : str
        Base component.
    order : int, default=1
        Number of derivatives to add.
    rand_data : bool, default=True
        Fill derivatives with uniform noise in ``[-1, 1]``; otherwise use
        forward finite differences of the previous signal against the
        trajectory timesteps.
    rng : int or numpy.random.Generator, optional
        Seed or generator for the random fill.
    """
    if order < 1:
        raise ValueError(f"Derivative order must be at least 1, got {order}.")
    if name not in traj:
        raise ValueError(f"Unknown component '{name}'. Available: {list(traj.names)}")

    rng = np.random.default_rng(rng)
    dt = traj.get_timesteps()

    new_traj = traj
    previous = name
    for i in range(1, order + 1):
        derivative_name = DERIVATIVE_MARKER * i + name
        if rand_data:
            derivative_data = 2 * rng.random((traj.dims[name], traj.T)) - 1
        else:
            derivative_data = derivative(new_traj[previous], dt)
        new_traj = new_traj.add_component(
            derivative_name,
            derivative_data,
            type="control" if i == order else "state",
        )
        previous = derivative_name

    timestep = new_traj.timestep
    control_names = tuple(n for n in new_traj.control_names if n not in (name, timestep))
    names = tuple(n for n in new_traj.names if n != timestep)
    return new_traj.reorder(
        names=names + (timestep,),
        control_names=control_names + (timestep,),
    )
