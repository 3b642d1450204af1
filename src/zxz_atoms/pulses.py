"""Control laws for seeding rollouts.

Each factory returns a ``u_fn(t)`` that evaluates the control vector at a
single time, suitable for :func:`zxz_atoms.trajectories.unitary_rollout_trajectory`.
The Blackman envelopes give smooth turn-on/off so that the initial guess
already satisfies the zero-control boundary pins.
"""

import numpy as np


def blackman_window(t, t_rise):
    """Rising edge shared by every shaped control envelope.

    The ramp goes from 0 at ``t = 0`` to 1 at ``t = t_rise`` with zero slope at
    both ends, so a control built from it starts from the zero initial pin
    without a jump. :func:`blackman_pulse` reuses it against ``t_gate - t``
    for the falling edge.

    Parameters
    ----------
    t : array_like
        Sample times.
    t_rise : float
        Ramp duration.

    Returns
    -------
    numpy.ndarray
        Envelope amplitude, in ``[0, 1]`` for ``0 <= t <= t_rise``.
    """
    return (0.42 - 0.5 * np.cos(np.pi * t / t_rise) +
            0.08 * np.cos(2 * np.pi * t / t_rise))


def blackman_pulse(t, t_rise, t_gate):
    """Blackman-windowed flat-top envelope.

    Rises over ``[0, t_rise]``, stays at 1, and falls over
    ``[t_gate - t_rise, t_gate]``. Zero outside ``[0, t_gate]``.

    Parameters
    ----------
    t : array_like
        Time values.
    t_rise : float
        Rise/fall time.
    t_gate : float
        Total pulse duration (must be >= 2 * t_rise).

    Returns
    -------
    numpy.ndarray
        Pulse envelope.
    """
    if t_gate < 2 * t_rise:
        raise ValueError("t_gate is too small compared to t_rise")
    t = np.asarray(t, dtype=np.float64)
    inside = (t >= 0) & (t <= t_gate)
    ret = np.where(t < t_rise, blackman_window(t, t_rise),
                   np.where(t > t_gate - t_rise,
                            blackman_window(t_gate - t, t_rise), 1.0))
    return np.where(inside, ret, 0.0)


def constant_controls(values):
    """Control law that always returns ``values``."""
    values = np.atleast_1d(np.asarray(values, dtype=np.float64))
    return lambda t: values.copy()


def blackman_controls(amplitudes, t_rise, t_gate):
    """Per-channel amplitudes shaped by :func:`blackman_pulse`."""
    amplitudes = np.atleast_1d(np.asarray(amplitudes, dtype=np.float64))
    if t_gate < 2 * t_rise:
        raise ValueError("t_gate is too small compared to t_rise")
    return lambda t: amplitudes * blackman_pulse(t, t_rise, t_gate)


def linear_sweep(start, stop, t_gate):
    """Linear ramp from ``start`` to ``stop`` over ``[0, t_gate]``, held outside.

    Typical use is a detuning sweep through resonance.
    """
    start = np.atleast_1d(np.asarray(start, dtype=np.float64))
    stop = np.atleast_1d(np.asarray(stop, dtype=np.float64))
    if t_gate <= 0:
        raise ValueError(f"t_gate must be positive, got {t_gate}")

    def u_fn(t):
        s = np.clip(t / t_gate, 0.0, 1.0)
        return start + s * (stop - start)

    return u_fn


def stack_controls(*fns):
    """Concatenate the outputs of several control laws into one vector.

    >>> u_fn = stack_controls(blackman_controls(2.0, 0.1, 1.0), linear_sweep(-1.0, 1.0, 1.0))
    >>> u_fn(0.5).shape
    (2,)
    """
    if not fns:
        raise ValueError("stack_controls needs at least one control law")
    return lambda t: np.concatenate([np.atleast_1d(f(t)) for f in fns])
