"""Plotting of control pulses for Rydberg atom chains."""

from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np

from zxz_atoms.named_trajectory import NamedTrajectory

# Default channel labels keyed by number of control channels
DEFAULT_LABELS = {
    2: ["Ω(t) [Rabi]", "Δ(t) [Detuning]"],
    3: ["Ω_x(t) [Rabi X]", "Ω_y(t) [Rabi Y]", "Δ(t) [Detuning]"],
}
DEFAULT_COLORS = ["blue", "red", "green", "orange"]


def _to_dense(x):
    """Convert ranges, lists, sparse or matrix-backed inputs to an ndarray."""
    if hasattr(x, "toarray"):
        x = x.toarray()
    return np.asarray(x, dtype=np.float64)


def default_control_labels(n_controls):
    """Channel labels used when none are given."""
    if n_controls in DEFAULT_LABELS:
        return list(DEFAULT_LABELS[n_controls])
    return [f"Control {i}" for i in range(1, n_controls + 1)]


def plot_controls(
    traj_or_times,
    controls=None,
    *,
    control_name="u",
    control_labels=None,
    time_units="μs",
    control_units="MHz",
    figsize=(8, 6),
    linewidth=2.5,
    colors=None,
    title="Quantum Control Pulses",
    save_path=None,
):
    """Plot control pulses with one panel per control channel.

    For Rydberg chains driven by a single global drive the channels are
    Ω(t) and Δ(t); with an independent Y drive they are Ω_x(t), Ω_y(t), Δ(t).

    Parameters
    ----------
    traj_or_times : NamedTrajectory or array_like
        Either a trajectory (times from its timesteps, data from
        ``control_name``) or the sample times. Any real sequence works,
        including ``range`` objects.
    controls : array_like, optional
        Control matrix of shape ``(n_controls, n_times)``; required when
        ``traj_or_times`` is a time vector. Dense arrays, ``numpy.matrix``
        and scipy sparse matrices are accepted.
    control_name : str, default='u'
        Component plotted when a trajectory is given.
    control_labels : list of str, optional
        One label per channel. Defaults depend on the channel count.
    time_units, control_units : str
        Axis unit strings.
    figsize : tuple, default=(8, 6)
        Figure size in inches.
    linewidth : float, default=2.5
    colors : list, optional
        Line colours, cycled if shorter than the channel count.
    title : str
        Figure title.
    save_path : str, optional
        If given, the figure is written to this path.

    Returns
    -------
    matplotlib.figure.Figure

    Raises
    ------
    ValueError
        If the number of labels differs from the number of channels, or the
        time vector length differs from the number of control samples, or
        ``colors`` is empty.
    """
    if isinstance(traj_or_times, NamedTrajectory):
        if controls is not None:
            raise ValueError("Pass either a trajectory or (times, controls), not both.")
        times = traj_or_times.get_times()
        controls = traj_or_times[control_name]
    else:
        if controls is None:
            raise ValueError("controls must be given when plotting from raw times.")
        times = traj_or_times

    time_data = _to_dense(times).ravel()
    control_data = np.atleast_2d(_to_dense(controls))
    n_controls, n_times = control_data.shape

    if time_data.size != n_times:
        raise ValueError(
            f"Got {time_data.size} time points but controls have {n_times} samples."
        )

    if control_labels is None:
        control_labels = default_control_labels(n_controls)
    elif len(control_labels) != n_controls:
        raise ValueError(
            f"Got {len(control_labels)} control labels for {n_controls} control channels."
        )
    colors = DEFAULT_COLORS if colors is None else list(colors)
    if not colors:
        raise ValueError("colors must contain at least one colour.")

    fig, axes = plt.subplots(n_controls, 1, figsize=figsize, sharex=True, squeeze=False)
    axes = axes[:, 0]
    fig.suptitle(title, fontsize=16, fontweight="bold")

    for i, ax in enumerate(axes):
        ax.plot(
            time_data,
            control_data[i],
            color=colors[i % len(colors)],
            lw=linewidth,
            label=control_labels[i],
        )
        ax.set_ylabel(f"{control_labels[i]} [{control_units}]", fontsize=12)
        ax.grid(True, color="gray", alpha=0.5)
    axes[-1].set_xlabel(f"Time [{time_units}]", fontsize=12)

    fig.tight_layout()
    fig.subplots_adjust(hspace=0.1)

    if save_path is not None:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
        print(f"Figure saved to {save_path}")

    return fig
