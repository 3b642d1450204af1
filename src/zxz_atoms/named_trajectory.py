"""Named-component trajectory container used as optimizer input.

A :class:`NamedTrajectory` stores a set of named components, each sampled at
the same ``T`` time points, together with the metadata an external
trajectory optimizer needs: which components are controls, which one holds
the per-sample timestep, and bounds / initial / final / goal pins.

Trajectories are treated as values. Every transformation
(:meth:`NamedTrajectory.add_component`, :meth:`NamedTrajectory.reorder`)
returns a new object and leaves the original untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from numpy.typing import ArrayLike, NDArray


def derivative(X, dt):
    """Forward finite difference of ``X`` along the sample axis.

    Parameters
    ----------
    X : array_like
        Samples of shape ``(dim, T)`` (1-D input is treated as ``(1, T)``).
    dt : array_like
        Per-sample timesteps of length ``T``.

    Returns
    -------
    numpy.ndarray
        ``dX`` of shape ``(dim, T)`` with
        ``dX[:, k] = (X[:, k + 1] - X[:, k]) / dt[k]``; the last column is zero.
    """
    X = np.atleast_2d(np.asarray(X, dtype=np.float64))
    dt = np.asarray(dt, dtype=np.float64).ravel()
    if dt.size != X.shape[1]:
        raise ValueError(
            f"Timestep length {dt.size} does not match number of samples {X.shape[1]}."
        )
    dX = np.zeros_like(X)
    dX[:, :-1] = np.diff(X, axis=1) / dt[:-1]
    return dX


def _as_tuple(names) -> tuple[str, ...]:
    if names is None:
        return ()
    if isinstance(names, str):
        return (names,)
    return tuple(names)


class NamedTrajectory:
    """Trajectory of named components sampled on a shared time grid.

    Parameters
    ----------
    data : mapping of str to array_like
        Component samples, each of shape ``(dim, T)``. One-dimensional arrays
        are promoted to shape ``(1, T)``. Insertion order defines
        :attr:`names`.
    controls : str or sequence of str
        Names of the components the optimizer may vary freely.
    timestep : str
        Name of the one-row component holding per-sample timesteps. The
        timestep is always counted among the controls.
    bounds : mapping, optional
        ``name -> (lower, upper)``. A single scalar or array ``b`` means
        ``(-b, b)``. Scalars are broadcast to the component dimension.
        ``lower <= upper`` is not checked.
    initial, final, goal : mapping, optional
        ``name -> vector`` pins for the first sample, last sample, and the
        optimization target.
    names : sequence of str, optional
        Explicit component order; defaults to the order of ``data``.
    control_names : sequence of str, optional
        Explicit control order. When omitted, ``controls`` are ordered as in
        :attr:`names` with the timestep last.

    Component arrays are read-only; use :meth:`add_component` or
    :meth:`reorder` to derive modified trajectories.

    Attributes
    ----------
    names, state_names, control_names : tuple of str
        Full, state-only and control-only orderings.
    T : int
        Number of samples.
    dims : dict
        Row count of each component plus aggregates ``"states"`` and
        ``"controls"``.
    components : dict
        Indices of each component inside the stacked per-sample vector, plus
        aggregates ``"states"`` and ``"controls"``.
    """

    def __init__(
        self,
        data: Mapping[str, ArrayLike],
        *,
        controls,
        timestep: str,
        bounds: Mapping | None = None,
        initial: Mapping | None = None,
        final: Mapping | None = None,
        goal: Mapping | None = None,
        names: Iterable[str] | None = None,
        control_names: Iterable[str] | None = None,
    ):
        if not data:
            raise ValueError("A trajectory needs at least one component.")

        self._data = {}
        for name, values in data.items():
            arr = np.array(values, dtype=np.float64)
            if arr.ndim == 1:
                arr = arr[np.newaxis, :]
            if arr.ndim != 2:
                raise ValueError(
                    f"Component '{name}' must be 1-D or 2-D, got shape {arr.shape}."
                )
            arr.setflags(write=False)
            self._data[name] = arr

        sample_counts = {name: arr.shape[1] for name, arr in self._data.items()}
        if len(set(sample_counts.values())) != 1:
            raise ValueError(f"Components have different sample counts: {sample_counts}.")
        self.T = next(iter(sample_counts.values()))

        if timestep not in self._data:
            raise ValueError(f"Timestep component '{timestep}' not found in data.")
        if self._data[timestep].shape[0] != 1:
            raise ValueError(f"Timestep component '{timestep}' must have a single row.")
        self.timestep = timestep

        self.names = self._check_ordering(
            _as_tuple(names) if names is not None else tuple(self._data), set(self._data), "names"
        )

        requested = _as_tuple(control_names) if control_names is not None else _as_tuple(controls)
        for name in requested:
            if name not in self._data:
                raise ValueError(f"Control component '{name}' not found in data.")
        if control_names is None:
            requested = tuple(n for n in self.names if n in requested and n != timestep)
        if timestep not in requested:
            requested = requested + (timestep,)
        self.control_names = requested
        self.state_names = tuple(n for n in self.names if n not in self.control_names)

        self.dims = {name: arr.shape[0] for name, arr in self._data.items()}
        self.bounds = {
            name: self._normalize_bound(name, bound) for name, bound in (bounds or {}).items()
        }
        self.initial = self._normalize_pins(initial, "initial")
        self.final = self._normalize_pins(final, "final")
        self.goal = self._normalize_pins(goal, "goal")

        self._build_components()

    # --- Validation helpers ---
    @staticmethod
    def _check_ordering(ordering, expected, label):
        if len(ordering) != len(set(ordering)) or set(ordering) != expected:
            raise ValueError(
                f"'{label}' must be a permutation of {sorted(expected)}, got {list(ordering)}."
            )
        return tuple(ordering)

    def _normalize_bound(self, name, bound):
        if name not in self._data:
            raise ValueError(f"Bound given for unknown component '{name}'.")
        dim = self.dims[name]
        # a 2-tuple is (lower, upper); anything else is a symmetric bound
        if isinstance(bound, tuple) and len(bound) == 2:
            lower, upper = bound
        else:
            upper = np.asarray(bound, dtype=np.float64)
            lower = -upper
        try:
            lower = np.broadcast_to(np.asarray(lower, dtype=np.float64), (dim,)).copy()
            upper = np.broadcast_to(np.asarray(upper, dtype=np.float64), (dim,)).copy()
        except ValueError:
            raise ValueError(
                f"Bounds for '{name}' must be scalars or vectors of length {dim}."
            ) from None
        return lower, upper

    def _normalize_pins(self, pins, label):
        normalized = {}
        for name, value in (pins or {}).items():
            if name not in self._data:
                raise ValueError(f"{label.capitalize()} value given for unknown component '{name}'.")
            vec = np.array(value, dtype=np.float64).ravel()
            if vec.size != self.dims[name]:
                raise ValueError(
                    f"{label.capitalize()} value for '{name}' has length {vec.size}, "
                    f"expected {self.dims[name]}."
                )
            normalized[name] = vec
        return normalized

    def _build_components(self):
        self.components = {}
        offset = 0
        for name in self.names:
            self.components[name] = np.arange(offset, offset + self.dims[name])
            offset += self.dims[name]
        self.dim = offset

        def _stack(names):
            if not names:
                return np.array([], dtype=int)
            return np.concatenate([self.components[n] for n in names])

        self.components["states"] = _stack(self.state_names)
        self.components["controls"] = _stack(self.control_names)
        self.dims["states"] = self.components["states"].size
        self.dims["controls"] = self.components["controls"].size

    # --- Access ---
    def __getitem__(self, name: str) -> NDArray[np.floating]:
        try:
            return self._data[name]
        except KeyError:
            raise KeyError(f"Unknown component '{name}'. Available: {list(self.names)}") from None

    def __getattr__(self, name):
        data = self.__dict__.get("_data")
        if data is not None and name in data:
            return data[name]
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __contains__(self, name) -> bool:
        return name in self._data

    def __repr__(self):
        comps = ", ".join(f"{n}:{self.dims[n]}" for n in self.names)
        return f"NamedTrajectory(T={self.T}, components=[{comps}], timestep='{self.timestep}')"

    @property
    def data(self) -> NDArray[np.floating]:
        """All components stacked row-wise in :attr:`names` order, shape ``(dim, T)``."""
        return np.vstack([self._data[n] for n in self.names])

    @property
    def datavec(self) -> NDArray[np.floating]:
        """Sample-major flattening of :attr:`data` (sample 0 first)."""
        return self.data.T.ravel()

    def get_timesteps(self) -> NDArray[np.floating]:
        return self._data[self.timestep].ravel().copy()

    def get_times(self) -> NDArray[np.floating]:
        """Sample times ``[0, dt_0, dt_0 + dt_1, ...]`` built from the timesteps."""
        dt = self.get_timesteps()
        return np.concatenate([[0.0], np.cumsum(dt[:-1])])

    # --- Transformations ---
    def _rebuild(self, data=None, names=None, control_names=None):
        data = dict(self._data) if data is None else data
        names = self.names if names is None else names
        control_names = self.control_names if control_names is None else control_names
        return NamedTrajectory(
            data,
            controls=control_names,
            control_names=control_names,
            timestep=self.timestep,
            bounds={k: (lo.copy(), hi.copy()) for k, (lo, hi) in self.bounds.items()},
            initial=self.initial,
            final=self.final,
            goal=self.goal,
            names=names,
        )

    def copy(self) -> NamedTrajectory:
        return self._rebuild()

    def add_component(self, name: str, data, type: str = "state") -> NamedTrajectory:
        """Return a new trajectory with ``name`` appended.

        Parameters
        ----------
        name : str
            New component name; must not already exist.
        data : array_like
            Samples of shape ``(dim, T)`` or ``(T,)``.
        type : {'state', 'control'}
            Role of the new component.
        """
        if type not in ("state", "control"):
            raise ValueError(f"Component type must be 'state' or 'control', got '{type}'.")
        if name in self._data:
            raise ValueError(f"Component '{name}' already exists.")
        arr = np.atleast_2d(np.asarray(data, dtype=np.float64))
        if arr.shape[1] != self.T:
            raise ValueError(
                f"Component '{name}' has {arr.shape[1]} samples, trajectory has {self.T}."
            )
        new_data = dict(self._data)
        new_data[name] = arr
        control_names = self.control_names + ((name,) if type == "control" else ())
        return self._rebuild(new_data, self.names + (name,), control_names)

    def reorder(self, names=None, control_names=None) -> NamedTrajectory:
        """Return a new trajectory with the given full and/or control ordering.

        ``control_names`` may also change which components are controls; the
        timestep is appended if omitted.
        """
        names = self._check_ordering(_as_tuple(names), set(self._data), "names") if names is not None else None
        return self._rebuild(names=names, control_names=_as_tuple(control_names) if control_names is not None else None)
