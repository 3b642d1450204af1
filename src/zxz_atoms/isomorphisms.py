"""Real-valued (isomorphic) encodings of kets, operators and generators.

Complex quantities are mapped onto real vectors so that real ODE solvers and
optimizers can act on them. A ket ``psi`` of dimension ``n`` becomes
``[Re psi; Im psi]`` (length ``2n``); an operator ``U`` becomes the
concatenation of its isomorphic columns (length ``2n**2``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


def ket_to_iso(psi: ArrayLike) -> NDArray[np.floating]:
    """Map a complex ket to ``[Re psi; Im psi]``."""
    psi = np.asarray(psi, dtype=np.complex128).ravel()
    return np.concatenate([psi.real, psi.imag])


def iso_to_ket(x: ArrayLike) -> NDArray[np.complexfloating]:
    """Inverse of :func:`ket_to_iso`."""
    x = np.asarray(x, dtype=np.float64).ravel()
    if x.size % 2 != 0:
        raise ValueError(f"Isomorphic ket must have even length, got {x.size}.")
    n = x.size // 2
    return x[:n] + 1j * x[n:]


def ket_dim_from_iso_vec(length: int) -> int:
    """Recover the ket dimension ``n`` from an isomorphic operator length ``2n**2``.

    Raises
    ------
    ValueError
        If ``length`` is not of the form ``2n**2``.
    """
    if length <= 0 or length % 2 != 0:
        raise ValueError(
            f"Isomorphic operator vector length must be 2n^2, got {length}."
        )
    n = int(round(np.sqrt(length // 2)))
    if n * n != length // 2:
        raise ValueError(
            f"Isomorphic operator vector length must be 2n^2, got {length} "
            f"(sqrt({length // 2}) is not an integer)."
        )
    return n


def operator_to_iso_vec(U: ArrayLike) -> NDArray[np.floating]:
    """Encode a square complex operator as a real vector of length ``2n**2``.

    Columns are encoded one after another, each as ``[Re U[:, j]; Im U[:, j]]``.
    """
    U = np.asarray(U, dtype=np.complex128)
    if U.ndim != 2 or U.shape[0] != U.shape[1]:
        raise ValueError(f"Operator must be square, got shape {U.shape}.")
    # rows of U.T are the columns of U
    return np.concatenate([U.T.real, U.T.imag], axis=1).ravel()


def iso_vec_to_operator(x: ArrayLike) -> NDArray[np.complexfloating]:
    """Inverse of :func:`operator_to_iso_vec`."""
    x = np.asarray(x, dtype=np.float64).ravel()
    n = ket_dim_from_iso_vec(x.size)
    cols = x.reshape(n, 2 * n)
    return (cols[:, :n] + 1j * cols[:, n:]).T


def iso(M: ArrayLike) -> NDArray[np.floating]:
    """Real embedding ``[[Re M, -Im M], [Im M, Re M]]`` of a complex matrix.

    ``iso(M) @ ket_to_iso(psi) == ket_to_iso(M @ psi)``.
    """
    M = np.asarray(M, dtype=np.complex128)
    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise ValueError(f"Matrix must be square, got shape {M.shape}.")
    return np.block([[M.real, -M.imag], [M.imag, M.real]])


def hamiltonian_generator(H: ArrayLike) -> NDArray[np.floating]:
    """Real generator of ``d psi / dt = -i H psi``, i.e. ``iso(-1j * H)``."""
    return iso(-1j * np.asarray(H, dtype=np.complex128))


def unitary_fidelity(U: ArrayLike, U_goal: ArrayLike) -> float:
    """Gate fidelity ``|tr(U_goal^dagger U)|^2 / n^2`` (insensitive to global phase)."""
    U = np.asarray(U, dtype=np.complex128)
    U_goal = np.asarray(U_goal, dtype=np.complex128)
    if U.shape != U_goal.shape:
        raise ValueError(
            f"Operator shapes differ: {U.shape} vs goal {U_goal.shape}."
        )
    n = U.shape[0]
    overlap = np.trace(U_goal.conj().T @ U)
    return float(np.abs(overlap) ** 2 / n**2)


def iso_vec_unitary_fidelity(x: ArrayLike, x_goal: ArrayLike) -> float:
    """:func:`unitary_fidelity` on isomorphic operator vectors."""
    return unitary_fidelity(iso_vec_to_operator(x), iso_vec_to_operator(x_goal))
