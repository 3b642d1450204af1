"""Tests for isomorphic encodings in isomorphisms.py."""

import numpy as np
import pytest

from zxz_atoms.isomorphisms import (
    hamiltonian_generator,
    iso,
    iso_to_ket,
    iso_vec_to_operator,
    iso_vec_unitary_fidelity,
    ket_dim_from_iso_vec,
    ket_to_iso,
    operator_to_iso_vec,
    unitary_fidelity,
)

X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
Y = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)


class TestKetEncoding:
    def test_layout(self):
        """Real parts come first, then imaginary parts."""
        x = ket_to_iso([1 + 2j, 3 - 4j])
        np.testing.assert_array_equal(x, [1, 3, 2, -4])

    def test_inverse(self):
        psi = np.array([0.6, 0.8j, -0.1 + 0.2j])
        np.testing.assert_allclose(iso_to_ket(ket_to_iso(psi)), psi)

    def test_odd_length_raises(self):
        with pytest.raises(ValueError, match="even length"):
            iso_to_ket([1.0, 2.0, 3.0])


class TestOperatorEncoding:
    def test_identity_layout(self):
        """Each column is encoded as [Re; Im] in column order."""
        x = operator_to_iso_vec(np.eye(2))
        np.testing.assert_array_equal(x, [1, 0, 0, 0, 0, 1, 0, 0])

    def test_length(self):
        assert operator_to_iso_vec(np.eye(3)).shape == (18,)

    def test_roundtrip(self):
        """Decoding an encoded unitary reproduces it exactly."""
        rng = np.random.default_rng(7)
        A = rng.normal(size=(4, 4)) + 1j * rng.normal(size=(4, 4))
        U, _ = np.linalg.qr(A)
        np.testing.assert_allclose(iso_vec_to_operator(operator_to_iso_vec(U)), U, atol=1e-15)

    def test_roundtrip_qutip_unitary(self):
        """Round trip also holds for qutip's random unitaries."""
        qutip = pytest.importorskip("qutip")
        U = qutip.rand_unitary(3).full()
        np.testing.assert_allclose(iso_vec_to_operator(operator_to_iso_vec(U)), U, atol=1e-15)

    def test_non_square_raises(self):
        with pytest.raises(ValueError, match="square"):
            operator_to_iso_vec(np.ones((2, 3)))

    @pytest.mark.parametrize("length", [0, 3, 6, 12])
    def test_malformed_length_raises(self, length):
        with pytest.raises(ValueError, match="2n\\^2"):
            iso_vec_to_operator(np.zeros(length))

    @pytest.mark.parametrize("n", [1, 2, 5])
    def test_ket_dim(self, n):
        assert ket_dim_from_iso_vec(2 * n * n) == n


class TestGenerators:
    def test_iso_matches_complex_product(self):
        """iso(M) acting on an isomorphic ket equals M acting on the ket."""
        rng = np.random.default_rng(1)
        M = rng.normal(size=(3, 3)) + 1j * rng.normal(size=(3, 3))
        psi = rng.normal(size=3) + 1j * rng.normal(size=3)
        np.testing.assert_allclose(iso(M) @ ket_to_iso(psi), ket_to_iso(M @ psi))

    def test_hamiltonian_generator(self):
        """Generator of -iH evolution."""
        psi = np.array([1.0, 1j]) / np.sqrt(2)
        np.testing.assert_allclose(
            hamiltonian_generator(Y) @ ket_to_iso(psi), ket_to_iso(-1j * Y @ psi)
        )

    def test_hamiltonian_generator_antisymmetric(self):
        """Hermitian H gives a real antisymmetric generator (norm preserving)."""
        G = hamiltonian_generator(X + 0.3 * Y)
        np.testing.assert_allclose(G, -G.T)

    def test_iso_non_square_raises(self):
        with pytest.raises(ValueError, match="square"):
            iso(np.ones((2, 3)))


class TestFidelity:
    def test_identical(self):
        assert unitary_fidelity(X, X) == pytest.approx(1.0)

    def test_global_phase_invariant(self):
        assert unitary_fidelity(np.exp(0.4j) * X, X) == pytest.approx(1.0)

    def test_orthogonal(self):
        assert unitary_fidelity(X, np.eye(2)) == pytest.approx(0.0)

    def test_iso_vec_fidelity(self):
        x = operator_to_iso_vec(X)
        assert iso_vec_unitary_fidelity(x, x) == pytest.approx(1.0)

    def test_shape_mismatch_raises(self):
        with pytest.raises(ValueError, match="shapes differ"):
            unitary_fidelity(np.eye(2), np.eye(4))
