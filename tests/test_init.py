"""Tests for zxz_atoms package initialization."""


class TestPackageImports:
    """Tests for package-level imports."""

    def test_version_defined(self):
        import zxz_atoms
        assert isinstance(zxz_atoms.__version__, str)

    def test_all_exports_defined(self):
        """All items in __all__ should be defined."""
        import zxz_atoms

        for name in zxz_atoms.__all__:
            assert hasattr(zxz_atoms, name)

    def test_public_entry_points(self):
        from zxz_atoms import add_derivatives, plot_controls, unitary_rollout_trajectory, unitary_trajectory

        assert callable(unitary_rollout_trajectory)
        assert callable(unitary_trajectory)
        assert callable(add_derivatives)
        assert callable(plot_controls)
