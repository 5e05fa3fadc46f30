"""Unit tests for tangent frames and direction sampling.

Tests cover:
- next_normal_float draws standard normal values from the per-thread generator
- coord_system returns an orthonormal frame for axis-aligned and oblique normals
- uniform_sample_sphere returns unit vectors
- uniform_sample_hemisphere stays on the side of the normal
- Rough uniformity of hemisphere samples
"""

import math

import numpy as np
import pytest
import taichi as ti


def _assert_orthonormal(n, t, b, tol=1e-5):
    n, t, b = np.asarray(n), np.asarray(t), np.asarray(b)
    assert abs(np.linalg.norm(t) - 1.0) < tol
    assert abs(np.linalg.norm(b) - 1.0) < tol
    assert abs(np.dot(n, t)) < tol
    assert abs(np.dot(n, b)) < tol
    assert abs(np.dot(t, b)) < tol


class TestCoordSystem:
    """Tests for the orthonormal frame builder."""

    @pytest.mark.parametrize(
        "normal",
        [
            (1.0, 0.0, 0.0),
            (0.0, 1.0, 0.0),
            (0.0, 0.0, 1.0),
            (-1.0, 0.0, 0.0),
            (0.0, -1.0, 0.0),
            (0.0, 0.0, -1.0),
        ],
    )
    def test_axis_aligned_normals(self, normal):
        """Test the frame around every axis direction."""
        from raykernel.core.sampling import coord_system

        n_field = ti.field(dtype=ti.math.vec3, shape=())
        t_field = ti.field(dtype=ti.math.vec3, shape=())
        b_field = ti.field(dtype=ti.math.vec3, shape=())
        n_field[None] = ti.math.vec3(*normal)

        @ti.kernel
        def test_kernel():
            t, b = coord_system(n_field[None])
            t_field[None] = t
            b_field[None] = b

        test_kernel()
        _assert_orthonormal(normal, t_field[None].to_numpy(), b_field[None].to_numpy())

    def test_oblique_normal(self):
        """Test the frame around a normal with no zero component."""
        from raykernel.core.sampling import coord_system

        normal = np.array([1.0, 2.0, -3.0]) / math.sqrt(14.0)
        n_field = ti.field(dtype=ti.math.vec3, shape=())
        t_field = ti.field(dtype=ti.math.vec3, shape=())
        b_field = ti.field(dtype=ti.math.vec3, shape=())
        n_field[None] = ti.math.vec3(*normal.tolist())

        @ti.kernel
        def test_kernel():
            t, b = coord_system(n_field[None])
            t_field[None] = t
            b_field[None] = b

        test_kernel()
        _assert_orthonormal(normal, t_field[None].to_numpy(), b_field[None].to_numpy())

    def test_binormal_is_cross_product(self):
        """Test that binormal == cross(normal, tangent)."""
        from raykernel.core.sampling import coord_system, vec3

        t_field = ti.field(dtype=ti.math.vec3, shape=())
        b_field = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            t, b = coord_system(vec3(0.0, 0.0, 1.0))
            t_field[None] = t
            b_field[None] = b

        test_kernel()
        t = t_field[None].to_numpy()
        b = b_field[None].to_numpy()
        assert np.allclose(np.cross([0.0, 0.0, 1.0], t), b, atol=1e-6)


class TestNextNormalFloat:
    """Tests for the per-thread standard normal generator."""

    def test_standard_normal_moments(self):
        """Test that draws have mean near 0 and variance near 1."""
        from raykernel.core.sampling import next_normal_float

        n = 20000
        draws = ti.field(dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                draws[i] = next_normal_float()

        test_kernel()
        values = draws.to_numpy()
        assert abs(values.mean()) < 0.05
        assert abs(values.var() - 1.0) < 0.05
        assert len(np.unique(values)) > n // 2


class TestSphereSampling:
    """Tests for uniform direction sampling on the sphere."""

    def test_unit_length(self):
        """Test that sampled directions are unit vectors."""
        from raykernel.core.sampling import uniform_sample_sphere

        n = 1000
        samples = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                samples[i] = uniform_sample_sphere()

        test_kernel()
        lengths = np.linalg.norm(samples.to_numpy(), axis=1)
        assert np.all(np.abs(lengths - 1.0) < 1e-5)

    def test_mean_near_zero(self):
        """Test that sampled directions are not biased toward any axis."""
        from raykernel.core.sampling import uniform_sample_sphere

        n = 10000
        samples = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                samples[i] = uniform_sample_sphere()

        test_kernel()
        mean = samples.to_numpy().mean(axis=0)
        assert np.all(np.abs(mean) < 0.05)


class TestHemisphereSampling:
    """Tests for uniform hemisphere sampling around a normal."""

    @pytest.mark.parametrize(
        "normal",
        [(0.0, 1.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, -1.0)],
    )
    def test_samples_on_normal_side(self, normal):
        """Test that every sample is a unit vector with dot(d, n) >= 0."""
        from raykernel.core.sampling import uniform_sample_hemisphere

        n = 2000
        n_field = ti.field(dtype=ti.math.vec3, shape=())
        samples = ti.Vector.field(3, dtype=ti.f32, shape=n)
        n_field[None] = ti.math.vec3(*normal)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                samples[i] = uniform_sample_hemisphere(n_field[None])

        test_kernel()
        arr = samples.to_numpy()
        lengths = np.linalg.norm(arr, axis=1)
        assert np.all(np.abs(lengths - 1.0) < 1e-4)
        assert np.all(arr @ np.asarray(normal) >= -1e-6)

    def test_uniform_mean_cosine(self):
        """Test that the mean cosine matches a uniform (not cosine) density.

        For a uniform hemisphere the expected cosine to the normal is 1/2;
        a cosine-weighted density would give 2/3.
        """
        from raykernel.core.sampling import uniform_sample_hemisphere, vec3

        n = 20000
        samples = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                samples[i] = uniform_sample_hemisphere(vec3(0.0, 0.0, 1.0))

        test_kernel()
        mean_cos = samples.to_numpy()[:, 2].mean()
        assert abs(mean_cos - 0.5) < 0.02


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
