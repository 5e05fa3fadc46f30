"""Tangent frames and direction sampling for Monte Carlo light transport.

The randomness source is the Taichi runtime's generator, which keeps one
independent state per GPU/CPU thread. The only entry point into it is
next_normal_float(); this module never seeds it. Seed it with
``ti.init(random_seed=...)`` for reproducible renders.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, random_seed=42)
    >>> from raykernel.core.sampling import uniform_sample_hemisphere
    >>> # Use within a Taichi kernel:
    >>> # direction = uniform_sample_hemisphere(normal)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def next_normal_float() -> ti.f32:
    """Draw one standard-normal variate from the per-thread generator."""
    return ti.randn(ti.f32)


@ti.func
def coord_system(normal: vec3):
    """Build an orthonormal tangent frame around a unit normal.

    Follows Pharr & Humphreys, Physically Based Rendering, p. 63. The tangent
    is built in the plane spanned by z and whichever of x/y has the larger
    magnitude in the normal, so the projection it normalizes never collapses
    for nearly axis-aligned normals.

    Args:
        normal: The surface normal (must be unit length).

    Returns:
        A tuple (tangent, binormal) such that (normal, tangent, binormal) are
        mutually orthogonal unit vectors.
    """
    tangent = vec3(0.0, 0.0, 0.0)
    if ti.abs(normal.x) > ti.abs(normal.y):
        inv_len = 1.0 / ti.sqrt(normal.x * normal.x + normal.z * normal.z)
        tangent = vec3(-normal.z * inv_len, 0.0, normal.x * inv_len)
    else:
        inv_len = 1.0 / ti.sqrt(normal.y * normal.y + normal.z * normal.z)
        tangent = vec3(0.0, normal.z * inv_len, -normal.y * inv_len)
    binormal = tm.cross(normal, tangent)
    return tangent, binormal


@ti.func
def uniform_sample_sphere() -> vec3:
    """Sample a direction uniformly on the unit sphere.

    Uses Muller's method: a vector of three independent standard-normal
    variates is isotropic, so normalizing it gives a uniform direction.
    See <http://mathworld.wolfram.com/SpherePointPicking.html>.

    Returns:
        A random unit vector.
    """
    x = next_normal_float()
    y = next_normal_float()
    z = next_normal_float()
    return tm.normalize(vec3(x, y, z))


@ti.func
def uniform_sample_hemisphere(normal: vec3) -> vec3:
    """Sample a direction uniformly on the hemisphere around a normal.

    The first normalized variate is folded into [0, 1] and used as the
    component along the normal, the other two along the tangent frame. The
    result is uniform over the hemisphere, not cosine-weighted.

    Args:
        normal: The unit normal defining the hemisphere.

    Returns:
        A random unit vector with dot(direction, normal) >= 0.
    """
    x1 = next_normal_float()
    x2 = next_normal_float()
    x3 = next_normal_float()

    inv_len = 1.0 / ti.sqrt(x1 * x1 + x2 * x2 + x3 * x3)
    y1 = ti.abs(x1 * inv_len)
    y2 = x2 * inv_len
    y3 = x3 * inv_len

    tangent, binormal = coord_system(normal)
    return normal * y1 + tangent * y2 + binormal * y3
