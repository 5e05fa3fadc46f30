"""Ray and light-ray data structures with vector utilities.

This module provides the Ray and LightRay dataclasses and the vector helpers
used by the intersection and shading code. All operations are Taichi
functions so they can be inlined into kernels written by the integrator.

A LightRay is a ray that also carries an RGB throughput. Light rays are
values: operations return new light rays and never mutate the input. Path
termination is signalled by data rather than control flow:

- a "black" light ray has a color of (nearly) zero magnitude
- a "zero-length" light ray has a direction of (nearly) zero magnitude

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from raykernel.core.numeric import is_nearly_zero, is_nearly_zero_py

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            unit length; use unit_ray() when a normalized direction is needed.
    """

    origin: vec3
    direction: vec3


@ti.dataclass
class LightRay:
    """A ray carrying an RGB color (throughput) along a light path.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3).
        color: The carried RGB value. Unit-less and may exceed 1.0.
    """

    origin: vec3
    direction: vec3
    color: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def unit_ray(ray: Ray) -> Ray:
    """Return a copy of the ray with a normalized direction.

    Args:
        ray: The ray to normalize.

    Returns:
        A new Ray with the same origin and a unit-length direction.
    """
    return Ray(origin=ray.origin, direction=tm.normalize(ray.direction))


@ti.func
def make_light_ray(origin: vec3, direction: vec3, color: vec3) -> LightRay:
    """Create a light ray carrying the given color."""
    return LightRay(origin=origin, direction=direction, color=color)


@ti.func
def make_white_light_ray(origin: vec3, direction: vec3) -> LightRay:
    """Create a light ray carrying full white throughput (1, 1, 1).

    This is how a path starts at the camera before any attenuation.
    """
    return LightRay(origin=origin, direction=direction, color=vec3(1.0, 1.0, 1.0))


@ti.func
def light_ray_as_ray(light_ray: LightRay) -> Ray:
    """Drop the color of a light ray, keeping its geometry."""
    return Ray(origin=light_ray.origin, direction=light_ray.direction)


@ti.func
def dead_light_ray() -> LightRay:
    """Create a terminated light ray (zero origin, direction and color)."""
    zero = vec3(0.0, 0.0, 0.0)
    return LightRay(origin=zero, direction=zero, color=zero)


@ti.func
def is_black(light_ray: LightRay) -> ti.i32:
    """Check whether a light ray carries (nearly) no energy.

    Returns:
        1 if the magnitude of the color is within epsilon of zero.
    """
    return is_nearly_zero(tm.length(light_ray.color))


@ti.func
def is_zero_length(light_ray: LightRay) -> ti.i32:
    """Check whether a light ray has a degenerate direction.

    Returns:
        1 if the magnitude of the direction is within epsilon of zero.
    """
    return is_nearly_zero(tm.length(light_ray.direction))


@ti.func
def energy(light_ray: LightRay) -> ti.f32:
    """Return the largest color component of a light ray.

    Useful for Russian roulette decisions in the integrator.
    """
    c = light_ray.color
    return ti.max(c.x, ti.max(c.y, c.z))


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length."""
    return tm.normalize(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


# =============================================================================
# Python-side Results
# =============================================================================


@dataclass(frozen=True)
class LightRayInfo:
    """A light ray read back into Python scope.

    Attributes:
        origin: The ray origin as (x, y, z).
        direction: The ray direction as (x, y, z).
        color: The carried color as (R, G, B).
    """

    origin: tuple[float, float, float]
    direction: tuple[float, float, float]
    color: tuple[float, float, float]

    @property
    def is_black(self) -> bool:
        """Whether the carried color has (nearly) zero magnitude."""
        return is_nearly_zero_py(sum(c * c for c in self.color) ** 0.5)

    @property
    def is_zero_length(self) -> bool:
        """Whether the direction has (nearly) zero magnitude."""
        return is_nearly_zero_py(sum(d * d for d in self.direction) ** 0.5)
