"""Sphere primitive with ray-sphere intersection and area-light sampling.

The ray-sphere intersection is found by solving:
    |ray.origin + t * ray.direction - center|^2 = radius^2

which expands into a*t^2 + 2*b*t + c = 0 with:
    a = dot(direction, direction)
    b = dot(direction, origin - center)   (half of the traditional b)
    c = dot(origin - center, origin - center) - radius^2

A discriminant b^2 - a*c at or below epsilon is a miss: grazing rays are
dropped rather than producing an unstable double root. Of the two roots, the
near one is tested first, so the closest hit in front of the ray is returned.

Spheres can also act as area lights: sample_sphere_point() draws a uniform
point on the surface and sphere_area() gives the surface area for the pdf.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.geometry.sphere import Sphere, intersect_sphere
    >>> sphere = Sphere(origin=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use intersect_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from raykernel.core.bbox import BBox, make_bbox
from raykernel.core.intersection import (
    Intersection,
    make_intersection,
    miss_intersection,
)
from raykernel.core.numeric import EPSILON, is_positive
from raykernel.core.ray import Ray, ray_at
from raykernel.core.sampling import coord_system, uniform_sample_sphere

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        origin: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    origin: vec3
    radius: ti.f32


@ti.func
def make_sphere(origin: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(origin=origin, radius=radius)


@ti.func
def sphere_roots(ray: Ray, sphere: Sphere):
    """Solve the ray-sphere quadratic.

    See <http://en.wikipedia.org/wiki/Line%E2%80%93sphere_intersection>.

    Args:
        ray: The ray to test (direction need not be normalized).
        sphere: The sphere to test against.

    Returns:
        A tuple (valid, t_near, t_far) with t_near < t_far. valid is 0 when
        the discriminant is not positive beyond epsilon, in which case the
        roots are meaningless.
    """
    diff = ray.origin - sphere.origin
    d = ray.direction

    a = tm.dot(d, d)
    b = tm.dot(d, diff)
    c = tm.dot(diff, diff) - sphere.radius * sphere.radius

    discriminant = b * b - a * c

    valid = 0
    t_near = 0.0
    t_far = 0.0
    if discriminant > EPSILON:
        root = ti.sqrt(discriminant)
        t_near = (-b - root) / a
        t_far = (-b + root) / a
        valid = 1
    return valid, t_near, t_far


@ti.func
def intersect_sphere(ray: Ray, sphere: Sphere) -> Intersection:
    """Find the closest intersection of a ray with a sphere.

    The normal always points outward from the center; rays starting inside
    the sphere hit the far root and see the outward normal too.

    Args:
        ray: The ray to test (direction need not be normalized).
        sphere: The sphere to test against.

    Returns:
        An Intersection with an outward unit normal and a tangent frame
        built around it, or a miss record.
    """
    valid, t_near, t_far = sphere_roots(ray, sphere)
    result = miss_intersection()

    if valid:
        t = 0.0
        found = 0
        # Near root first so the closest hit wins
        if is_positive(t_near):
            t = t_near
            found = 1
        elif is_positive(t_far):
            t = t_far
            found = 1

        if found:
            point = ray_at(ray, t)
            normal = tm.normalize(point - sphere.origin)
            tangent, binormal = coord_system(normal)
            result = make_intersection(point, normal, tangent, binormal, t)

    return result


@ti.func
def intersect_sphere_shadow(ray: Ray, sphere: Sphere, max_distance: ti.f32) -> ti.i32:
    """Test whether a ray hits a sphere before max_distance.

    Cheaper than intersect_sphere(): no hit point, normal or frame is built.

    Args:
        ray: The shadow ray.
        sphere: The sphere to test against.
        max_distance: Hits at or beyond this parameter do not count.

    Returns:
        1 if the sphere blocks the ray within range, 0 otherwise.
    """
    valid, t_near, t_far = sphere_roots(ray, sphere)
    blocked = 0
    if valid:
        if is_positive(t_near) and is_positive(max_distance - t_near):
            blocked = 1
        elif is_positive(t_far) and is_positive(max_distance - t_far):
            blocked = 1
    return blocked


@ti.func
def sphere_bounds(sphere: Sphere) -> BBox:
    """Compute the axis-aligned bounding box center +/- (r, r, r)."""
    diag = vec3(sphere.radius, sphere.radius, sphere.radius)
    return make_bbox(sphere.origin - diag, sphere.origin + diag)


@ti.func
def sample_sphere_point(sphere: Sphere):
    """Sample a point uniformly on the sphere's surface.

    Consumes three standard-normal variates from the per-thread generator.

    Args:
        sphere: The sphere to sample.

    Returns:
        A tuple (position, normal) where normal is the outward unit normal
        at position, equal to (position - center) / radius.
    """
    normal = uniform_sample_sphere()
    position = sphere.origin + normal * sphere.radius
    return position, normal


@ti.func
def sphere_area(sphere: Sphere) -> ti.f32:
    """Compute the surface area 4 * pi * r^2."""
    return 4.0 * tm.pi * sphere.radius * sphere.radius
