"""Vector algebra for 3-component double-precision vectors.

Points, free vectors and colors share one Taichi vector type. Negation,
indexed read/write, in-place ``+=``/``*=``, addition, subtraction,
component-wise multiplication and scalar multiplication in either operand
order are native Taichi vector operators. This module adds the named
operations on top of ``taichi.math``.

Example:
    >>> import taichi as ti
    >>> from raycaster.core.vec3 import vec3, dot, unit_vector
    >>> @ti.kernel
    ... def demo() -> ti.f64:
    ...     return dot(unit_vector(vec3(3.0, 0.0, 4.0)), vec3(1.0, 0.0, 0.0))
"""

import taichi as ti
import taichi.math as tm

from raycaster.core.runtime import real

# One vector type used for positions, directions and colors
vec3 = ti.types.vector(3, real)
point3 = vec3
color = vec3


@ti.func
def dot(u: vec3, v: vec3) -> real:
    """Compute the dot product u . v."""
    return tm.dot(u, v)


@ti.func
def cross(u: vec3, v: vec3) -> vec3:
    """Compute the cross product u x v."""
    return tm.cross(u, v)


@ti.func
def length_squared(v: vec3) -> real:
    """Compute the squared Euclidean length of a vector."""
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> real:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def vec_div(v: vec3, t: real) -> vec3:
    """Divide a vector by a scalar.

    Implemented as multiplication by the reciprocal. The caller must not pass
    ``t == 0``.
    """
    return (1.0 / t) * v


@ti.func
def unit_vector(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Not guarded: the zero vector produces NaN components.
    """
    return vec_div(v, length(v))
