"""Closed real intervals for bounding ray parameters.

An interval ``[min, max]`` may be empty (``min > max``) or unbounded. Hit
routines take the acceptable range of ``t`` as an interval and only accept
roots it *surrounds*, so a hit exactly on either bound is rejected.

Example:
    >>> import taichi as ti
    >>> from raycaster.core.interval import INFINITY, Interval
    >>> @ti.kernel
    ... def demo() -> ti.i32:
    ...     ray_t = Interval(min=0.0, max=INFINITY)
    ...     return ray_t.surrounds(0.0)  # 0: the bound itself is excluded
"""

import math

import taichi as ti

from raycaster.core.runtime import real

INFINITY = math.inf


@ti.dataclass
class Interval:
    """A real-valued range [min, max].

    Attributes:
        min: Lower bound (may be -inf).
        max: Upper bound (may be +inf).
    """

    min: real
    max: real

    @ti.func
    def size(self) -> real:
        """Return max - min (negative for an empty interval)."""
        return self.max - self.min

    @ti.func
    def contains(self, x: real) -> ti.i32:
        """Return 1 if min <= x <= max."""
        return self.min <= x and x <= self.max

    @ti.func
    def surrounds(self, x: real) -> ti.i32:
        """Return 1 if min < x < max."""
        return self.min < x and x < self.max

    @ti.func
    def clamp(self, x: real) -> real:
        """Saturate x to [min, max]."""
        result = x
        if x < self.min:
            result = self.min
        elif x > self.max:
            result = self.max
        return result


@ti.func
def empty_interval() -> Interval:
    """The interval containing nothing: (+inf, -inf)."""
    return Interval(min=INFINITY, max=-INFINITY)


@ti.func
def universe_interval() -> Interval:
    """The interval containing everything: (-inf, +inf)."""
    return Interval(min=-INFINITY, max=INFINITY)
