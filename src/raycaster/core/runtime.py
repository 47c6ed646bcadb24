"""Taichi runtime initialization.

All ray math in this package is written against 64-bit floats. Taichi types
untyped float literals with ``default_fp``, so the runtime must be initialized
with ``default_fp=ti.f64`` for constants such as ``0.7`` to keep full
precision. ``fast_math`` is disabled so expressions are evaluated in the order
they are written.

Modules that allocate Taichi fields (``raycaster.scene.world`` and
``raycaster.camera.camera``) must be imported after :func:`init_taichi`.

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi("cpu", random_seed=42)
"""

from typing import Any

import taichi as ti

# Scalar type used for every real-valued quantity
real = ti.f64

_ARCHS = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
}


def resolve_arch(arch: Any) -> Any:
    """Map an architecture name to a Taichi arch.

    Args:
        arch: One of "cpu", "gpu", "cuda", "vulkan", or a Taichi arch object.

    Returns:
        The Taichi arch.

    Raises:
        ValueError: If the name is not a known architecture.
    """
    if not isinstance(arch, str):
        return arch
    try:
        return _ARCHS[arch.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown Taichi arch: {arch!r} (expected one of {sorted(_ARCHS)})"
        ) from None


def init_taichi(arch: Any = "cpu", *, random_seed: int = 0, debug: bool = False) -> None:
    """Initialize the Taichi runtime for double-precision rendering.

    Args:
        arch: Backend name or Taichi arch object (default "cpu").
        random_seed: Seed for Taichi's internal generator.
        debug: Enable Taichi debug mode (bounds checks).

    Raises:
        ValueError: If ``arch`` is an unknown name.
    """
    ti.init(
        arch=resolve_arch(arch),
        default_fp=real,
        fast_math=False,
        random_seed=random_seed,
        debug=debug,
    )
