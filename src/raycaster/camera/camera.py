"""Camera model: viewport geometry, sample rays and the render loop.

The camera sits at the origin looking down -z at a viewport one unit away.
The viewport is 2 units tall and as wide as the actual (integer) image aspect
ratio allows. Pixel (0, 0) is the upper-left pixel; rows run top to bottom.

For every pixel the camera averages ``samples_per_pixel`` rays, each through
a point jittered uniformly within the pixel square. A sample is colored by its
hit normal mapped to [0, 1], or by a white-to-sky-blue vertical gradient when
the ray escapes. Sample offsets come from an explicit NumPy generator seeded
with ``Camera.seed``, so a render is reproducible.

Derived state is computed in Python (NumPy, float64) by ``initialize`` and
uploaded to Taichi fields right before the render loop starts.

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi("cpu")
    >>> from raycaster.camera.camera import Camera
    >>> from raycaster.scene.world import SceneCollection, add_sphere
    >>> world = SceneCollection(add_sphere((0.0, 0.0, -1.0), 0.5))
    >>> camera = Camera(aspect_ratio=16.0 / 9.0, image_width=400, samples_per_pixel=10)
    >>> image = camera.render(world)
    >>> image.shape
    (225, 400, 3)
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

import numpy as np
import numpy.typing as npt
import taichi as ti

from raycaster.core.interval import INFINITY, Interval
from raycaster.core.ray import Ray, make_ray
from raycaster.core.runtime import real
from raycaster.core.vec3 import color, unit_vector
from raycaster.scene.world import Hittable, hit_hittable, hittable_handle

logger = logging.getLogger(__name__)

# Fixed viewport geometry
FOCAL_LENGTH = 1.0
VIEWPORT_HEIGHT = 2.0

# Type alias for progress callback
# Callback receives the number of rows not yet rendered
ProgressCallback = Callable[[int], None]


class PixelSink(Protocol):
    """Consumer of rendered pixels.

    ``begin`` is called once with the image size, then ``write_pixel`` once
    per pixel in row-major order (top row first), then ``end``. Colors are
    linear RGB, nominally in [0, 1]. The sink owns any file format, header
    and quantization.
    """

    def begin(self, width: int, height: int) -> None: ...

    def write_pixel(self, pixel_color: tuple[float, float, float]) -> None: ...

    def end(self) -> None: ...


class CameraState(Enum):
    """Lifecycle of a camera."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    RENDERING = "rendering"
    DONE = "done"


def compute_image_height(image_width: int, aspect_ratio: float) -> int:
    """Derive the image height from width and aspect ratio.

    The height is truncated to an integer and never less than 1.
    """
    return max(1, int(image_width / aspect_ratio))


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_center = ti.Vector.field(3, dtype=real, shape=())
_pixel00_loc = ti.Vector.field(3, dtype=real, shape=())  # Center of pixel (0, 0)
_pixel_delta_u = ti.Vector.field(3, dtype=real, shape=())  # Offset to pixel on the right
_pixel_delta_v = ti.Vector.field(3, dtype=real, shape=())  # Offset to pixel below


@dataclass(eq=False)
class Camera:
    """A pinhole camera with fixed position and orientation.

    Attributes:
        aspect_ratio: Ideal ratio of image width over height.
        image_width: Rendered image width in pixels.
        samples_per_pixel: Number of random samples averaged per pixel
            (must be >= 1).
        seed: Seed of the sample offset generator.
        state: Current lifecycle state.
        image_height: Derived image height in pixels.
        pixel_samples_scale: Derived color scale for a sum of samples.
        center: Derived camera center.
        pixel00_loc: Derived location of the center of pixel (0, 0).
        pixel_delta_u: Derived offset to the pixel on the right.
        pixel_delta_v: Derived offset to the pixel below.
    """

    aspect_ratio: float = 1.0
    image_width: int = 100
    samples_per_pixel: int = 10
    seed: int | None = 0

    state: CameraState = field(default=CameraState.UNINITIALIZED, init=False)
    image_height: int = field(default=0, init=False)
    pixel_samples_scale: float = field(default=0.0, init=False)
    center: npt.NDArray[np.float64] = field(default_factory=lambda: np.zeros(3), init=False)
    pixel00_loc: npt.NDArray[np.float64] = field(
        default_factory=lambda: np.zeros(3), init=False
    )
    pixel_delta_u: npt.NDArray[np.float64] = field(
        default_factory=lambda: np.zeros(3), init=False
    )
    pixel_delta_v: npt.NDArray[np.float64] = field(
        default_factory=lambda: np.zeros(3), init=False
    )

    def initialize(self) -> None:
        """Compute all derived state from the configuration.

        Safe to call repeatedly; every derived attribute is recomputed.

        Raises:
            ZeroDivisionError: If samples_per_pixel is 0.
        """
        self.image_height = compute_image_height(self.image_width, self.aspect_ratio)
        self.pixel_samples_scale = 1.0 / self.samples_per_pixel

        self.center = np.zeros(3, dtype=np.float64)

        # Viewport width follows the actual image ratio, not the ideal one
        viewport_width = VIEWPORT_HEIGHT * (float(self.image_width) / self.image_height)

        # Vectors across the top edge and down the left edge of the viewport
        viewport_u = np.array([viewport_width, 0.0, 0.0])
        viewport_v = np.array([0.0, -VIEWPORT_HEIGHT, 0.0])

        # Divisions are reciprocal multiplies, matching vec_div in kernels
        with np.errstate(divide="ignore", invalid="ignore"):
            self.pixel_delta_u = (1.0 / np.float64(self.image_width)) * viewport_u
        self.pixel_delta_v = (1.0 / np.float64(self.image_height)) * viewport_v

        viewport_upper_left = (
            self.center
            - np.array([0.0, 0.0, FOCAL_LENGTH])
            - (1.0 / 2.0) * viewport_u
            - (1.0 / 2.0) * viewport_v
        )
        self.pixel00_loc = viewport_upper_left + 0.5 * (self.pixel_delta_u + self.pixel_delta_v)

        self.state = CameraState.INITIALIZED
        logger.debug(
            "Camera initialized: %dx%d, %d spp, pixel00=%s, du=%s, dv=%s",
            self.image_width,
            self.image_height,
            self.samples_per_pixel,
            self.pixel00_loc,
            self.pixel_delta_u,
            self.pixel_delta_v,
        )

    def _upload(self) -> None:
        """Copy derived state into the Taichi camera fields."""
        _camera_center[None] = self.center.tolist()
        _pixel00_loc[None] = self.pixel00_loc.tolist()
        _pixel_delta_u[None] = self.pixel_delta_u.tolist()
        _pixel_delta_v[None] = self.pixel_delta_v.tolist()

    def render(
        self,
        world: Hittable,
        sink: PixelSink | None = None,
        progress: ProgressCallback | None = None,
    ) -> npt.NDArray[np.float64]:
        """Render the world.

        Rows are rendered top to bottom. Before each row the progress callback
        (if any) receives the number of rows remaining; after each row its
        pixels are forwarded to the sink (if any) from left to right.

        Once ``sink.begin`` has been called, ``sink.end`` is always called,
        even when a row, the sink or the progress callback raises. A failed
        render leaves the camera INITIALIZED and re-raises the error.

        Args:
            world: The hittable to render (a SceneCollection or a sphere).
                It must not change during the render.
            sink: Optional pixel consumer.
            progress: Optional callback receiving rows remaining.

        Returns:
            Linear RGB image of shape (image_height, image_width, 3).

        Raises:
            TypeError: If world is not a hittable.
        """
        kind, index = hittable_handle(world)
        self.initialize()
        self._upload()

        width = self.image_width
        height = self.image_height
        spp = self.samples_per_pixel
        rng = np.random.default_rng(self.seed)

        logger.info("Rendering %dx%d at %d samples per pixel", width, height, spp)
        self.state = CameraState.RENDERING

        image = np.zeros((height, width, 3), dtype=np.float64)
        row = np.zeros((width, 3), dtype=np.float64)

        if sink is not None:
            sink.begin(width, height)

        try:
            for j in range(height):
                if progress is not None:
                    progress(height - j)

                # Offsets in [-0.5, 0.5) pixel widths, drawn in row order
                offsets = rng.random((width, spp, 2)) - 0.5
                _render_row(j, kind, index, spp, self.pixel_samples_scale, offsets, row)
                image[j] = row

                if sink is not None:
                    for i in range(width):
                        sink.write_pixel((float(row[i, 0]), float(row[i, 1]), float(row[i, 2])))
        except Exception:
            # Derived state is still valid; only the render was abandoned
            self.state = CameraState.INITIALIZED
            logger.warning("Render aborted at row %d of %d", j, height)
            raise
        finally:
            if sink is not None:
                sink.end()

        self.state = CameraState.DONE
        logger.info("Render done")
        return image


# =============================================================================
# Ray Generation and Shading (Taichi-side)
# =============================================================================


@ti.func
def get_ray(i: ti.i32, j: ti.i32, offset_x: real, offset_y: real) -> Ray:
    """Construct a camera ray through a sample point of pixel (i, j).

    Args:
        i: Pixel column (0 = left).
        j: Pixel row (0 = top).
        offset_x: Horizontal offset from the pixel center in pixel widths.
        offset_y: Vertical offset from the pixel center in pixel heights.

    Returns:
        A ray from the camera center through the sample point. The direction
        is not normalized.
    """
    pixel_sample = (
        _pixel00_loc[None]
        + ((i + offset_x) * _pixel_delta_u[None])
        + ((j + offset_y) * _pixel_delta_v[None])
    )
    ray_origin = _camera_center[None]
    return make_ray(ray_origin, pixel_sample - ray_origin)


@ti.func
def ray_color(ray: Ray, kind: ti.i32, index: ti.i32) -> color:
    """Color a camera ray.

    Hits are colored by their normal mapped from [-1, 1] to [0, 1]. Misses
    blend white and sky blue by the height of the unit direction.
    """
    rec = hit_hittable(kind, index, ray, Interval(min=0.0, max=INFINITY))
    result = color(0.0, 0.0, 0.0)
    if rec.hit == 1:
        result = 0.5 * (rec.normal + color(1.0, 1.0, 1.0))
    else:
        unit_direction = unit_vector(ray.direction)
        a = 0.5 * (unit_direction.y + 1.0)
        result = (1.0 - a) * color(1.0, 1.0, 1.0) + a * color(0.5, 0.7, 1.0)
    return result


@ti.kernel
def _render_row(
    j: ti.i32,
    kind: ti.i32,
    index: ti.i32,
    samples_per_pixel: ti.i32,
    pixel_samples_scale: real,
    offsets: ti.types.ndarray(),
    out: ti.types.ndarray(),
):
    """Render one image row into out[width, 3]."""
    ti.loop_config(serialize=True)
    for i in range(out.shape[0]):
        pixel_color = color(0.0, 0.0, 0.0)
        for s in range(samples_per_pixel):
            ray = get_ray(i, j, offsets[i, s, 0], offsets[i, s, 1])
            pixel_color += ray_color(ray, kind, index)
        pixel_color = pixel_samples_scale * pixel_color
        for c in ti.static(range(3)):
            out[i, c] = pixel_color[c]


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the camera state currently uploaded to Taichi fields.

    Returns:
        Dictionary with center, pixel00_loc, pixel_delta_u, pixel_delta_v.
    """
    info = {}
    for name, fld in (
        ("center", _camera_center),
        ("pixel00_loc", _pixel00_loc),
        ("pixel_delta_u", _pixel_delta_u),
        ("pixel_delta_v", _pixel_delta_v),
    ):
        v = fld[None]
        info[name] = (float(v[0]), float(v[1]), float(v[2]))
    return info
