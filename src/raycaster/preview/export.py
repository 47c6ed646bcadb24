"""Pixel sinks and image export.

Sinks implement the camera's pixel protocol (``begin``, ``write_pixel``,
``end``) and receive linear RGB pixels in row-major order:

- ImageBuffer: collects pixels into a NumPy array
- PPMWriter: streams a plain-text PPM (P3) image

Quantization maps each channel to an integer in [0, 255] as
``int(256 * clamp(value, 0.0, 0.999))``.

Supported formats:
    - PPM (plain text, streamed)
    - PNG (8-bit via Pillow)

Example:
    >>> from raycaster.preview.export import PPMWriter
    >>> with open("image.ppm", "w") as f:
    ...     camera.render(world, sink=PPMWriter(f))
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from raycaster.preview.display import apply_gamma

# Channel intensities are clamped to this range before scaling by 256
INTENSITY_MIN = 0.0
INTENSITY_MAX = 0.999


def quantize(value: float) -> int:
    """Map a channel intensity to an integer byte value in [0, 255].

    NaN maps to 0.
    """
    if math.isnan(value):
        return 0
    clamped = min(max(value, INTENSITY_MIN), INTENSITY_MAX)
    return int(256 * clamped)


def _encode(value: float, gamma: float) -> float:
    if gamma == 1.0:
        return value
    return value ** (1.0 / gamma) if value > 0.0 else 0.0


class ImageBuffer:
    """Sink that stores pixels in a (height, width, 3) float64 array."""

    def __init__(self) -> None:
        self._image: npt.NDArray[np.float64] | None = None
        self._count = 0

    def begin(self, width: int, height: int) -> None:
        self._image = np.zeros((height, width, 3), dtype=np.float64)
        self._count = 0

    def write_pixel(self, pixel_color: tuple[float, float, float]) -> None:
        if self._image is None:
            raise RuntimeError("ImageBuffer.begin() must be called before write_pixel()")
        height, width = self._image.shape[:2]
        if self._count >= width * height:
            raise RuntimeError(f"ImageBuffer is full ({width}x{height} pixels)")
        j, i = divmod(self._count, width)
        self._image[j, i] = pixel_color
        self._count += 1

    def end(self) -> None:
        pass

    @property
    def pixel_count(self) -> int:
        """Number of pixels written since begin()."""
        return self._count

    @property
    def image(self) -> npt.NDArray[np.float64]:
        """The collected image.

        Raises:
            RuntimeError: If begin() has not been called.
        """
        if self._image is None:
            raise RuntimeError("ImageBuffer has no image; begin() was never called")
        return self._image


class PPMWriter:
    """Sink that streams a plain-text PPM (P3) image.

    Args:
        stream: Text stream to write to. The caller owns (and closes) it.
        gamma: Gamma applied to each channel before quantization
            (default 1.0, linear).
    """

    def __init__(self, stream: TextIO, gamma: float = 1.0) -> None:
        self.stream = stream
        self.gamma = gamma

    def begin(self, width: int, height: int) -> None:
        self.stream.write(f"P3\n{width} {height}\n255\n")

    def write_pixel(self, pixel_color: tuple[float, float, float]) -> None:
        r, g, b = (quantize(_encode(c, self.gamma)) for c in pixel_color)
        self.stream.write(f"{r} {g} {b}\n")

    def end(self) -> None:
        self.stream.flush()


def image_to_uint8(
    image: npt.NDArray[np.floating],
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8-bit.

    Uses the same quantization as the streaming sinks, including NaN to 0.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma value (default 1.0, linear).

    Returns:
        8-bit image array of shape (H, W, 3).
    """
    encoded = apply_gamma(np.asarray(image, dtype=np.float64), gamma)
    encoded = np.nan_to_num(encoded, nan=0.0)
    clamped = np.clip(encoded, INTENSITY_MIN, INTENSITY_MAX)
    return (256 * clamped).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.floating],
    filepath: str | Path,
    *,
    gamma: float = 1.0,
) -> None:
    """Save a linear image array as an 8-bit PNG file.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).
        gamma: Gamma value (default 1.0, linear).
    """
    pil_image = PILImage.fromarray(image_to_uint8(image, gamma=gamma))
    pil_image.save(str(filepath))


def write_ppm(
    image: npt.NDArray[np.floating],
    filepath: str | Path,
    *,
    gamma: float = 1.0,
) -> None:
    """Save a linear image array as a plain-text PPM file.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path.
        gamma: Gamma value (default 1.0, linear).
    """
    height, width = image.shape[:2]
    with open(filepath, "w", encoding="ascii") as f:
        writer = PPMWriter(f, gamma=gamma)
        writer.begin(width, height)
        for j in range(height):
            for i in range(width):
                writer.write_pixel(tuple(float(c) for c in image[j, i]))
        writer.end()


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
