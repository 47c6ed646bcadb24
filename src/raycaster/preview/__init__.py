"""Preview module: pixel sinks, image export and display.

Components:
    export: ImageBuffer and PPMWriter sinks, PNG/PPM export, RMSE
    display: Gamma encoding and Matplotlib preview

Neither module depends on Taichi; both work on linear RGB NumPy images or
pixel streams produced by raycaster.camera.Camera.render().
"""

from .display import apply_gamma, process_image_for_display, show_preview
from .export import (
    ImageBuffer,
    PPMWriter,
    compute_rmse,
    image_to_uint8,
    quantize,
    save_png_from_array,
    write_ppm,
)

__all__ = [
    "apply_gamma",
    "process_image_for_display",
    "show_preview",
    "ImageBuffer",
    "PPMWriter",
    "quantize",
    "image_to_uint8",
    "save_png_from_array",
    "write_ppm",
    "compute_rmse",
]
