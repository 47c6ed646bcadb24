"""Camera module for ray generation and rendering.

Components:
    camera: Fixed pinhole camera with multi-sample render loop

Camera responsibilities:
    - Derive image height and viewport geometry from the configuration
    - Generate jittered sample rays through each pixel
    - Color samples and average them per pixel
    - Emit pixels in row-major order to a sink, reporting progress per row

This module allocates Taichi fields; import it after
raycaster.core.runtime.init_taichi().
"""

from .camera import (
    Camera,
    CameraState,
    PixelSink,
    ProgressCallback,
    compute_image_height,
    get_camera_info,
    get_ray,
    ray_color,
)

__all__ = [
    "Camera",
    "CameraState",
    "PixelSink",
    "ProgressCallback",
    "compute_image_height",
    "get_camera_info",
    "get_ray",
    "ray_color",
]
