"""Preset scenes.

Both presets use a 16:9 camera, 400 pixels wide, at the origin looking down
-z, and a unit-distance viewport:

- Single sphere: one sphere of radius 0.5 centered one unit in front of the
  camera.
- Ground: the same sphere resting on a large sphere that acts as the ground.

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi("cpu")
    >>> from raycaster.scene.presets import create_ground_scene
    >>> world, camera = create_ground_scene()
    >>> image = camera.render(world)
"""

from dataclasses import dataclass

from raycaster.camera.camera import Camera
from raycaster.scene.world import SceneCollection, add_sphere

# =============================================================================
# Scene Constants
# =============================================================================

SPHERE_CENTER = (0.0, 0.0, -1.0)
SPHERE_RADIUS = 0.5

GROUND_CENTER = (0.0, -100.5, -1.0)
GROUND_RADIUS = 100.0

ASPECT_RATIO = 16.0 / 9.0
IMAGE_WIDTH = 400
SAMPLES_PER_PIXEL = 100


@dataclass
class PresetParams:
    """Camera parameters shared by the preset scenes.

    Attributes:
        aspect_ratio: Ideal image aspect ratio.
        image_width: Image width in pixels.
        samples_per_pixel: Samples averaged per pixel.
        seed: Sample generator seed.
    """

    aspect_ratio: float = ASPECT_RATIO
    image_width: int = IMAGE_WIDTH
    samples_per_pixel: int = SAMPLES_PER_PIXEL
    seed: int = 0

    def make_camera(self) -> Camera:
        """Create a camera from these parameters."""
        return Camera(
            aspect_ratio=self.aspect_ratio,
            image_width=self.image_width,
            samples_per_pixel=self.samples_per_pixel,
            seed=self.seed,
        )


def create_single_sphere_scene(
    params: PresetParams | None = None,
) -> tuple[SceneCollection, Camera]:
    """Create a scene with one sphere in front of the camera.

    Args:
        params: Optional camera parameters. Defaults to PresetParams().

    Returns:
        A tuple of (world, camera).
    """
    if params is None:
        params = PresetParams()

    world = SceneCollection()
    world.add(add_sphere(SPHERE_CENTER, SPHERE_RADIUS))
    return world, params.make_camera()


def create_ground_scene(
    params: PresetParams | None = None,
) -> tuple[SceneCollection, Camera]:
    """Create a scene with one sphere resting on a ground sphere.

    Args:
        params: Optional camera parameters. Defaults to PresetParams().

    Returns:
        A tuple of (world, camera).
    """
    if params is None:
        params = PresetParams()

    world = SceneCollection()
    world.add(add_sphere(SPHERE_CENTER, SPHERE_RADIUS))
    world.add(add_sphere(GROUND_CENTER, GROUND_RADIUS))
    return world, params.make_camera()


SCENES = {
    "single": create_single_sphere_scene,
    "ground": create_ground_scene,
}
