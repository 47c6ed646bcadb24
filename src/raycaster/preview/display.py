"""Display processing for rendered images.

Rendered images are linear RGB. This module prepares them for display:
gamma encoding, clamping, and an optional Matplotlib preview window.

Example:
    >>> from raycaster.preview.display import process_image_for_display, show_preview
    >>> display_image = process_image_for_display(image, gamma=2.0)
    >>> show_preview(image, gamma=2.0)
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def apply_gamma(
    image: npt.NDArray[np.floating],
    gamma: float = 2.2,
) -> npt.NDArray[np.float64]:
    """Apply gamma encoding for display.

    Args:
        image: Linear image array of shape (H, W, 3) in [0, 1] range.
        gamma: Gamma value. 1.0 leaves the image linear.

    Returns:
        Gamma encoded image: out = in^(1/gamma).
    """
    if gamma == 1.0:
        return np.asarray(image, dtype=np.float64)

    # Clamp to [0, 1] before gamma to avoid NaN from negative values
    image = np.clip(image, 0.0, 1.0)
    return np.power(image, 1.0 / gamma).astype(np.float64)


def process_image_for_display(
    image: npt.NDArray[np.floating],
    gamma: float = 1.0,
) -> npt.NDArray[np.float64]:
    """Gamma encode and clamp an image to [0, 1].

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma value (default 1.0, linear).

    Returns:
        Processed image ready for display, in [0, 1] range.
    """
    result = apply_gamma(np.array(image, dtype=np.float64), gamma)
    return np.clip(result, 0.0, 1.0)


def show_preview(
    image: npt.NDArray[np.floating],
    *,
    gamma: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 4.5),
    block: bool = True,
) -> None:
    """Display a rendered image in a Matplotlib figure.

    Requires the optional matplotlib dependency.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma value applied for display.
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(image, gamma=gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = display_image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
