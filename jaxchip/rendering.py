"""CHIP-8 rendering utilities for visualization."""

from typing import Tuple

import jax.numpy as jnp
import numpy as np
from PIL import Image

from jaxchip.constants import SCREEN_WIDTH, SCREEN_HEIGHT

COLOR_SCHEMES = {
    "jaxchip": ((179, 102, 184), (45, 25, 61)),  # Project theme
    "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
    "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
    "white": ((255, 255, 255), (0, 0, 0)),  # White on black
    "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
    "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
}


def framebuffer_to_rgb(
    framebuffer: jnp.ndarray,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (0, 255, 0),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert the flat CHIP-8 framebuffer to an RGB array with optional upscaling.

    Args:
        framebuffer: uint8 array of 64*32 bytes, row-major, 0x00 off / 0xFF on
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: green)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    pixels = np.asarray(framebuffer).reshape(SCREEN_HEIGHT, SCREEN_WIDTH) != 0

    rgb_frame = np.zeros((SCREEN_HEIGHT, SCREEN_WIDTH, 3), dtype=np.uint8)

    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Apply upscaling using nearest neighbor interpolation
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def create_color_scheme(
    scheme: str = "jaxchip",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name ("jaxchip", "classic", "amber", "white", "blue", "retro")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    if scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES.keys())}"
        )

    return COLOR_SCHEMES[scheme]


def save_frame(framebuffer: jnp.ndarray, filename: str, scale: int = 8, color_scheme: str = "classic") -> None:
    """Save the framebuffer as an image file (format from the extension)."""
    on_color, off_color = create_color_scheme(color_scheme)
    rgb = framebuffer_to_rgb(framebuffer, scale=scale, on_color=on_color, off_color=off_color)
    Image.fromarray(rgb).save(filename)
