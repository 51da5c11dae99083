"""Deterministic image cleanup applied before OCR.

Two passes, in order:
1. Grayscale by averaging the R, G and B channels (not luminance weighting).
2. Contrast stretch around the midpoint using the classic
   ``259 * (c + 255) / (255 * (259 - c))`` factor.
"""

import numpy as np
from PIL import Image

CONTRAST = 1.5
_MIDPOINT = 128.0


def contrast_factor(contrast: float = CONTRAST) -> float:
    """Return the multiplier applied to each pixel's distance from the midpoint."""
    return (259 * (contrast + 255)) / (255 * (259 - contrast))


def preprocess_image(image: Image.Image, contrast: float = CONTRAST) -> Image.Image:
    """Return a grayscale, contrast-stretched copy of *image* (mode "L")."""
    rgb = np.asarray(image.convert("RGB"), dtype=np.float32)
    gray = rgb.mean(axis=2)
    stretched = contrast_factor(contrast) * (gray - _MIDPOINT) + _MIDPOINT
    return Image.fromarray(np.clip(np.rint(stretched), 0, 255).astype(np.uint8))
