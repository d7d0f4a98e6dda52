# pixel_sampler/core/orientation.py

import logging
from typing import Callable, Dict

import cv2
import numpy as np

from pixel_sampler.domain.models import DecodedImage, NormalizedImage, Orientation

logger = logging.getLogger(__name__)


def _transverse(pixels: np.ndarray) -> np.ndarray:
    return cv2.rotate(cv2.transpose(pixels), cv2.ROTATE_180)


# Inverse of each declared orientation; same results as PIL.ImageOps.exif_transpose
_UPRIGHT_TRANSFORMS: Dict[Orientation, Callable[[np.ndarray], np.ndarray]] = {
    Orientation.MIRROR_HORIZONTAL: lambda p: cv2.flip(p, 1),
    Orientation.ROTATE_180: lambda p: cv2.rotate(p, cv2.ROTATE_180),
    Orientation.MIRROR_VERTICAL: lambda p: cv2.flip(p, 0),
    Orientation.TRANSPOSE: cv2.transpose,
    Orientation.ROTATE_90_CW: lambda p: cv2.rotate(p, cv2.ROTATE_90_CLOCKWISE),
    Orientation.TRANSVERSE: _transverse,
    Orientation.ROTATE_90_CCW: lambda p: cv2.rotate(p, cv2.ROTATE_90_COUNTERCLOCKWISE),
}


class OrientationNormalizer:
    """
    Re-projects decoded pixels so that row 0 is the visual top and column 0 the visual left.

    Must run before any coordinate mapping; otherwise samples come from a
    rotated or mirrored position relative to what is shown on screen.
    """

    def normalize(self, decoded: DecodedImage) -> NormalizedImage:
        orientation = Orientation.from_exif(decoded.orientation)
        if orientation == Orientation.NORMAL:
            # Already upright: wrap the same buffer, no copy
            return NormalizedImage(
                width=decoded.width,
                height=decoded.height,
                pixels=decoded.pixels,
                premultiplied=decoded.premultiplied,
            )

        source = np.ascontiguousarray(decoded.pixels)
        upright = _UPRIGHT_TRANSFORMS[orientation](source)
        height, width = upright.shape[:2]
        logger.debug(f"Normalized orientation {orientation.name}: {decoded.width}x{decoded.height} -> {width}x{height}")
        return NormalizedImage(
            width=width,
            height=height,
            pixels=np.ascontiguousarray(upright),
            premultiplied=decoded.premultiplied,
        )
