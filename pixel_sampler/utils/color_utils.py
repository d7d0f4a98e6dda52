import logging
from typing import Tuple, Union

from pixel_sampler.domain.errors import OutOfBoundsError
from pixel_sampler.domain.models import Color, NormalizedImage, PixelCoordinate

logger = logging.getLogger(__name__)

TRANSPARENT_COLOR = Color(0, 0, 0)


def unpremultiply(r: int, g: int, b: int, a: int) -> Tuple[int, int, int]:
    """Divides alpha back out of premultiplied channels, clamping to 0..255."""
    if a == 0:
        return (0, 0, 0)
    return tuple(min(255, (c * 255) // a) for c in (r, g, b))


def extract_color(image: NormalizedImage, coord: PixelCoordinate) -> Color:
    """
    Reads the RGBA8 texel at a pixel coordinate and returns its opaque RGB color.

    A fully transparent texel (alpha 0) reports black whatever its stored
    channels are. Premultiplied texels are un-premultiplied; straight-alpha
    texels pass through unchanged.

    Args:
        image: The normalized (top-left origin) image.
        coord: A pixel coordinate inside the image.

    Returns:
        The Color at that pixel.

    Raises:
        OutOfBoundsError: If the coordinate lies outside the image.
    """
    if not (0 <= coord.px < image.width and 0 <= coord.py < image.height):
        raise OutOfBoundsError(f"Pixel ({coord.px}, {coord.py}) outside {image.width}x{image.height} image.")

    r, g, b, a = (int(c) for c in image.pixels[coord.py, coord.px])
    if a == 0:
        return TRANSPARENT_COLOR
    if image.premultiplied:
        return Color(*unpremultiply(r, g, b, a))
    return Color(r, g, b)


def rgb_to_hex(rgb: Union[Color, Tuple[int, int, int]]) -> str:
    """Converts a color to an uppercase '#RRGGBB' string."""
    if isinstance(rgb, Color):
        rgb = (rgb.r, rgb.g, rgb.b)
    # Clamp values to 0-255 and convert to int
    r, g, b = [max(0, min(255, int(c))) for c in rgb]
    return '#{:02X}{:02X}{:02X}'.format(r, g, b)
