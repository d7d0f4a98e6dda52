import math
import logging

from pixel_sampler.domain.errors import InvalidRequestError
from pixel_sampler.domain.models import PixelCoordinate, SampleRequest

logger = logging.getLogger(__name__)


def _to_index(value: float, size: int) -> int:
    # Compare before flooring so an overflowed product (inf) still clamps
    if math.isnan(value) or value < 0:
        return 0
    if value >= size:
        return size - 1
    return math.floor(value)


def map_to_pixel(request: SampleRequest, image_width: int, image_height: int) -> PixelCoordinate:
    """
    Converts a display-space point into a pixel of the normalized image.

    The display point is scaled by image/display size, floored, then clamped
    into [0, width-1] x [0, height-1]. Values outside the image clamp to the
    nearest edge and never wrap.

    Raises:
        InvalidRequestError: Non-finite coordinates, a non-positive display size,
            or an empty image.
    """
    if not request.is_valid():
        raise InvalidRequestError(
            f"Cannot map ({request.x}, {request.y}) on a {request.display_width}x{request.display_height} display.",
            uri=request.uri,
        )
    if image_width <= 0 or image_height <= 0:
        raise InvalidRequestError(f"Image has no pixels ({image_width}x{image_height}).", uri=request.uri)

    # Multiply before dividing: a tiny display size would overflow the scale to inf, and 0 * inf is NaN
    px = _to_index(float(request.x) * image_width / float(request.display_width), image_width)
    py = _to_index(float(request.y) * image_height / float(request.display_height), image_height)
    return PixelCoordinate(px=px, py=py)
