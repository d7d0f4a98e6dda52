# pixel_sampler/infrastructure/pixel_decoder.py
import io
import logging

import numpy as np
from PIL import Image

from pixel_sampler.config import EXIF_ORIENTATION_TAG
from pixel_sampler.domain.errors import DecodeFailedError
from pixel_sampler.domain.models import DecodedImage, Orientation

logger = logging.getLogger(__name__)

# Pillow's premultiplied-alpha mode
_PREMULTIPLIED_MODE = "RGBa"


class PixelDecoder:
    """Thin adapter over Pillow: encoded bytes -> RGBA8 pixel array plus declared orientation."""

    def decode(self, data: bytes) -> DecodedImage:
        """
        Decodes the first frame of an encoded image.

        Orientation is reported as declared in EXIF metadata and is NOT applied here.

        Raises:
            DecodeFailedError: If Pillow cannot identify or fully decode the data.
        """
        if not data:
            raise DecodeFailedError("No bytes to decode.")
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.seek(0)
                orientation = Orientation.from_exif(img.getexif().get(EXIF_ORIENTATION_TAG))
                if img.mode == _PREMULTIPLIED_MODE:
                    premultiplied = True
                    frame = img.copy()
                else:
                    premultiplied = False
                    frame = img.convert("RGBA")
                pixels = np.array(frame, dtype=np.uint8)
        except Exception as e:
            # Pillow raises a mix of OSError, ValueError, SyntaxError and DecompressionBombError
            logger.debug(f"Pillow failed to decode {len(data)} bytes: {e}")
            raise DecodeFailedError(f"Cannot decode image: {e}") from e

        if pixels.ndim != 3 or pixels.shape[2] != 4 or pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise DecodeFailedError(f"Unexpected decoded buffer shape {pixels.shape}.")

        height, width = pixels.shape[:2]
        logger.debug(f"Decoded {width}x{height} image, orientation={orientation.name}, premultiplied={premultiplied}")
        return DecodedImage(
            width=width,
            height=height,
            pixels=pixels,
            orientation=orientation,
            premultiplied=premultiplied,
        )
