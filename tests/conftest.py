import io

import numpy as np
import pytest
from PIL import Image

import pixel_sampler
from pixel_sampler.config import EXIF_ORIENTATION_TAG


def encode_png(pixels: np.ndarray, orientation=None) -> bytes:
    """Encodes an (H, W, 4) uint8 array as PNG, optionally tagging an EXIF orientation."""
    img = Image.fromarray(pixels)
    buf = io.BytesIO()
    if orientation is None:
        img.save(buf, format="PNG")
    else:
        exif = Image.Exif()
        exif[EXIF_ORIENTATION_TAG] = orientation
        img.save(buf, format="PNG", exif=exif)
    return buf.getvalue()


def quadrant_pixels(width=4, height=6) -> np.ndarray:
    """Opaque image whose four quadrants are red, green, blue and white (TL, TR, BL, BR)."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    hw, hh = width // 2, height // 2
    pixels[:hh, :hw, :3] = (255, 0, 0)
    pixels[:hh, hw:, :3] = (0, 255, 0)
    pixels[hh:, :hw, :3] = (0, 0, 255)
    pixels[hh:, hw:, :3] = (255, 255, 255)
    return pixels


@pytest.fixture
def write_png(tmp_path):
    def _write(name, pixels, orientation=None):
        path = tmp_path / name
        path.write_bytes(encode_png(pixels, orientation))
        return path
    return _write


@pytest.fixture
def solid_png(write_png):
    """100x200 image, top half (10, 20, 30), bottom half (200, 150, 100), with pixel (50, 100) distinct."""
    pixels = np.zeros((200, 100, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    pixels[:100, :, :3] = (10, 20, 30)
    pixels[100:, :, :3] = (200, 150, 100)
    pixels[100, 50, :3] = (0xAB, 0xCD, 0xEF)
    return write_png("solid.png", pixels)


@pytest.fixture(autouse=True)
def _reset_default_sampler():
    pixel_sampler.reset_default_sampler()
    yield
    pixel_sampler.reset_default_sampler()
