"""Pixel sampler public API.

Answers "what color is the pixel under display point (x, y) of an image
rendered at (display_width, display_height)?" with a cached, orientation-aware
pipeline. The module-level functions delegate to a lazily built default
PixelSamplerService configured from pixel_sampler.config.
"""

import threading
from typing import Optional

from . import config
from .application.services import PixelSamplerService
from .core.image_cache import ImageCache
from .domain.errors import (
    DecodeFailedError,
    InvalidRequestError,
    OutOfBoundsError,
    PixelSamplerError,
    UnreachableError,
    UnsupportedSchemeError,
)
from .domain.models import Color, SampleRequest, SampleResult, SamplerConfig, SamplingState

__all__ = [
    "get_pixel_color",
    "get_pixel_color_async",
    "default_sampler",
    "reset_default_sampler",
    "PixelSamplerService",
    "ImageCache",
    "SamplerConfig",
    "SampleRequest",
    "SampleResult",
    "SamplingState",
    "Color",
    "PixelSamplerError",
    "UnsupportedSchemeError",
    "UnreachableError",
    "DecodeFailedError",
    "OutOfBoundsError",
    "InvalidRequestError",
]

_default_sampler: Optional[PixelSamplerService] = None
_default_lock = threading.Lock()


def default_sampler() -> PixelSamplerService:
    """Returns the process-wide default service, creating it on first use."""
    global _default_sampler
    with _default_lock:
        if _default_sampler is None:
            _default_sampler = PixelSamplerService(
                SamplerConfig(
                    max_entries=config.MAX_ENTRIES,
                    eviction_policy=config.EVICTION_POLICY,
                    fetch_timeout=config.FETCH_TIMEOUT,
                )
            )
        return _default_sampler


def reset_default_sampler(sampler: Optional[PixelSamplerService] = None) -> None:
    """Replaces (or drops, with None) the default service and its cache."""
    global _default_sampler
    with _default_lock:
        _default_sampler = sampler


def get_pixel_color(image_uri: str, x: float, y: float, display_width: float, display_height: float) -> str:
    return default_sampler().get_pixel_color(image_uri, x, y, display_width, display_height)


async def get_pixel_color_async(image_uri: str, x: float, y: float,
                                display_width: float, display_height: float) -> str:
    return await default_sampler().get_pixel_color_async(image_uri, x, y, display_width, display_height)
