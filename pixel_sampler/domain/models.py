import math
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional

import numpy as np

from pixel_sampler.config import (
    DEFAULT_EVICTION_POLICY,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_MAX_ENTRIES,
    EVICTION_POLICIES,
    FALLBACK_COLOR,
)
from pixel_sampler.domain.errors import PixelSamplerError


class Orientation(IntEnum):
    """EXIF orientation values (tag 0x0112)."""
    NORMAL = 1
    MIRROR_HORIZONTAL = 2
    ROTATE_180 = 3
    MIRROR_VERTICAL = 4
    TRANSPOSE = 5
    ROTATE_90_CW = 6
    TRANSVERSE = 7
    ROTATE_90_CCW = 8

    @classmethod
    def from_exif(cls, value) -> "Orientation":
        """Unknown or missing values are treated as NORMAL."""
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.NORMAL

    @property
    def swaps_axes(self) -> bool:
        return self >= Orientation.TRANSPOSE


class SamplingState(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    DECODING = "decoding"
    NORMALIZING = "normalizing"
    CACHED = "cached"
    MAPPING = "mapping"
    EXTRACTING = "extracting"
    DONE = "done"
    FALLBACK = "fallback"


@dataclass
class SamplerConfig:
    max_entries: int = DEFAULT_MAX_ENTRIES
    eviction_policy: str = DEFAULT_EVICTION_POLICY
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    fallback_color: str = FALLBACK_COLOR

    def __post_init__(self):
        if not isinstance(self.max_entries, int) or self.max_entries <= 0:
            raise ValueError("max_entries must be a positive integer.")
        if self.eviction_policy not in EVICTION_POLICIES:
            raise ValueError(f"eviction_policy must be one of {EVICTION_POLICIES}, got {self.eviction_policy!r}.")
        if not isinstance(self.fetch_timeout, (int, float)) or self.fetch_timeout <= 0:
            raise ValueError("fetch_timeout must be a positive number of seconds.")


@dataclass(frozen=True)
class SampleRequest:
    uri: str
    x: float
    y: float
    display_width: float
    display_height: float

    def is_valid(self) -> bool:
        """A request can be mapped only with finite coordinates and a positive display size."""
        try:
            values = [float(v) for v in (self.x, self.y, self.display_width, self.display_height)]
        except (TypeError, ValueError):
            return False
        if not all(math.isfinite(v) for v in values):
            return False
        return values[2] > 0 and values[3] > 0


@dataclass(eq=False)
class DecodedImage:
    """Raw decoder output, orientation exactly as declared by the source."""
    width: int
    height: int
    pixels: np.ndarray
    orientation: Orientation = Orientation.NORMAL
    premultiplied: bool = False


@dataclass(frozen=True, eq=False)
class NormalizedImage:
    """
    Top-left-origin RGBA8 buffer, shape (height, width, 4).

    The pixel array is made read-only on construction; the image is never
    mutated afterwards.
    """
    width: int
    height: int
    pixels: np.ndarray
    premultiplied: bool = False

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}.")
        if self.pixels.dtype != np.uint8 or self.pixels.shape != (self.height, self.width, 4):
            raise ValueError(
                f"Pixel buffer must be uint8 of shape ({self.height}, {self.width}, 4), "
                f"got {self.pixels.dtype} {self.pixels.shape}."
            )
        self.pixels.flags.writeable = False


@dataclass(frozen=True)
class CacheEntry:
    key: str
    image: NormalizedImage
    sequence: int


@dataclass(frozen=True)
class PixelCoordinate:
    px: int
    py: int


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int


@dataclass
class SampleResult:
    color: str
    state: SamplingState
    cache_hit: bool = False
    error: Optional[PixelSamplerError] = None
    coordinate: Optional[PixelCoordinate] = field(default=None)
    failed_at: Optional[SamplingState] = None
