from .errors import (
    DecodeFailedError,
    InvalidRequestError,
    OutOfBoundsError,
    PixelSamplerError,
    UnreachableError,
    UnsupportedSchemeError,
)
from .models import (
    CacheEntry,
    Color,
    DecodedImage,
    NormalizedImage,
    Orientation,
    PixelCoordinate,
    SampleRequest,
    SampleResult,
    SamplerConfig,
    SamplingState,
)
