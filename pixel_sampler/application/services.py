# pixel_sampler/application/services.py
import asyncio
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional

from pixel_sampler.core.coordinate_mapper import map_to_pixel
from pixel_sampler.core.image_cache import ImageCache
from pixel_sampler.core.orientation import OrientationNormalizer
from pixel_sampler.domain.errors import InvalidRequestError, PixelSamplerError
from pixel_sampler.domain.models import SampleRequest, SampleResult, SamplerConfig, SamplingState
from pixel_sampler.infrastructure.byte_loader import ByteLoader, ContentResolver
from pixel_sampler.infrastructure.pixel_decoder import PixelDecoder
from pixel_sampler.utils.color_utils import extract_color, rgb_to_hex

logger = logging.getLogger(__name__)


class PixelSamplerService:
    """
    Orchestrates the pixel-sampling use case.

    Pipeline per request: cache lookup; on a miss load, decode, normalize and
    insert; then map the display point, extract the texel and format it.
    The first failure in any stage ends in the FALLBACK state and yields the
    configured fallback color. There is no retry. Apart from the image cache
    the service keeps no state between calls.
    """

    def __init__(self,
                 config: Optional[SamplerConfig] = None,
                 cache: Optional[ImageCache] = None,
                 loader: Optional[ByteLoader] = None,
                 decoder: Optional[PixelDecoder] = None,
                 normalizer: Optional[OrientationNormalizer] = None,
                 content_resolver: Optional[ContentResolver] = None,
                 executor: Optional[Executor] = None):
        self.config = config or SamplerConfig()
        self.cache = cache or ImageCache(max_entries=self.config.max_entries, policy=self.config.eviction_policy)
        self.loader = loader or ByteLoader(fetch_timeout=self.config.fetch_timeout, content_resolver=content_resolver)
        self.decoder = decoder or PixelDecoder()
        self.normalizer = normalizer or OrientationNormalizer()
        self._executor = executor
        self._executor_lock = threading.Lock()
        logger.info(f"PixelSamplerService initialized: max_entries={self.cache.max_entries}, "
                    f"policy={self.cache.policy}, fetch_timeout={self.loader.fetch_timeout}s")

    # --- Public entry points ---

    def get_pixel_color(self, image_uri: str, x: float, y: float,
                        display_width: float, display_height: float) -> str:
        """
        Returns the '#RRGGBB' color under display point (x, y).

        Never raises; every failure degrades to the fallback color.
        """
        request = SampleRequest(uri=image_uri, x=x, y=y, display_width=display_width, display_height=display_height)
        return self.sample(request).color

    async def get_pixel_color_async(self, image_uri: str, x: float, y: float,
                                    display_width: float, display_height: float) -> str:
        """Runs get_pixel_color in an executor thread; same contract."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor, self.get_pixel_color, image_uri, x, y, display_width, display_height
        )

    def submit(self, image_uri: str, x: float, y: float,
               display_width: float, display_height: float) -> Future:
        """Schedules get_pixel_color on the service executor and returns its Future."""
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(thread_name_prefix="pixel-sampler")
            executor = self._executor
        return executor.submit(self.get_pixel_color, image_uri, x, y, display_width, display_height)

    def shutdown(self) -> None:
        with self._executor_lock:
            executor = self._executor
        if isinstance(executor, ThreadPoolExecutor):
            executor.shutdown(wait=True)

    # --- Pipeline ---

    def sample(self, request: SampleRequest) -> SampleResult:
        """
        Runs one request through the state machine and reports how it ended.

        Every PixelSamplerError, and any unexpected exception, is folded into
        FALLBACK here and nowhere else. The result records the state the
        failure happened in.
        """
        state = SamplingState.IDLE
        cache_hit = False
        coordinate = None
        try:
            if not request.is_valid():
                raise InvalidRequestError(
                    f"Invalid display geometry {request.display_width}x{request.display_height} "
                    f"or point ({request.x}, {request.y}).",
                    uri=request.uri,
                )

            image = self.cache.get(request.uri)
            if image is not None:
                cache_hit = True
            else:
                state = SamplingState.RESOLVING
                data = self.loader.load(request.uri)

                state = SamplingState.DECODING
                decoded = self.decoder.decode(data)

                state = SamplingState.NORMALIZING
                image = self.normalizer.normalize(decoded)
                self.cache.put(request.uri, image)

            state = SamplingState.CACHED
            logger.debug(f"Image ready for '{request.uri}': {image.width}x{image.height}")

            state = SamplingState.MAPPING
            coordinate = map_to_pixel(request, image.width, image.height)

            state = SamplingState.EXTRACTING
            color = extract_color(image, coordinate)

            hex_color = rgb_to_hex(color)
            logger.debug(f"Sampled {hex_color} at pixel ({coordinate.px}, {coordinate.py}) of '{request.uri}' "
                         f"(cache {'hit' if cache_hit else 'miss'})")
            return SampleResult(color=hex_color, state=SamplingState.DONE, cache_hit=cache_hit, coordinate=coordinate)

        except PixelSamplerError as e:
            if e.uri is None:
                e.uri = request.uri
            logger.warning(f"Falling back to {self.config.fallback_color} during {state.name}: {type(e).__name__}: {e}")
            error = e
        except Exception as e:
            logger.exception(f"Unexpected error during {state.name} for '{request.uri}': {e}")
            error = PixelSamplerError(f"Unexpected error: {e}", uri=request.uri)

        return SampleResult(
            color=self.config.fallback_color,
            state=SamplingState.FALLBACK,
            cache_hit=cache_hit,
            error=error,
            coordinate=coordinate,
            failed_at=state,
        )
