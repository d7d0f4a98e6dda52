from .byte_loader import ByteLoader, ContentResolver
from .logging_config import LoggingConfigurator
from .pixel_decoder import PixelDecoder
