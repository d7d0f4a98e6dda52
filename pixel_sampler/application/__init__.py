from .services import PixelSamplerService
