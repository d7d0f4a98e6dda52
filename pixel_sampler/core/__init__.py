from .coordinate_mapper import map_to_pixel
from .image_cache import ImageCache
from .orientation import OrientationNormalizer
