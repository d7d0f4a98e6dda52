from .color_utils import extract_color, rgb_to_hex, unpremultiply
