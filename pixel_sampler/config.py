import os
import logging


__all__ = [
    # Logging config
    "LOG_FILE", "DEFAULT_LOG_LEVEL_STR", "LOG_LEVEL_STR",
    "LOG_LEVEL_MAP", "EFFECTIVE_LOG_LEVEL",
    "LOG_FORMAT", "LOG_DATE_FORMAT", "NOISY_LOGGERS",
    # Cache
    "DEFAULT_MAX_ENTRIES", "MAX_ENTRIES",
    "EVICTION_POLICY_LRU", "EVICTION_POLICY_INSERTION", "EVICTION_POLICIES",
    "DEFAULT_EVICTION_POLICY", "EVICTION_POLICY",
    # Byte loading
    "DEFAULT_FETCH_TIMEOUT", "FETCH_TIMEOUT",
    "FILE_SCHEME_PREFIX", "CONTENT_SCHEME_PREFIXES", "HTTP_SCHEME_PREFIXES",
    # Decoding
    "EXIF_ORIENTATION_TAG",
    # Result
    "FALLBACK_COLOR",
]

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid integer for {name}: {raw!r}. Using {default}.")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid number for {name}: {raw!r}. Using {default}.")
        return default


# --- Logging Configuration ---
# Optional log file path; unset means console only
LOG_FILE = os.environ.get("PIXEL_SAMPLER_LOG_FILE") or None
# Levels: 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'
DEFAULT_LOG_LEVEL_STR = "INFO"
LOG_LEVEL_STR = os.environ.get("PIXEL_SAMPLER_LOG_LEVEL", DEFAULT_LOG_LEVEL_STR).upper()

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}
EFFECTIVE_LOG_LEVEL = LOG_LEVEL_MAP.get(LOG_LEVEL_STR, logging.INFO)

LOG_FORMAT = '%(asctime)s - %(name)s - [%(levelname)s] - [%(funcName)s:%(lineno)d] - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
NOISY_LOGGERS = ["PIL", "urllib3", "requests"]

# --- Image Cache ---
DEFAULT_MAX_ENTRIES = 5
MAX_ENTRIES = _env_int("PIXEL_SAMPLER_MAX_ENTRIES", DEFAULT_MAX_ENTRIES)
if MAX_ENTRIES <= 0:
    logger.warning(f"PIXEL_SAMPLER_MAX_ENTRIES must be positive, got {MAX_ENTRIES}. Using {DEFAULT_MAX_ENTRIES}.")
    MAX_ENTRIES = DEFAULT_MAX_ENTRIES

EVICTION_POLICY_LRU = "lru"              # sequence bumped on insert and on hit
EVICTION_POLICY_INSERTION = "insertion"  # sequence set on insert only
EVICTION_POLICIES = (EVICTION_POLICY_LRU, EVICTION_POLICY_INSERTION)
DEFAULT_EVICTION_POLICY = EVICTION_POLICY_LRU
EVICTION_POLICY = os.environ.get("PIXEL_SAMPLER_EVICTION_POLICY", DEFAULT_EVICTION_POLICY).lower()
if EVICTION_POLICY not in EVICTION_POLICIES:
    logger.warning(f"Unknown PIXEL_SAMPLER_EVICTION_POLICY {EVICTION_POLICY!r}. Using {DEFAULT_EVICTION_POLICY!r}.")
    EVICTION_POLICY = DEFAULT_EVICTION_POLICY

# --- Byte Loading ---
DEFAULT_FETCH_TIMEOUT = 10.0  # seconds, network fetches only
FETCH_TIMEOUT = _env_float("PIXEL_SAMPLER_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT)
if not FETCH_TIMEOUT > 0:
    logger.warning(f"PIXEL_SAMPLER_FETCH_TIMEOUT must be positive, got {FETCH_TIMEOUT}. Using {DEFAULT_FETCH_TIMEOUT}.")
    FETCH_TIMEOUT = DEFAULT_FETCH_TIMEOUT

FILE_SCHEME_PREFIX = "file://"
# Managed content providers: Android content resolver, iOS photo library
CONTENT_SCHEME_PREFIXES = ("content://", "ph://")
HTTP_SCHEME_PREFIXES = ("http://", "https://")

# --- Decoding ---
EXIF_ORIENTATION_TAG = 0x0112

# --- Result ---
FALLBACK_COLOR = "#808080"
