# app.py: command-line host for the pixel sampler

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from pixel_sampler.config import *
from pixel_sampler.application import PixelSamplerService
from pixel_sampler.domain import SamplerConfig
from pixel_sampler.infrastructure import LoggingConfigurator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Print the hex color under a display point of an image')
    parser.add_argument('uri', help='Image URI: file path, file://, http(s):// URL')
    parser.add_argument('x', type=float, help='X coordinate in display space')
    parser.add_argument('y', type=float, help='Y coordinate in display space')
    parser.add_argument('display_width', type=float, help='Width of the displayed image')
    parser.add_argument('display_height', type=float, help='Height of the displayed image')
    parser.add_argument('--async', dest='use_async', action='store_true',
                        help='Sample through the asynchronous entry point')
    parser.add_argument('--repeat', type=int, default=1,
                        help='Number of times to sample the same point (default: 1)')
    parser.add_argument('--max-entries', type=int, default=MAX_ENTRIES,
                        help=f'Image cache capacity (default: {MAX_ENTRIES})')
    parser.add_argument('--eviction-policy', choices=list(EVICTION_POLICIES), default=EVICTION_POLICY,
                        help=f'Cache eviction policy (default: {EVICTION_POLICY})')
    parser.add_argument('--timeout', type=float, default=FETCH_TIMEOUT,
                        help=f'Network fetch timeout in seconds (default: {FETCH_TIMEOUT})')
    parser.add_argument('--log-level', choices=list(LOG_LEVEL_MAP), default=LOG_LEVEL_STR if LOG_LEVEL_STR in LOG_LEVEL_MAP else DEFAULT_LOG_LEVEL_STR,
                        help='Logging level')
    parser.add_argument('--log-file', metavar='PATH', default=None,
                        help='Also write logs to PATH (default: $PIXEL_SAMPLER_LOG_FILE, else console only)')
    return parser


class AppOrchestrator:
    """Wires logging, configuration and the sampling service for one CLI invocation."""

    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.logger = logging.getLogger(self.__class__.__name__)
        self._setup_logging()
        self._setup_dependencies()

    def _setup_logging(self):
        configurator = LoggingConfigurator(
            log_level=LOG_LEVEL_MAP[self.args.log_level],
            log_format=LOG_FORMAT,
            date_format=LOG_DATE_FORMAT,
            log_file=self.args.log_file or LOG_FILE,
            log_to_console=True,
            noisy_loggers_to_silence=NOISY_LOGGERS,
        )
        configurator.configure()

    def _setup_dependencies(self):
        sampler_config = SamplerConfig(
            max_entries=self.args.max_entries,
            eviction_policy=self.args.eviction_policy,
            fetch_timeout=self.args.timeout,
        )
        self.service = PixelSamplerService(config=sampler_config)

    def run(self) -> List[str]:
        a = self.args
        colors = []
        for _ in range(max(1, a.repeat)):
            if a.use_async:
                color = asyncio.run(self.service.get_pixel_color_async(a.uri, a.x, a.y, a.display_width, a.display_height))
            else:
                color = self.service.get_pixel_color(a.uri, a.x, a.y, a.display_width, a.display_height)
            colors.append(color)
        self.logger.info(f"Cache stats: {self.service.cache.stats()}")
        return colors


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        orchestrator = AppOrchestrator(args)
    except ValueError as e:
        parser.error(str(e))
    for color in orchestrator.run():
        print(color)
    return 0


# --- Application Entry Point ---
if __name__ == "__main__":
    sys.exit(main())
