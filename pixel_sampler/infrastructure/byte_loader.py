# pixel_sampler/infrastructure/byte_loader.py
import os
import logging
from typing import Optional, Protocol
from urllib.parse import unquote

import requests

from pixel_sampler.config import *
from pixel_sampler.domain.errors import UnreachableError, UnsupportedSchemeError

logger = logging.getLogger(__name__)


class ContentResolver(Protocol):
    """Host collaborator that resolves managed-content URIs (content://, ph://) to bytes."""

    def open_bytes(self, uri: str) -> bytes:
        ...


class ByteLoader:
    """Turns an image URI into the raw encoded bytes of the image."""

    def __init__(self, fetch_timeout: float = FETCH_TIMEOUT, content_resolver: Optional[ContentResolver] = None):
        if fetch_timeout <= 0:
            raise ValueError("fetch_timeout must be positive.")
        self.fetch_timeout = fetch_timeout
        self.content_resolver = content_resolver

    def load(self, uri: str) -> bytes:
        """
        Loads the full encoded payload behind a URI.

        Args:
            uri: A file:// URI, content:// or ph:// reference, http(s) URL, or bare path.

        Returns:
            The complete, non-empty byte payload.

        Raises:
            UnsupportedSchemeError: No handler for the URI and it is not an existing path,
                or a content URI with no resolver configured.
            UnreachableError: Any I/O, HTTP or timeout failure.
        """
        if not isinstance(uri, str) or not uri.strip():
            raise UnreachableError("Empty or non-string URI.", uri=uri if isinstance(uri, str) else None)

        if uri.startswith(FILE_SCHEME_PREFIX):
            path = unquote(uri[len(FILE_SCHEME_PREFIX):])
            # file://localhost/path is equivalent to file:///path
            if path.startswith("localhost/"):
                path = path[len("localhost"):]
            data = self._read_file(path, uri)
        elif uri.startswith(CONTENT_SCHEME_PREFIXES):
            data = self._read_content(uri)
        elif uri.lower().startswith(HTTP_SCHEME_PREFIXES):
            data = self._fetch_url(uri)
        else:
            if not os.path.exists(uri):
                logger.debug(f"No scheme matched and no file exists at '{uri}'")
                raise UnsupportedSchemeError("Unrecognized URI scheme and no such file.", uri=uri)
            data = self._read_file(uri, uri)

        if not data:
            raise UnreachableError("Empty payload.", uri=uri)
        logger.debug(f"Loaded {len(data)} bytes from '{uri}'")
        return data

    def _read_file(self, path: str, uri: str) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except (OSError, ValueError) as e:
            # ValueError covers embedded NUL bytes in the path
            logger.debug(f"Failed to read '{path}': {e}")
            raise UnreachableError(f"Cannot read file: {e}", uri=uri) from e

    def _read_content(self, uri: str) -> bytes:
        if self.content_resolver is None:
            raise UnsupportedSchemeError("No content resolver configured for managed-content URI.", uri=uri)
        try:
            data = self.content_resolver.open_bytes(uri)
        except Exception as e:
            logger.debug(f"Content resolver failed for '{uri}': {e}")
            raise UnreachableError(f"Content resolver failed: {e}", uri=uri) from e
        if data is None:
            raise UnreachableError("Content resolver returned nothing.", uri=uri)
        return bytes(data)

    def _fetch_url(self, uri: str) -> bytes:
        try:
            response = requests.get(uri, timeout=self.fetch_timeout)
            response.raise_for_status()
            return response.content
        except requests.Timeout as e:
            logger.debug(f"Timed out after {self.fetch_timeout}s fetching '{uri}'")
            raise UnreachableError(f"Timed out after {self.fetch_timeout}s.", uri=uri) from e
        except requests.RequestException as e:
            logger.debug(f"HTTP fetch failed for '{uri}': {e}")
            raise UnreachableError(f"HTTP fetch failed: {e}", uri=uri) from e
