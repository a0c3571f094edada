"""Import of Swagger/OpenAPI documents from URLs and local files.

Classes:
    DocumentClient: Async HTTP client fetching JSON API descriptions
    DocumentLoadError: Raised when a document cannot be fetched or parsed
"""

import gzip
import json as json_lib
from logging import getLogger
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlsplit

import httpx

from swagger_selector_mcp import config
from . import __version__

USER_AGENT = f"swagger-selector-mcp/{__version__}"


class DocumentLoadError(Exception):
    """Raised when a document cannot be fetched, read or parsed as JSON."""


def _strip_extension(name: str) -> str:
    if "." in name:
        name = name[: name.rfind(".")]
    return name


def basename_from_url(url: str) -> str:
    """Derive an export base filename from a document URL.

    `https://petstore.swagger.io/v2/swagger.json` gives `swagger`.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return config.REMOTE_BASENAME
    if not parts.scheme or not parts.netloc:
        return config.REMOTE_BASENAME
    name = unquote(parts.path.split("/")[-1])
    return _strip_extension(name) or config.DEFAULT_BASENAME


def basename_from_filename(filename: str) -> str:
    """Derive an export base filename from an uploaded file name."""
    name = Path(filename).name
    return _strip_extension(name) or name


def parse_document(content: bytes | str) -> Any:
    """Parse raw document content as JSON."""
    if isinstance(content, bytes):
        content = content.decode("utf-8")
    return json_lib.loads(content)


def load_document_file(path: str | Path) -> tuple[Any, str]:
    """Read a local JSON document.

    Args:
        path: Path to the document

    Returns:
        Tuple of (parsed document, export base filename)

    Raises:
        DocumentLoadError: If the file is missing or not valid JSON
    """
    file_path = Path(path).expanduser()
    try:
        raw = file_path.read_bytes()
    except OSError as e:
        raise DocumentLoadError(f"Failed to read file {file_path}: {e.strerror or e}") from e

    try:
        document = parse_document(raw)
    except (UnicodeDecodeError, json_lib.JSONDecodeError) as e:
        raise DocumentLoadError("Invalid JSON file.") from e
    return document, basename_from_filename(file_path.name)


class DocumentClient(httpx.AsyncClient):
    """HTTP client for fetching Swagger/OpenAPI documents.

    Args:
        proxy_url: Optional proxy URL for requests
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        proxy_url: str | None = config.PROXY_URL,
        timeout: float = config.FETCH_TIMEOUT_SECONDS,
    ):
        super().__init__(
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            proxy=proxy_url,
            timeout=timeout,
            follow_redirects=True,
        )
        self.proxy_url = proxy_url
        self.logger = getLogger("DocumentClient")

    async def fetch_document(self, url: str) -> Any:
        """Fetch a document and parse it as JSON.

        Args:
            url: Absolute URL of the document

        Returns:
            The parsed document

        Raises:
            DocumentLoadError: On HTTP errors, transport errors or invalid JSON
        """
        self.logger.debug("Fetching document from %s", url)
        try:
            response = await self.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DocumentLoadError(f"Failed to load URL: HTTP Error {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise DocumentLoadError(f"Failed to load URL: {e}") from e

        content = response.content
        if content[:2] == b"\x1f\x8b":
            self.logger.debug("Response is gzipped, decompressing...")
            try:
                content = gzip.decompress(content)
            except gzip.BadGzipFile as e:
                self.logger.debug("Failed to decompress gzipped content: %s; continuing with original content", e)

        try:
            return parse_document(content)
        except (UnicodeDecodeError, json_lib.JSONDecodeError) as e:
            self.logger.debug("JSONDecodeError: %s", e)
            raise DocumentLoadError("Failed to load URL: response is not valid JSON") from e
