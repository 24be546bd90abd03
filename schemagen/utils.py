"""Utility functions for loading schema documents and writing output.

Schema documents are JSON, read from local files or URLs. A document may
include other documents, either by path (relative to the including
document) or embedded inline.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin, urlparse

import requests

from .codegen.core.generator import OutputUnit
from .codegen.core.schema import Module, SchemaFormatError, convert_schema_document
from .logging_config import get_logger

logger = get_logger(__name__)


class SchemaLoadError(Exception):
    """Raised when a schema document cannot be read or parsed."""

    pass


def is_url(source: str) -> bool:
    parsed = urlparse(str(source))
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def load_json_from_file(file_path: str | Path) -> Any:
    """Load JSON data from a local file.

    Raises:
        SchemaLoadError: If the file is missing, unreadable or not JSON.
    """
    file_path = Path(file_path)
    logger.debug("Loading schema document from file: %s", file_path)

    if not file_path.exists():
        raise SchemaLoadError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning("File does not have .json extension: %s", file_path)

    try:
        with file_path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        raise SchemaLoadError(f"Error reading file {file_path}: {e}") from e


def load_json_from_url(url: str, timeout: int = 30) -> Any:
    """Load JSON data from a URL.

    Args:
        url: URL to fetch JSON from.
        timeout: Request timeout in seconds.

    Raises:
        SchemaLoadError: If the request fails or the response isn't JSON.
    """
    logger.debug("Loading schema document from URL: %s", url)

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.Timeout as e:
        raise SchemaLoadError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        raise SchemaLoadError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.RequestException as e:
        raise SchemaLoadError(f"Request error for URL {url}: {e}") from e
    except ValueError as e:
        raise SchemaLoadError(f"Invalid JSON response from URL {url}: {e}") from e


def load_json(source: str | Path, timeout: int = 30) -> Any:
    """Load JSON data from either a file path or an http(s) URL."""
    if isinstance(source, str) and is_url(source):
        return load_json_from_url(source, timeout=timeout)
    return load_json_from_file(source)


class SchemaLoader:
    """Loads a schema document and everything it includes.

    Each document is converted once; modules included from several places
    share one Module instance.
    """

    def __init__(self, timeout: int = 30):
        self.timeout = timeout
        self._loaded: Dict[str, Module] = {}
        self._loading: List[str] = []

    def load(self, source: str | Path) -> Module:
        if isinstance(source, str) and is_url(source):
            key = source
        else:
            key = str(Path(source).resolve())

        if key in self._loaded:
            return self._loaded[key]
        if key in self._loading:
            chain = " -> ".join(self._loading + [key])
            raise SchemaLoadError(f"Include cycle: {chain}")

        self._loading.append(key)
        try:
            module = self._convert(load_json(key, self.timeout), key)
        finally:
            self._loading.pop()

        self._loaded[key] = module
        logger.info("Loaded schema module '%s' from %s", module.name, key)
        return module

    def _convert(self, document: Any, origin: Optional[str]) -> Module:
        if not isinstance(document, dict):
            raise SchemaLoadError(f"Schema document must be a JSON object: {origin}")

        includes = [
            self._include(entry, origin) for entry in document.get("includes", [])
        ]
        try:
            return convert_schema_document(document, includes)
        except SchemaFormatError as e:
            raise SchemaLoadError(f"Invalid schema document {origin}: {e}") from e

    def _include(self, entry: Any, origin: Optional[str]) -> Module:
        if isinstance(entry, dict):
            return self._convert(entry, origin)
        if not isinstance(entry, str):
            raise SchemaLoadError(f"Invalid include entry in {origin}: {entry!r}")

        if is_url(entry):
            return self.load(entry)
        if origin and is_url(origin):
            return self.load(urljoin(origin, entry))
        base = Path(origin).parent if origin else Path.cwd()
        return self.load(str(base / entry))


def load_schema(source: str | Path, timeout: int = 30) -> Module:
    """Load a schema module, with its includes, from a file or URL.

    Raises:
        SchemaLoadError: If any document cannot be loaded or converted.
    """
    return SchemaLoader(timeout).load(source)


def package_dir(namespace: Optional[str]) -> Path:
    """Relative output directory for a dotted package name."""
    if not namespace:
        return Path(".")
    return Path(*namespace.split("."))


def write_units(
    units: List[OutputUnit], output_dir: str | Path, namespace: Optional[str] = None
) -> List[Path]:
    """Write generated units below ``output_dir`` in their package directory.

    Returns:
        Paths of the written files, in unit order.
    """
    target = Path(output_dir) / package_dir(namespace)
    target.mkdir(parents=True, exist_ok=True)

    written = []
    for unit in units:
        path = target / unit.filename
        path.write_text(unit.code, encoding="utf-8", newline="")
        logger.debug("Wrote %s", path)
        written.append(path)
    return written
