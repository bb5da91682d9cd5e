"""Load API documents from a URL, local file, or stdin.

This module handles all I/O for fetching raw documents and converting them
into the order-preserving node tree of :mod:`specwiki.parser.tree`. Both
JSON and YAML are accepted, with automatic format detection.

The two public functions are:

* :func:`load_document` -- Load and parse a document from any supported source.
* :func:`parse_document` -- Parse already-read text (used by the server).

After loading, the root node should be passed to
:func:`~specwiki.parser.builder.build_model`.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import httpx

from specwiki.exceptions import DocumentError, DocumentReadError
from specwiki.parser.tree import MappingNode, Node, from_json, from_yaml


def load_document(source: str) -> MappingNode:
    """Load a document from URL, file path, or stdin ('-').

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The root mapping node of the document.

    Raises:
        DocumentReadError: If the source cannot be read.
        DocumentError: If the content cannot be parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> MappingNode:
    """Read the document from stdin.

    Raises:
        DocumentReadError: If stdin cannot be read.
        DocumentError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise DocumentReadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise DocumentError("No input received from stdin")

    return parse_document(content)


def _load_from_url(url: str) -> MappingNode:
    """Fetch the document from URL. Supports JSON and YAML responses.

    Raises:
        DocumentReadError: If the URL cannot be fetched.
        DocumentError: If the content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentReadError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise DocumentReadError(f"Failed to fetch document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return parse_document(response.text, hint=hint)


def _load_from_file(path: str) -> MappingNode:
    """Load the document from a local file.

    The extension (``.json``, ``.yaml``, ``.yml``) is used as a format hint;
    other extensions fall back to content-based detection.

    Raises:
        DocumentReadError: If the file is missing or unreadable.
        DocumentError: If the file is empty or cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DocumentReadError(f"Document not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentReadError(f"Failed to read document {path}: {exc}") from exc

    if not content.strip():
        raise DocumentError(f"Document is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return parse_document(content, hint=hint)


def parse_document(content: str, hint: str = "") -> MappingNode:
    """Parse *content* as JSON or YAML into a node tree.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML,
    since valid JSON is also valid YAML but the JSON decoder is stricter.

    Args:
        content: The raw document text.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The root mapping node.

    Raises:
        DocumentError: If the content cannot be parsed as either format, or
            its root is not a mapping.
    """
    if not content.strip():
        raise DocumentError("Document is empty")

    json_error: Exception | None = None

    if hint != "yaml":
        try:
            return _require_mapping(from_json(content))
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise DocumentError(f"Invalid JSON: {exc}") from exc

    try:
        root = from_yaml(content)
    except DocumentError as exc:
        if json_error is None:
            raise
        raise DocumentError(
            "Failed to parse document as JSON or YAML"
            f"\n  JSON error: {json_error}"
            f"\n  YAML error: {exc}"
        ) from exc
    return _require_mapping(root)


def _require_mapping(root: Node) -> MappingNode:
    if not isinstance(root, MappingNode):
        raise DocumentError(f"Document must be a JSON/YAML object (got a {root.kind})")
    return root
