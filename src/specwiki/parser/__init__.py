"""Document parser -- load, extract operations, and link schema references.

This sub-package is responsible for the first half of the specwiki pipeline:
turning a Swagger 2.0 style document (JSON or YAML, local file or remote
URL) into an :class:`~specwiki.models.ApiModel` that the renderer can
consume without further lookups.

Typical usage::

    from specwiki.parser import build_model, load_document

    root = load_document("petstore.yml")
    model = build_model(root)

Sub-modules:

* :mod:`~specwiki.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection.
* :mod:`~specwiki.parser.tree` -- Order-preserving node tree with typed
  accessors.
* :mod:`~specwiki.parser.definitions` -- The ``definitions`` registry.
* :mod:`~specwiki.parser.extractor` -- Operations grouped by tag.
* :mod:`~specwiki.parser.linker` -- One-level reference resolution.
* :mod:`~specwiki.parser.builder` -- Runs the stages above in order.
"""

from specwiki.parser.builder import build_model
from specwiki.parser.loader import load_document, parse_document

__all__ = ["load_document", "parse_document", "build_model"]
