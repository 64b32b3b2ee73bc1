"""Schema parser -- load a hyper-schema document and index its links.

This sub-package turns a raw schema document (JSON or YAML, local file or
remote URL) into an :class:`~linkli.models.ApiSchema` that the client and
the command generator consume.

Typical usage::

    from linkli.parser import extract_schema, load_schema

    schema = extract_schema(load_schema("schema.json"))

Sub-modules:

* :mod:`~linkli.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection.
* :mod:`~linkli.parser.resolver` -- JSON pointer and ``$ref`` resolution.
* :mod:`~linkli.parser.extractor` -- Walks ``definitions`` and produces
  :class:`~linkli.models.ResourceSchema` objects.
"""

from linkli.parser.extractor import extract_schema, link_slug
from linkli.parser.loader import load_schema

__all__ = ["load_schema", "extract_schema", "link_slug"]
