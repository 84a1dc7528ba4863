"""Schema document parsing.

These helpers sit outside the engine: they turn dictionaries or YAML/JSON
files into the immutable registry that ``validate``/``cast`` consume.
"""

from .schema_parser import SchemaParser, parse_registry, parse_schema
from .registry_loader import clear_cache, load_document, load_registry
