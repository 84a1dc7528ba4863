# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Registry loader for schema documents (YAML or JSON)."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Union

import yaml

from ..config import engine_config
from ..exceptions import SchemaDefinitionError
from ..models.schema import Registry, SchemaNode
from ..registry import freeze_registry
from .schema_parser import SchemaParser

logger = logging.getLogger(__name__)


# Parsed documents, keyed by resolved path
_DOCUMENT_CACHE: Dict[Path, Dict[str, Any]] = {}


def load_document(file_path: Union[str, Path]) -> Any:
    """Load a YAML or JSON document (JSON is read through the YAML loader).

    Raises:
        SchemaDefinitionError: If the file is missing or cannot be parsed.
    """
    path = Path(file_path)
    if not path.is_file():
        raise SchemaDefinitionError(f"Schema document not found: {path}")

    cache_key = path.resolve()
    if engine_config.cache_enabled and cache_key in _DOCUMENT_CACHE:
        logger.debug(f"Loading schema document from cache: {path}")
        return _DOCUMENT_CACHE[cache_key]

    logger.debug(f"Loading schema document: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SchemaDefinitionError(f"Error parsing schema document {path}: {e}") from e

    if data is None:
        data = {}
    if engine_config.cache_enabled:
        _DOCUMENT_CACHE[cache_key] = data
    return data


def schemas_section(document: Any, source: str = "<document>") -> Mapping[str, Any]:
    """Return the ``name -> schema`` mapping of a document.

    OpenAPI documents contribute ``components.schemas``; any other mapping is
    taken as the schema collection itself.
    """
    if not isinstance(document, Mapping):
        raise SchemaDefinitionError(f"Schema document {source} must be a mapping")
    components = document.get("components")
    if isinstance(components, Mapping) and "schemas" in components:
        section = components["schemas"]
        if not isinstance(section, Mapping):
            raise SchemaDefinitionError(f"'components.schemas' in {source} must be a mapping")
        return section
    return document


def load_registry(file_paths: Iterable[Union[str, Path]], *, strict_mode: bool = False) -> Registry:
    """Load and merge the schemas of several documents into one registry.

    Raises:
        SchemaDefinitionError: On unreadable documents, malformed schemas or a
            schema name defined in more than one document.
    """
    parser = SchemaParser(strict_mode=strict_mode)
    entries: Dict[str, SchemaNode] = {}
    origins: Dict[str, str] = {}

    for file_path in file_paths:
        source = str(file_path)
        section = schemas_section(load_document(file_path), source)
        for name, data in section.items():
            if name in entries:
                raise SchemaDefinitionError(
                    f"Duplicate schema '{name}' found:\n"
                    f"  New: {source}\n"
                    f"  Existing: {origins[name]}"
                )
            entries[name] = parser.parse(data, f"{source}#/{name}")
            origins[name] = source
        logger.debug(f"Loaded {len(section)} schema(s) from {source}")

    return freeze_registry(entries)


def clear_cache() -> None:
    """Clear the document cache. Useful for testing."""
    _DOCUMENT_CACHE.clear()
