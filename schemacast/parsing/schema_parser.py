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

"""Build schema model objects from JSON Schema / OpenAPI dictionaries."""

from typing import Any, Dict, List, Mapping, Optional
import logging
import re

from ..exceptions import SchemaDefinitionError
from ..models.schema import Discriminator, Reference, Registry, Schema, SchemaNode, SchemaType
from ..registry import freeze_registry
from ..utils.json_pointer import ref_name

logger = logging.getLogger(__name__)


# camelCase keyword -> Schema attribute, for keywords copied without conversion
_SCALAR_KEYWORDS = {
    "format": "format",
    "nullable": "nullable",
    "minProperties": "min_properties",
    "maxProperties": "max_properties",
    "minItems": "min_items",
    "maxItems": "max_items",
    "uniqueItems": "unique_items",
    "minLength": "min_length",
    "maxLength": "max_length",
    "pattern": "pattern",
    "minimum": "minimum",
    "maximum": "maximum",
    "exclusiveMinimum": "exclusive_minimum",
    "exclusiveMaximum": "exclusive_maximum",
    "multipleOf": "multiple_of",
    "title": "title",
    "description": "description",
    "example": "example",
    "default": "default",
}

_COMPOSITION_KEYWORDS = {"oneOf": "one_of", "anyOf": "any_of", "allOf": "all_of"}

_TARGET_TYPE_KEYWORDS = ("x-struct", "x-target-type")

# Recognized but carried nowhere (documentation / serialization hints).
_IGNORED_KEYWORDS = {"readOnly", "writeOnly", "deprecated", "examples", "externalDocs", "xml", "$schema"}


class SchemaParser:
    """Parser for schema dictionaries as found in OpenAPI ``components.schemas``."""

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode

    def parse(self, data: Any, location: str = "#") -> SchemaNode:
        """Parse one schema dictionary (or ``$ref`` object) into a node.

        Raises:
            SchemaDefinitionError: If a keyword holds a value of the wrong shape.
        """
        if isinstance(data, bool):
            # Boolean schemas: true accepts anything, false nothing.
            return Schema() if data else Schema(not_=Schema())
        if not isinstance(data, Mapping):
            raise SchemaDefinitionError(f"Schema at {location} must be a mapping, got {type(data).__name__}")

        if "$ref" in data:
            ref = data["$ref"]
            if not isinstance(ref, str) or not ref:
                raise SchemaDefinitionError(f"'$ref' at {location} must be a non-empty string")
            return Reference(ref_name(ref))

        kwargs: Dict[str, Any] = {}

        schema_type = data.get("type")
        if schema_type is not None:
            if schema_type not in SchemaType.get_all_types():
                raise SchemaDefinitionError(
                    f"Invalid type '{schema_type}' at {location}. Valid types: {SchemaType.get_all_types()}"
                )
            kwargs["type"] = schema_type

        if "enum" in data:
            if not isinstance(data["enum"], list):
                raise SchemaDefinitionError(f"'enum' at {location} must be a list")
            kwargs["enum"] = tuple(data["enum"])

        for keyword, attribute in _SCALAR_KEYWORDS.items():
            if keyword in data:
                kwargs[attribute] = data[keyword]

        if "pattern" in kwargs:
            try:
                re.compile(kwargs["pattern"])
            except (re.error, TypeError) as exc:
                raise SchemaDefinitionError(f"Invalid 'pattern' at {location}: {exc}") from exc

        if "properties" in data:
            properties = data["properties"]
            if not isinstance(properties, Mapping):
                raise SchemaDefinitionError(f"'properties' at {location} must be a mapping")
            kwargs["properties"] = {
                str(name): self.parse(child, f"{location}/properties/{name}")
                for name, child in properties.items()
            }

        if "required" in data:
            required = data["required"]
            if not isinstance(required, list) or not all(isinstance(name, str) for name in required):
                raise SchemaDefinitionError(f"'required' at {location} must be a list of strings")
            kwargs["required"] = tuple(required)

        if "additionalProperties" in data:
            additional = data["additionalProperties"]
            if isinstance(additional, bool):
                kwargs["additional_properties"] = additional
            else:
                kwargs["additional_properties"] = self.parse(additional, f"{location}/additionalProperties")

        if "items" in data:
            kwargs["items"] = self.parse(data["items"], f"{location}/items")

        for keyword, attribute in _COMPOSITION_KEYWORDS.items():
            if keyword in data:
                kwargs[attribute] = self._parse_list(data[keyword], f"{location}/{keyword}")

        if "not" in data:
            kwargs["not_"] = self.parse(data["not"], f"{location}/not")

        if "discriminator" in data:
            kwargs["discriminator"] = self._parse_discriminator(data["discriminator"], location)

        for keyword in _TARGET_TYPE_KEYWORDS:
            if keyword in data:
                kwargs["target_type"] = data[keyword]

        known = set(_SCALAR_KEYWORDS) | set(_COMPOSITION_KEYWORDS) | set(_TARGET_TYPE_KEYWORDS) | _IGNORED_KEYWORDS
        known |= {"type", "enum", "properties", "required", "additionalProperties", "items", "not", "discriminator"}
        unknown = [key for key in data if key not in known]
        if unknown:
            msg = f"Unsupported schema keyword(s) {unknown} at {location}"
            if self.strict_mode:
                raise SchemaDefinitionError(msg)
            logger.debug(msg)

        try:
            return Schema(**kwargs)
        except TypeError as exc:
            raise SchemaDefinitionError(f"Invalid schema at {location}: {exc}") from exc

    def parse_registry(self, schemas: Mapping[str, Any], location: str = "#") -> Registry:
        """Parse a ``name -> schema dictionary`` mapping into a frozen registry."""
        if not isinstance(schemas, Mapping):
            raise SchemaDefinitionError(f"Schema collection at {location} must be a mapping")
        return freeze_registry(
            {name: self.parse(data, f"{location}/{name}") for name, data in schemas.items()}
        )

    def _parse_list(self, data: Any, location: str) -> List[SchemaNode]:
        if not isinstance(data, list) or not data:
            raise SchemaDefinitionError(f"Composition at {location} must be a non-empty list")
        return [self.parse(child, f"{location}/{idx}") for idx, child in enumerate(data)]

    def _parse_discriminator(self, data: Any, location: str) -> Discriminator:
        if not isinstance(data, Mapping) or not isinstance(data.get("propertyName"), str):
            raise SchemaDefinitionError(f"'discriminator' at {location} must have a string 'propertyName'")
        mapping: Optional[Mapping[str, Any]] = data.get("mapping") or {}
        if not isinstance(mapping, Mapping):
            raise SchemaDefinitionError(f"'discriminator.mapping' at {location} must be a mapping")
        return Discriminator(
            property_name=data["propertyName"],
            mapping={str(tag): ref_name(str(target)) for tag, target in mapping.items()},
        )


def parse_schema(data: Any, *, strict_mode: bool = False) -> SchemaNode:
    """Parse one schema dictionary with a default :class:`SchemaParser`."""
    return SchemaParser(strict_mode=strict_mode).parse(data)


def parse_registry(schemas: Mapping[str, Any], *, strict_mode: bool = False) -> Registry:
    """Parse a ``name -> schema dictionary`` mapping into a frozen registry."""
    return SchemaParser(strict_mode=strict_mode).parse_registry(schemas)
