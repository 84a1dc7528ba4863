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

"""Registry lookup for named schemas."""

from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .exceptions import SchemaDefinitionError, SchemaNotFoundError
from .models.schema import Reference, Registry, Schema, SchemaNode


def resolve(name: str, registry: Registry) -> SchemaNode:
    """Look up *name* in *registry*.

    Single hop only: an entry that is itself a :class:`Reference` is returned
    as-is and resolved by the caller's next descent.

    Raises:
        SchemaNotFoundError: If the registry has no entry for *name*.
    """
    try:
        return registry[name]
    except KeyError:
        raise SchemaNotFoundError(name) from None


def resolve_node(node: SchemaNode, registry: Registry) -> Tuple[SchemaNode, Optional[str]]:
    """Return ``(node, None)`` for inline schemas, ``(target, name)`` for references."""
    if isinstance(node, Reference):
        return resolve(node.name, registry), node.name
    return node, None


def freeze_registry(entries: Mapping[str, SchemaNode]) -> Registry:
    """Build a read-only registry from *entries*.

    Raises:
        SchemaDefinitionError: If a key is not a string or a value is not a schema node.
    """
    frozen = {}
    for name, node in entries.items():
        if not isinstance(name, str) or not name:
            raise SchemaDefinitionError(f"Schema names must be non-empty strings, got: {name!r}")
        if not isinstance(node, (Schema, Reference)):
            raise SchemaDefinitionError(
                f"Registry entry '{name}' must be a Schema or Reference, got {type(node).__name__}"
            )
        frozen[name] = node
    return MappingProxyType(frozen)
