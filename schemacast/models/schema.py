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

"""In-memory schema model.

A schema node is either a :class:`Schema` (independent optional constraint
categories, evaluated as a conjunction) or a :class:`Reference` naming an
entry of the registry. Every attribute left at its default is unconstrained.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Tuple, Union


class SchemaType:
    """Values accepted by :attr:`Schema.type`."""
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"

    @classmethod
    def get_all_types(cls) -> Tuple[str, ...]:
        return (cls.STRING, cls.NUMBER, cls.INTEGER, cls.BOOLEAN, cls.OBJECT, cls.ARRAY)


DATE_FORMAT = "date"
DATE_TIME_FORMAT = "date-time"


@dataclass(frozen=True)
class Reference:
    """Pointer to a named schema in the registry."""
    name: str


@dataclass(frozen=True)
class Discriminator:
    property_name: str
    # property value -> schema name; values absent here are used as names directly
    mapping: Mapping[str, str] = field(default_factory=dict)

    def schema_name_for(self, tag: Any) -> Optional[str]:
        if not isinstance(tag, str) or not tag:
            return None
        return self.mapping.get(tag, tag)


@dataclass(frozen=True)
class Schema:
    type: Optional[str] = None
    format: Optional[str] = None
    enum: Optional[Sequence[Any]] = None
    nullable: bool = False

    # object
    properties: Optional[Mapping[str, "SchemaNode"]] = None
    required: Sequence[str] = ()
    # None/True: allowed, False: forbidden, node: extra values must match it
    additional_properties: Union[None, bool, "SchemaNode"] = None
    min_properties: Optional[int] = None
    max_properties: Optional[int] = None

    # array
    items: Optional["SchemaNode"] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    unique_items: bool = False

    # string
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None

    # number / integer
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: bool = False
    exclusive_maximum: bool = False
    multiple_of: Optional[float] = None

    # composition
    one_of: Optional[Sequence["SchemaNode"]] = None
    any_of: Optional[Sequence["SchemaNode"]] = None
    all_of: Optional[Sequence["SchemaNode"]] = None
    not_: Optional["SchemaNode"] = None
    discriminator: Optional[Discriminator] = None

    # cast only: record type (a class, or a name looked up in the host's type map)
    target_type: Union[None, str, type] = None

    # metadata, never enforced
    title: Optional[str] = None
    description: Optional[str] = None
    example: Any = None
    default: Any = None


SchemaNode = Union[Schema, Reference]

# name -> node; built once by the host and treated as read-only
Registry = Mapping[str, SchemaNode]
