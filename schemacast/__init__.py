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

"""Schema-driven validation and casting of decoded JSON-like values."""

__version__ = "0.1.0"

from .exceptions import (
    CastError,
    InvalidFormatError,
    SchemaCastError,
    SchemaDefinitionError,
    SchemaNotFoundError,
    SchemaTooDeepError,
)
from .models import (
    CastResult,
    Discriminator,
    IssueKind,
    Reference,
    Registry,
    Schema,
    SchemaIssue,
    SchemaNode,
    SchemaType,
    format_issues,
)
from .registry import freeze_registry, resolve
from .validator import validate
from .caster import cast

__all__ = [
    "cast",
    "validate",
    "resolve",
    "freeze_registry",
    "Schema",
    "Reference",
    "Discriminator",
    "SchemaType",
    "SchemaNode",
    "Registry",
    "SchemaIssue",
    "IssueKind",
    "CastResult",
    "format_issues",
    "CastError",
    "InvalidFormatError",
    "SchemaCastError",
    "SchemaDefinitionError",
    "SchemaNotFoundError",
    "SchemaTooDeepError",
]
