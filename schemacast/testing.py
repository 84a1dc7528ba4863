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

"""Assertions for test suites that check payloads against a registry."""

from typing import Any, Union

from .models.issues import format_issues
from .models.schema import Reference, Registry, SchemaNode
from .validator import validate


def assert_schema(value: Any, schema: Union[str, SchemaNode], registry: Registry) -> Any:
    """Assert that *value* conforms to *schema* and return it unchanged.

    *schema* may be a node or the name of a registry entry.
    """
    node = Reference(schema) if isinstance(schema, str) else schema
    issues = validate(node, value, registry)
    if issues:
        label = schema if isinstance(schema, str) else type(schema).__name__
        raise AssertionError(f"Value does not conform to {label}:\n{format_issues(issues)}")
    return value


def assert_examples(registry: Registry) -> None:
    """Assert that every registry schema carrying an ``example`` accepts it."""
    failures = []
    for name, node in registry.items():
        example = getattr(node, "example", None)
        if example is None:
            continue
        issues = validate(Reference(name), example, registry)
        if issues:
            failures.append(f"{name}:\n{format_issues(issues)}")
    if failures:
        raise AssertionError("Schema examples do not conform:\n" + "\n".join(failures))
