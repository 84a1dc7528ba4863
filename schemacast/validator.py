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

"""Schema validation.

``validate`` walks a schema node and a decoded value side by side and returns
every :class:`SchemaIssue` it finds. Each constraint category of a node is an
independent check; all applicable checks run and their issues are
concatenated, so an ``allOf`` violated on ``#/a`` and ``#/b`` reports both.
``anyOf``/``oneOf``/``not`` only surface their own verdict.
"""

from __future__ import annotations

import dataclasses
import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .config import engine_config
from .exceptions import SchemaNotFoundError, SchemaTooDeepError
from .formats import check_format
from .models.issues import IssueKind, SchemaIssue
from .models.schema import DATE_FORMAT, DATE_TIME_FORMAT, Registry, Schema, SchemaNode, SchemaType
from .registry import resolve_node
from .utils.json_pointer import Path, ROOT, join_path, render_pointer


@dataclass(frozen=True)
class EvalContext:
    """Per-call, read-only state threaded through the recursion."""

    registry: Registry
    max_depth: int
    depth: int = 0

    def descend(self, path: Path) -> "EvalContext":
        if self.depth >= self.max_depth:
            raise SchemaTooDeepError(self.max_depth, render_pointer(path))
        return dataclasses.replace(self, depth=self.depth + 1)


def validate(
    schema: SchemaNode,
    value: Any,
    registry: Registry,
    *,
    max_depth: Optional[int] = None,
) -> List[SchemaIssue]:
    """Validate *value* against *schema*.

    Args:
        schema: Schema node (inline :class:`Schema` or :class:`Reference`).
        value: Decoded value (dicts, lists, scalars, dates or record instances).
        registry: Name to schema mapping used for references.
        max_depth: Nesting limit; defaults to ``engine_config.max_depth``.

    Returns:
        List of issues in evaluation order; empty when the value conforms.

    Raises:
        SchemaTooDeepError: If nesting exceeds *max_depth* (e.g. a reference cycle).
    """
    ctx = EvalContext(registry=registry, max_depth=max_depth if max_depth is not None else engine_config.max_depth)
    return validate_node(schema, value, ROOT, ctx)


def is_valid(schema: SchemaNode, value: Any, path: Path, ctx: EvalContext) -> bool:
    return not validate_node(schema, value, path, ctx)


def validate_node(node: SchemaNode, value: Any, path: Path, ctx: EvalContext) -> List[SchemaIssue]:
    ctx = ctx.descend(path)
    try:
        schema, _ = resolve_node(node, ctx.registry)
    except SchemaNotFoundError as exc:
        return [SchemaIssue(IssueKind.SCHEMA_NOT_FOUND, str(exc), path)]
    if not isinstance(schema, Schema):
        # Registry alias; one more hop.
        return validate_node(schema, value, path, ctx)

    if value is None:
        if schema.nullable:
            return []
        if schema.type is not None:
            return [SchemaIssue(IssueKind.WRONG_TYPE, f"Invalid type: expected {schema.type}, got null", path)]

    issues: List[SchemaIssue] = []
    issues.extend(check_type(schema, value, path))
    issues.extend(check_enum(schema, value, path))
    issues.extend(check_scalar_constraints(schema, value, path))
    issues.extend(_check_object(schema, value, path, ctx))
    issues.extend(_check_array(schema, value, path, ctx))
    issues.extend(_check_composition(schema, value, path, ctx))
    return issues


# -------------------------
# Kind helpers
# -------------------------


def is_record(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def is_object(value: Any) -> bool:
    return isinstance(value, Mapping) or is_record(value)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def kind_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, datetime):
        return "date-time"
    if isinstance(value, date):
        return "date"
    if is_array(value):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def is_temporal_for(fmt: Optional[str], value: Any) -> bool:
    """Whether *value* is an already-converted date/time for *fmt*."""
    if fmt == DATE_TIME_FORMAT:
        return isinstance(value, datetime)
    if fmt == DATE_FORMAT:
        return isinstance(value, date) and not isinstance(value, datetime)
    return False


def matches_type(schema: Schema, value: Any) -> bool:
    expected = schema.type
    if expected is None:
        return True
    if expected == SchemaType.STRING:
        return isinstance(value, str) or is_temporal_for(schema.format, value)
    if expected == SchemaType.INTEGER:
        return is_integer(value)
    if expected == SchemaType.NUMBER:
        return is_number(value)
    if expected == SchemaType.BOOLEAN:
        return isinstance(value, bool)
    if expected == SchemaType.OBJECT:
        return is_object(value)
    if expected == SchemaType.ARRAY:
        return is_array(value)
    # Unknown type names constrain nothing.
    return True


def object_view(value: Any, required: Sequence[str] = ()) -> Mapping[str, Any]:
    """Read an object value as a mapping.

    Record instances expose their fields; a field left at ``None`` counts as
    absent unless the schema requires it.
    """
    if isinstance(value, Mapping):
        return value
    view: Dict[str, Any] = {}
    for f in dataclasses.fields(value):
        field_value = getattr(value, f.name)
        if field_value is None and f.name not in required:
            continue
        view[f.name] = field_value
    return view


def json_equal(left: Any, right: Any) -> bool:
    """Structural equality where booleans never equal numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_array(left) and is_array(right):
        return len(left) == len(right) and all(json_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(json_equal(left[k], right[k]) for k in left)
    return left == right


# -------------------------
# Checks
# -------------------------


def check_type(schema: Schema, value: Any, path: Path) -> List[SchemaIssue]:
    if matches_type(schema, value):
        return []
    return [SchemaIssue(IssueKind.WRONG_TYPE, f"Invalid type: expected {schema.type}, got {kind_name(value)}", path)]


def check_enum(schema: Schema, value: Any, path: Path) -> List[SchemaIssue]:
    if schema.enum is None:
        return []
    if any(json_equal(value, member) for member in schema.enum):
        return []
    allowed = ", ".join(repr(member) for member in schema.enum)
    return [SchemaIssue(IssueKind.NOT_IN_ENUM, f"Value {value!r} is not one of: {allowed}", path)]


def check_scalar_constraints(schema: Schema, value: Any, path: Path) -> List[SchemaIssue]:
    """String length/pattern, numeric bounds and ``format`` checks."""
    issues: List[SchemaIssue] = []

    if isinstance(value, str):
        if schema.min_length is not None and len(value) < schema.min_length:
            issues.append(_violation(f"String is shorter than {schema.min_length} characters", path))
        if schema.max_length is not None and len(value) > schema.max_length:
            issues.append(_violation(f"String is longer than {schema.max_length} characters", path))
        if schema.pattern is not None and re.search(schema.pattern, value) is None:
            issues.append(_violation(f"String does not match pattern '{schema.pattern}'", path))

    if is_number(value):
        if schema.minimum is not None:
            if schema.exclusive_minimum and value <= schema.minimum:
                issues.append(_violation(f"Value {value} must be greater than {schema.minimum}", path))
            elif value < schema.minimum:
                issues.append(_violation(f"Value {value} must be at least {schema.minimum}", path))
        if schema.maximum is not None:
            if schema.exclusive_maximum and value >= schema.maximum:
                issues.append(_violation(f"Value {value} must be less than {schema.maximum}", path))
            elif value > schema.maximum:
                issues.append(_violation(f"Value {value} must be at most {schema.maximum}", path))
        if schema.multiple_of and not _is_multiple(value, schema.multiple_of):
            issues.append(_violation(f"Value {value} is not a multiple of {schema.multiple_of}", path))

    if schema.format:
        reason = check_format(value, schema.format)
        if reason is not None:
            issues.append(SchemaIssue(IssueKind.INVALID_FORMAT, reason, path))

    return issues


def _is_multiple(value: float, divisor: float) -> bool:
    quotient = value / divisor
    return math.isclose(quotient, round(quotient), rel_tol=0.0, abs_tol=1e-9)


def _violation(message: str, path: Path) -> SchemaIssue:
    return SchemaIssue(IssueKind.CONSTRAINT_VIOLATION, message, path)


def _check_object(schema: Schema, value: Any, path: Path, ctx: EvalContext) -> List[SchemaIssue]:
    if not is_object(value):
        return []

    data = object_view(value, schema.required)
    properties = schema.properties or {}
    issues: List[SchemaIssue] = []

    for name, child in properties.items():
        if name in data:
            issues.extend(validate_node(child, data[name], join_path(path, name), ctx))

    for name in schema.required:
        if name not in data:
            issues.append(
                SchemaIssue(IssueKind.MISSING_REQUIRED_PROPERTY, f"Missing required property '{name}'", path)
            )

    extra = [key for key in data if key not in properties]
    if schema.additional_properties is False:
        for key in extra:
            issues.append(
                SchemaIssue(IssueKind.UNEXPECTED_PROPERTY, f"Unexpected property '{key}'", join_path(path, key))
            )
    elif schema.additional_properties not in (None, True):
        for key in extra:
            issues.extend(validate_node(schema.additional_properties, data[key], join_path(path, key), ctx))

    if schema.min_properties is not None and len(data) < schema.min_properties:
        issues.append(_violation(f"Object has fewer than {schema.min_properties} properties", path))
    if schema.max_properties is not None and len(data) > schema.max_properties:
        issues.append(_violation(f"Object has more than {schema.max_properties} properties", path))

    return issues


def _check_array(schema: Schema, value: Any, path: Path, ctx: EvalContext) -> List[SchemaIssue]:
    if not is_array(value):
        return []

    issues: List[SchemaIssue] = []
    if schema.items is not None:
        for idx, item in enumerate(value):
            issues.extend(validate_node(schema.items, item, join_path(path, idx), ctx))

    if schema.min_items is not None and len(value) < schema.min_items:
        issues.append(_violation(f"Array has fewer than {schema.min_items} items", path))
    if schema.max_items is not None and len(value) > schema.max_items:
        issues.append(_violation(f"Array has more than {schema.max_items} items", path))
    if schema.unique_items:
        for idx, item in enumerate(value):
            if any(json_equal(item, earlier) for earlier in value[:idx]):
                issues.append(_violation(f"Array items are not unique (duplicate at index {idx})", path))
                break

    return issues


def _check_composition(schema: Schema, value: Any, path: Path, ctx: EvalContext) -> List[SchemaIssue]:
    issues: List[SchemaIssue] = []

    if schema.all_of:
        for child in schema.all_of:
            issues.extend(validate_node(child, value, path, ctx))

    if schema.any_of:
        if not any(is_valid(child, value, path, ctx) for child in schema.any_of):
            issues.append(
                SchemaIssue(IssueKind.NONE_MATCHED, "Value does not match any schema in anyOf", path)
            )

    if schema.one_of:
        matched = sum(1 for child in schema.one_of if is_valid(child, value, path, ctx))
        if matched == 0:
            issues.append(
                SchemaIssue(IssueKind.NONE_MATCHED, "Value does not match any schema in oneOf", path)
            )
        elif matched > 1:
            issues.append(
                SchemaIssue(
                    IssueKind.AMBIGUOUS_MATCH,
                    f"Value matches {matched} schemas in oneOf, expected exactly one",
                    path,
                )
            )

    if schema.not_ is not None and is_valid(schema.not_, value, path, ctx):
        issues.append(SchemaIssue(IssueKind.UNEXPECTED_MATCH, "Value must not match the schema in not", path))

    return issues
