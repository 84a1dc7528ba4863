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

"""Schema-driven casting.

``cast`` mirrors the validator's descent but builds a typed value: numeric,
boolean and date/time strings are converted, objects become fresh dicts (or
the record type named by the schema's target-type tag) and arrays fresh
lists. Casting stops at the first failure.

A node's own shape and ``allOf`` are always applied. Polymorphic nodes
(``oneOf``/``anyOf``) additionally pick the first child, in declared order,
whose cast output validates against that child, and the composed value is
checked against the rest of the node. Uniqueness is not re-checked here, so a
``oneOf`` that validation rejects as ambiguous can still cast.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from .config import engine_config
from .exceptions import CastError, InvalidFormatError, SchemaNotFoundError
from .formats import parse_boolean, parse_date, parse_datetime, parse_integer, parse_number
from .models.issues import CastResult, IssueKind, SchemaIssue
from .models.schema import DATE_FORMAT, DATE_TIME_FORMAT, Reference, Registry, Schema, SchemaNode, SchemaType
from .registry import resolve_node
from .utils.json_pointer import Path, ROOT, join_path, render_pointer
from .validator import (
    EvalContext,
    check_enum,
    check_scalar_constraints,
    is_array,
    is_integer,
    is_number,
    is_object,
    is_temporal_for,
    is_valid,
    json_equal,
    kind_name,
    object_view,
    validate_node,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CastContext(EvalContext):
    """Validation context plus the host type map and the references being cast."""

    types: Mapping[str, type] = dataclasses.field(default_factory=dict)
    active_refs: FrozenSet[str] = frozenset()

    def entering(self, name: Optional[str]) -> "CastContext":
        if name is None:
            return self
        return dataclasses.replace(self, active_refs=self.active_refs | {name})


def cast(
    schema: SchemaNode,
    value: Any,
    registry: Registry,
    *,
    types: Optional[Mapping[str, type]] = None,
    max_depth: Optional[int] = None,
) -> CastResult:
    """Cast *value* into the typed shape described by *schema*.

    Args:
        schema: Schema node (inline :class:`Schema` or :class:`Reference`).
        value: Decoded value to cast.
        registry: Name to schema mapping used for references and discriminators.
        types: Host type map resolving string target-type tags to classes.
        max_depth: Nesting limit; defaults to ``engine_config.max_depth``.

    Returns:
        A :class:`CastResult` holding the typed value or the failure.

    Raises:
        SchemaTooDeepError: If nesting exceeds *max_depth* (e.g. a reference cycle).
    """
    ctx = CastContext(
        registry=registry,
        max_depth=max_depth if max_depth is not None else engine_config.max_depth,
        types=types if types is not None else {},
    )
    try:
        return CastResult(value=cast_node(schema, value, ROOT, ctx))
    except CastError as exc:
        return CastResult(issues=exc.issues)


def _fail(message: str, path: Path, kind: IssueKind = IssueKind.CAST_ERROR) -> CastError:
    return CastError([SchemaIssue(kind, message, path)])


def cast_node(node: SchemaNode, value: Any, path: Path, ctx: CastContext) -> Any:
    ctx = ctx.descend(path)
    try:
        schema, ref = resolve_node(node, ctx.registry)
    except SchemaNotFoundError as exc:
        raise _fail(str(exc), path, IssueKind.SCHEMA_NOT_FOUND) from None
    ctx = ctx.entering(ref)
    if not isinstance(schema, Schema):
        return cast_node(schema, value, path, ctx)

    if value is None:
        if schema.nullable:
            return None
        if schema.type is not None:
            raise _fail(f"Cannot cast null to {schema.type}", path)

    dispatched = _dispatch_discriminator(schema, value, path, ctx)
    if dispatched is not _NO_DISPATCH:
        return dispatched

    result = _cast_own(schema, value, path, ctx)
    if schema.all_of:
        result = _cast_all_of(schema, value, result, path, ctx)
    if schema.one_of or schema.any_of:
        result = _cast_first_match(schema, value, result, path, ctx)
    if schema.all_of or schema.one_of or schema.any_of:
        # Composed output must still satisfy the node itself; oneOf uniqueness is not re-checked.
        issues = validate_node(dataclasses.replace(schema, one_of=None, any_of=None), result, path, ctx)
        if issues:
            raise CastError(issues)

    if schema.not_ is not None and is_valid(schema.not_, result, path, ctx):
        raise _fail("Value must not match the schema in not", path)

    return _materialize(schema, result, path, ctx)


# -------------------------
# Composition
# -------------------------

_NO_DISPATCH = object()


def _dispatch_discriminator(schema: Schema, value: Any, path: Path, ctx: CastContext) -> Any:
    if schema.discriminator is None or not isinstance(value, Mapping):
        return _NO_DISPATCH
    property_name = schema.discriminator.property_name
    if property_name not in value:
        return _NO_DISPATCH

    target = schema.discriminator.schema_name_for(value[property_name])
    if target is None:
        raise _fail(f"Invalid discriminator value for '{property_name}'", join_path(path, property_name))
    if target in ctx.active_refs:
        # Already casting this sub-schema further up; it includes its parent via allOf.
        return _NO_DISPATCH
    if target not in ctx.registry:
        raise _fail(
            f"Discriminator '{property_name}' names unknown schema '{target}'",
            join_path(path, property_name),
        )

    logger.debug("Discriminator %s=%r at %s dispatches to %s",
                 property_name, value[property_name], render_pointer(path), target)
    return cast_node(Reference(target), value, path, ctx)


def _cast_first_match(schema: Schema, value: Any, own: Any, path: Path, ctx: CastContext) -> Any:
    keyword = "oneOf" if schema.one_of else "anyOf"
    candidates = list(schema.one_of or schema.any_of)
    source = _overlay(value, own) if is_object(value) else own

    for idx, child in enumerate(candidates):
        try:
            candidate = cast_node(child, source, path, ctx)
        except CastError:
            continue
        if is_valid(child, candidate, path, ctx):
            logger.debug("%s at %s matched candidate %d", keyword, render_pointer(path), idx)
            return _combine(schema, own, candidate)

    raise _fail(f"Value does not match any schema in {keyword}", path, IssueKind.NONE_MATCHED)


def _overlay(value: Any, own: Any) -> Dict[str, Any]:
    """Raw input with the fields already cast by the node's own shape swapped in."""
    source = dict(object_view(value))
    if is_object(own):
        source.update(object_view(own))
    return source


def _combine(schema: Schema, own: Any, candidate: Any) -> Any:
    if schema.properties is None and not schema.all_of:
        return candidate
    if not (is_object(own) and is_object(candidate)):
        return candidate
    merged: Dict[str, Any] = dict(object_view(own))
    merged.update(object_view(candidate))
    return merged


def _cast_all_of(schema: Schema, value: Any, own: Any, path: Path, ctx: CastContext) -> Any:
    if is_object(value):
        # Own declared fields first; a free-form own shape contributes nothing.
        merged: Dict[str, Any] = dict(object_view(own)) if schema.properties is not None and is_object(own) else {}
        source = _overlay(value, own)
        for child in schema.all_of:
            part = cast_node(child, source, path, ctx)
            if not is_object(part):
                raise _fail(f"allOf member produced {kind_name(part)} for an object value", path)
            merged.update(object_view(part))
            source.update(object_view(part))
        return merged

    result = own
    for child in schema.all_of:
        result = cast_node(child, result, path, ctx)
    return result


# -------------------------
# Own shape
# -------------------------


def _cast_own(schema: Schema, value: Any, path: Path, ctx: CastContext) -> Any:
    expected = schema.type

    if expected == SchemaType.OBJECT or (expected is None and schema.properties is not None and is_object(value)):
        return _cast_object(schema, value, path, ctx)
    if expected == SchemaType.ARRAY or (expected is None and schema.items is not None and is_array(value)):
        return _cast_array(schema, value, path, ctx)

    result = _cast_scalar(schema, value, path)
    issues = check_enum(schema, result, path) + check_scalar_constraints(schema, result, path)
    if issues:
        raise CastError(issues)
    return result


def _cast_scalar(schema: Schema, value: Any, path: Path) -> Any:
    expected = schema.type
    try:
        if schema.format in (DATE_FORMAT, DATE_TIME_FORMAT) and expected in (None, SchemaType.STRING):
            if is_temporal_for(schema.format, value):
                return value
            if isinstance(value, str):
                return parse_datetime(value) if schema.format == DATE_TIME_FORMAT else parse_date(value)

        if expected is None:
            return value
        if expected == SchemaType.STRING:
            if isinstance(value, str):
                return value
        elif expected == SchemaType.NUMBER:
            if is_number(value):
                return value
            if isinstance(value, str):
                return parse_number(value)
        elif expected == SchemaType.INTEGER:
            if is_integer(value):
                return int(value)
            if isinstance(value, str):
                return parse_integer(value)
        elif expected == SchemaType.BOOLEAN:
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                return parse_boolean(value)
        else:
            return value
    except InvalidFormatError as exc:
        raise _fail(f"Cannot cast to {expected or schema.format}: {exc}", path, IssueKind.INVALID_FORMAT) from None

    raise _fail(f"Cannot cast {kind_name(value)} to {expected}", path)


def _cast_object(schema: Schema, value: Any, path: Path, ctx: CastContext) -> Dict[str, Any]:
    if not is_object(value):
        raise _fail(f"Cannot cast {kind_name(value)} to object", path)

    data = object_view(value, schema.required)
    properties = schema.properties or {}

    missing = [name for name in schema.required if name not in data]
    if missing:
        raise _fail(f"Missing required field(s): {', '.join(missing)}", path)

    extra = [key for key in data if key not in properties]
    if extra and schema.additional_properties is False:
        raise CastError(
            [SchemaIssue(IssueKind.CAST_ERROR, f"Unexpected field(s): {', '.join(map(str, extra))}", path)]
            + [SchemaIssue(IssueKind.UNEXPECTED_PROPERTY, f"Unexpected property '{key}'", join_path(path, key))
               for key in extra]
        )

    result: Dict[str, Any] = {}
    for name, child in properties.items():
        if name in data:
            result[name] = cast_node(child, data[name], join_path(path, name), ctx)

    additional = schema.additional_properties
    for key in extra:
        if additional is True or (additional is None and schema.properties is None):
            result[key] = data[key]
        elif additional not in (None, True):
            result[key] = cast_node(additional, data[key], join_path(path, key), ctx)
        # Otherwise undeclared keys are not part of the record.

    if schema.min_properties is not None and len(result) < schema.min_properties:
        raise _fail(f"Object has fewer than {schema.min_properties} properties", path)
    if schema.max_properties is not None and len(result) > schema.max_properties:
        raise _fail(f"Object has more than {schema.max_properties} properties", path)
    return result


def _cast_array(schema: Schema, value: Any, path: Path, ctx: CastContext) -> List[Any]:
    if not is_array(value):
        raise _fail(f"Cannot cast {kind_name(value)} to array", path)

    if schema.items is None:
        result = list(value)
    else:
        result = [cast_node(schema.items, item, join_path(path, idx), ctx) for idx, item in enumerate(value)]

    if schema.min_items is not None and len(result) < schema.min_items:
        raise _fail(f"Array has fewer than {schema.min_items} items", path)
    if schema.max_items is not None and len(result) > schema.max_items:
        raise _fail(f"Array has more than {schema.max_items} items", path)
    if schema.unique_items:
        for idx, item in enumerate(result):
            if any(json_equal(item, earlier) for earlier in result[:idx]):
                raise _fail(f"Array items are not unique (duplicate at index {idx})", path)
    return result


# -------------------------
# Target types
# -------------------------


def _resolve_target_type(schema: Schema, path: Path, ctx: CastContext) -> Optional[type]:
    target = schema.target_type
    if target is None or isinstance(target, type):
        return target
    try:
        return ctx.types[target]
    except KeyError:
        raise _fail(f"Unknown target type '{target}'", path) from None


def _materialize(schema: Schema, result: Any, path: Path, ctx: CastContext) -> Any:
    record_type = _resolve_target_type(schema, path, ctx)
    if record_type is None or not isinstance(result, Mapping):
        return result

    fields = dict(result)
    if dataclasses.is_dataclass(record_type):
        names = {f.name for f in dataclasses.fields(record_type) if f.init}
        fields = {key: val for key, val in fields.items() if key in names}
    try:
        return record_type(**fields)
    except TypeError as exc:
        raise _fail(f"Cannot build {record_type.__name__}: {exc}", path) from None
