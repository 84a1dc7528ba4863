"""
Tests for schemacast.validator
"""

from datetime import date, datetime, timezone

import pytest

from schemacast import IssueKind, Reference, Schema, SchemaTooDeepError, format_issues, validate
from schemacast.models import issues_at

from conftest import USER_EXAMPLE, User


def kinds(issues):
    return [issue.kind for issue in issues]


class TestTypeChecks:
    """Runtime kind checks for each schema type"""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "schema_type,value",
        [
            ("object", []),
            ("array", {}),
            ("boolean", {}),
            ("string", {}),
            ("integer", {}),
            ("number", {}),
            ("integer", True),
            ("number", "1"),
        ],
    )
    def test_wrong_type(self, schema_type, value):
        issues = validate(Schema(type=schema_type), value, {})
        assert kinds(issues) == [IssueKind.WRONG_TYPE]
        assert issues[0].pointer == "#"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "schema_type,value",
        [
            ("object", {"a": 1}),
            ("array", [1, 2]),
            ("array", (1, 2)),
            ("boolean", False),
            ("string", "text"),
            ("integer", 3),
            ("integer", 3.0),
            ("number", 3.5),
            ("number", 3),
        ],
    )
    def test_matching_type(self, schema_type, value):
        assert validate(Schema(type=schema_type), value, {}) == []

    @pytest.mark.unit
    def test_string_rejects_datetime_without_format(self):
        issues = validate(Schema(type="string"), datetime.now(timezone.utc), {})
        assert kinds(issues) == [IssueKind.WRONG_TYPE]

    @pytest.mark.unit
    def test_object_rejects_datetime(self):
        assert validate(Schema(type="object"), datetime.now(timezone.utc), {}) != []

    @pytest.mark.unit
    def test_date_time_format_accepts_datetime(self):
        schema = Schema(type="string", format="date-time")
        assert validate(schema, datetime.now(timezone.utc), {}) == []

    @pytest.mark.unit
    def test_date_format_accepts_date(self):
        schema = Schema(type="string", format="date")
        assert validate(schema, date.today(), {}) == []

    @pytest.mark.unit
    def test_null_requires_nullable(self):
        assert kinds(validate(Schema(type="string"), None, {})) == [IssueKind.WRONG_TYPE]
        assert validate(Schema(type="string", nullable=True), None, {}) == []
        assert validate(Schema(), None, {}) == []


class TestScalarConstraints:
    """enum, format and bound checks"""

    @pytest.mark.unit
    def test_enum_rejects_unexpected_value(self):
        schema = Schema(type="string", enum=("foo", "bar"))
        assert kinds(validate(schema, "baz", {})) == [IssueKind.NOT_IN_ENUM]

    @pytest.mark.unit
    def test_enum_accepts_member(self):
        schema = Schema(type="string", enum=("foo", "bar"))
        assert validate(schema, "bar", {}) == []

    @pytest.mark.unit
    def test_enum_does_not_confuse_booleans_and_numbers(self):
        assert kinds(validate(Schema(enum=(1, 0)), True, {})) == [IssueKind.NOT_IN_ENUM]
        assert validate(Schema(enum=({"a": [1, 2]},)), {"a": [1, 2]}, {}) == []

    @pytest.mark.unit
    def test_invalid_date_time_string(self):
        schema = Schema(type="string", format="date-time")
        assert kinds(validate(schema, "yesterday", {})) == [IssueKind.INVALID_FORMAT]
        assert validate(schema, "2018-04-01T12:34:56Z", {}) == []

    @pytest.mark.unit
    def test_email_format_delegated_to_jsonschema(self):
        schema = Schema(type="string", format="email")
        assert kinds(validate(schema, "not-an-email", {})) == [IssueKind.INVALID_FORMAT]
        assert validate(schema, "foo@bar.com", {}) == []

    @pytest.mark.unit
    def test_int32_range(self):
        schema = Schema(type="integer", format="int32")
        assert kinds(validate(schema, 2 ** 31, {})) == [IssueKind.INVALID_FORMAT]

    @pytest.mark.unit
    def test_string_and_number_bounds(self):
        assert kinds(validate(Schema(type="string", min_length=3), "ab", {})) == [IssueKind.CONSTRAINT_VIOLATION]
        assert kinds(validate(Schema(type="string", pattern="^a"), "ba", {})) == [IssueKind.CONSTRAINT_VIOLATION]
        assert kinds(validate(Schema(type="number", minimum=0), -1, {})) == [IssueKind.CONSTRAINT_VIOLATION]
        assert validate(Schema(type="number", minimum=0), 0, {}) == []
        assert kinds(
            validate(Schema(type="number", minimum=0, exclusive_minimum=True), 0, {})
        ) == [IssueKind.CONSTRAINT_VIOLATION]
        assert validate(Schema(type="number", multiple_of=0.1), 0.3, {}) == []


class TestObjects:
    """properties, required and additionalProperties"""

    @pytest.mark.unit
    def test_child_errors_are_all_collected(self):
        schema = Schema(
            type="object",
            properties={"a": Schema(type="string"), "b": Schema(type="string")},
        )
        issues = validate(schema, {"a": 1, "b": 2}, {})
        assert [issue.pointer for issue in issues] == ["#/a", "#/b"]

    @pytest.mark.unit
    def test_missing_required_property_reported_at_object(self):
        schema = Schema(type="object", properties={"user": Schema(type="object", required=("name",))})
        issues = validate(schema, {"user": {}}, {})
        assert kinds(issues) == [IssueKind.MISSING_REQUIRED_PROPERTY]
        assert issues[0].pointer == "#/user"
        assert "name" in issues[0].message

    @pytest.mark.unit
    def test_additional_properties_false(self):
        schema = Schema(type="object", properties={"a": Schema(type="string")}, additional_properties=False)
        issues = validate(schema, {"a": "ok", "b": 1, "c": 2}, {})
        assert kinds(issues) == [IssueKind.UNEXPECTED_PROPERTY, IssueKind.UNEXPECTED_PROPERTY]
        assert [issue.pointer for issue in issues] == ["#/b", "#/c"]

    @pytest.mark.unit
    def test_additional_properties_schema(self):
        schema = Schema(type="object", additional_properties=Schema(type="string"))
        issues = validate(schema, {"key1": "value1", "key2": 2}, {})
        assert [issue.pointer for issue in issues] == ["#/key2"]

    @pytest.mark.unit
    def test_path_escaping(self):
        schema = Schema(type="object", additional_properties=Schema(type="string"))
        issues = validate(schema, {"a/b~c": 1}, {})
        assert issues[0].pointer == "#/a~1b~0c"

    @pytest.mark.unit
    def test_record_instances_validate_as_objects(self, registry):
        user = User(id=1, name="joe", email="joe@gmail.com", updated_at=datetime.now(timezone.utc))
        assert validate(Reference("User"), user, registry) == []


class TestArrays:
    """items and item-count constraints"""

    @pytest.mark.unit
    def test_item_errors_carry_index(self):
        schema = Schema(type="array", items=Schema(type="integer"))
        issues = validate(schema, [1, "two", 3, "four"], {})
        assert [issue.pointer for issue in issues] == ["#/1", "#/3"]

    @pytest.mark.unit
    def test_unique_items(self):
        schema = Schema(type="array", unique_items=True)
        assert kinds(validate(schema, [1, 2, 1], {})) == [IssueKind.CONSTRAINT_VIOLATION]
        assert validate(schema, [1, True], {}) == []


class TestComposition:
    """anyOf, oneOf, allOf and not"""

    @pytest.mark.unit
    def test_any_of_with_valid_value(self):
        schema = Schema(any_of=(Schema(type="array"), Schema(type="string")))
        assert validate(schema, "a string", {}) == []

    @pytest.mark.unit
    def test_any_of_with_invalid_value(self):
        schema = Schema(any_of=(Schema(type="string"), Schema(type="array")))
        assert kinds(validate(schema, 3.14159, {})) == [IssueKind.NONE_MATCHED]

    @pytest.mark.unit
    def test_one_of_with_valid_value(self):
        schema = Schema(one_of=(Schema(type="string"), Schema(type="array")))
        assert validate(schema, [1, 2, 3], {}) == []

    @pytest.mark.unit
    def test_one_of_with_invalid_value(self):
        schema = Schema(one_of=(Schema(type="string"), Schema(type="array")))
        assert kinds(validate(schema, 3.14159, {})) == [IssueKind.NONE_MATCHED]

    @pytest.mark.unit
    def test_one_of_matching_multiple_schemas(self):
        schema = Schema(
            one_of=(
                Schema(type="object", properties={"a": Schema(type="string")}),
                Schema(type="object", properties={"b": Schema(type="string")}),
            )
        )
        assert kinds(validate(schema, {"a": "a", "b": "b"}, {})) == [IssueKind.AMBIGUOUS_MATCH]

    @pytest.mark.unit
    def test_all_of_with_valid_value(self):
        schema = Schema(
            all_of=(
                Schema(type="object", properties={"a": Schema(type="string")}),
                Schema(type="object", properties={"b": Schema(type="string")}),
            )
        )
        assert validate(schema, {"a": "a", "b": "b"}, {}) == []

    @pytest.mark.unit
    def test_all_of_reports_every_failing_branch(self):
        schema = Schema(
            all_of=(
                Schema(type="object", properties={"a": Schema(type="string")}),
                Schema(type="object", properties={"b": Schema(type="string")}),
            )
        )
        issues = validate(schema, {"a": 1, "b": 2}, {})
        message = format_issues(issues)
        assert "#/a" in message
        assert "#/b" in message
        assert len(issues_at(issues, "#/a")) == 1
        assert len(issues_at(issues, "#/b")) == 1

    @pytest.mark.unit
    def test_not_with_valid_value(self):
        schema = Schema(not_=Schema(type="object"))
        assert validate(schema, 1, {}) == []

    @pytest.mark.unit
    def test_not_with_invalid_value(self):
        schema = Schema(not_=Schema(type="object"))
        assert kinds(validate(schema, {"a": 1}, {})) == [IssueKind.UNEXPECTED_MATCH]

    @pytest.mark.unit
    def test_type_and_composition_are_conjoined(self):
        schema = Schema(
            type="object",
            required=("id",),
            any_of=(Schema(type="string"), Schema(type="array")),
        )
        assert kinds(validate(schema, {}, {})) == [IssueKind.MISSING_REQUIRED_PROPERTY, IssueKind.NONE_MATCHED]


class TestReferences:
    """Registry lookups and the depth guard"""

    @pytest.mark.unit
    def test_user_example_matches_schema(self, registry):
        assert validate(Reference("User"), USER_EXAMPLE, registry) == []

    @pytest.mark.unit
    def test_nested_reference_paths(self, registry):
        issues = validate(Reference("UserRequest"), {"user": {"name": "joe", "email": 5}}, registry)
        assert [issue.pointer for issue in issues] == ["#/user/email"]

    @pytest.mark.unit
    def test_missing_reference_is_an_issue(self):
        schema = Schema(type="object", properties={"owner": Reference("Owner")})
        issues = validate(schema, {"owner": {}}, {})
        assert kinds(issues) == [IssueKind.SCHEMA_NOT_FOUND]
        assert issues[0].pointer == "#/owner"

    @pytest.mark.unit
    def test_registry_alias_is_followed(self, schemas):
        registry = dict(schemas, Person=Reference("User"))
        assert validate(Reference("Person"), USER_EXAMPLE, registry) == []

    @pytest.mark.unit
    def test_cyclic_reference_raises(self):
        registry = {"Loop": Reference("Loop")}
        with pytest.raises(SchemaTooDeepError):
            validate(Reference("Loop"), 1, registry)

    @pytest.mark.unit
    def test_recursive_schema_within_limit(self):
        registry = {
            "Tree": Schema(
                type="object",
                properties={"children": Schema(type="array", items=Reference("Tree"))},
            )
        }
        tree = {"children": [{"children": [{"children": []}]}, {"children": []}]}
        assert validate(Reference("Tree"), tree, registry) == []
        with pytest.raises(SchemaTooDeepError):
            validate(Reference("Tree"), tree, registry, max_depth=4)

    @pytest.mark.unit
    def test_explicit_zero_depth_is_honoured(self):
        with pytest.raises(SchemaTooDeepError):
            validate(Schema(), 1, {}, max_depth=0)
