from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Sequence, Tuple

from ..exceptions import CastError
from ..utils.json_pointer import Path, ROOT, render_pointer


class IssueKind(str, Enum):
    SCHEMA_NOT_FOUND = "SchemaNotFound"
    WRONG_TYPE = "WrongType"
    NOT_IN_ENUM = "NotInEnum"
    MISSING_REQUIRED_PROPERTY = "MissingRequiredProperty"
    UNEXPECTED_PROPERTY = "UnexpectedProperty"
    NONE_MATCHED = "NoneMatched"
    AMBIGUOUS_MATCH = "AmbiguousMatch"
    UNEXPECTED_MATCH = "UnexpectedMatch"
    CAST_ERROR = "CastError"
    INVALID_FORMAT = "InvalidFormat"
    CONSTRAINT_VIOLATION = "ConstraintViolation"
    SCHEMA_TOO_DEEP = "SchemaTooDeep"


@dataclass(frozen=True)
class SchemaIssue:
    kind: IssueKind
    message: str
    path: Path = ROOT

    @property
    def pointer(self) -> str:
        return render_pointer(self.path)

    def __str__(self) -> str:
        return f"{self.pointer}: {self.message}"


def format_issues(issues: Iterable[SchemaIssue]) -> str:
    """Render an aggregate error, one issue per line, in evaluation order."""
    return "\n".join(str(issue) for issue in issues)


def issues_at(issues: Sequence[SchemaIssue], pointer: str) -> List[SchemaIssue]:
    return [issue for issue in issues if issue.pointer == pointer]


@dataclass(frozen=True)
class CastResult:
    """Outcome of a cast: the typed value, or the issues that prevented it."""

    value: Any = None
    issues: Tuple[SchemaIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.issues

    def unwrap(self) -> Any:
        if self.issues:
            raise CastError(self.issues)
        return self.value

    def __str__(self) -> str:
        if self.ok:
            return f"ok: {self.value!r}"
        return format_issues(self.issues)
