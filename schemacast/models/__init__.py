from .schema import (
    DATE_FORMAT,
    DATE_TIME_FORMAT,
    Discriminator,
    Reference,
    Registry,
    Schema,
    SchemaNode,
    SchemaType,
)
from .issues import CastResult, IssueKind, SchemaIssue, format_issues, issues_at
