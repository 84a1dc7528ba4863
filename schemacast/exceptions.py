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

"""Custom exceptions for the schemacast engine."""


class SchemaCastError(Exception):
    """Base exception for schemacast related errors."""
    pass


class SchemaNotFoundError(SchemaCastError, KeyError):
    """Exception raised when a schema reference is missing from the registry."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Schema '{self.name}' not found in registry"


class InvalidFormatError(SchemaCastError, ValueError):
    """Exception raised when a string cannot be converted for a format."""
    pass


class SchemaTooDeepError(SchemaCastError):
    """Exception raised when schema nesting exceeds the configured depth limit.

    This usually means the registry contains a reference cycle.
    """

    def __init__(self, max_depth: int, pointer: str = "#"):
        super().__init__(f"Schema nesting exceeds maximum depth {max_depth} at {pointer}")
        self.max_depth = max_depth
        self.pointer = pointer


class CastError(SchemaCastError):
    """Exception raised when a value cannot be cast to its schema."""

    def __init__(self, issues):
        self.issues = tuple(issues)
        super().__init__("\n".join(str(issue) for issue in self.issues) or "cast failed")


class SchemaDefinitionError(SchemaCastError):
    """Exception raised for malformed schema documents."""
    pass
