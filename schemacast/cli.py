#!/usr/bin/env python3
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

"""CLI entry point for validating or casting documents against a schema registry."""

import argparse
import dataclasses
import json
import logging
import sys
from datetime import date, datetime
from typing import Any, List, Optional

from .caster import cast
from .config import engine_config
from .exceptions import SchemaDefinitionError, SchemaTooDeepError
from .formats import format_date, format_datetime
from .models.issues import SchemaIssue
from .models.schema import Reference
from .parsing.registry_loader import load_document, load_registry
from .validator import validate

logger = logging.getLogger(__name__)


class _GenericRecords(dict):
    """Type map that materializes every target-type tag as a plain dict."""

    def __missing__(self, key):
        return dict


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, date):
        return format_date(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _issue_dict(issue: SchemaIssue) -> dict:
    return {'path': issue.pointer, 'kind': issue.kind.value, 'message': issue.message}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='schemacast',
        description='Validate or cast YAML/JSON documents against named schemas',
    )
    parser.add_argument('command', choices=['validate', 'cast'], help='Operation to run')
    parser.add_argument('documents', nargs='+', help='YAML or JSON documents to check')
    parser.add_argument(
        '--schemas',
        nargs='+',
        required=True,
        help='Schema documents (OpenAPI components.schemas or name -> schema mappings)',
    )
    parser.add_argument('--schema', required=True, help='Name of the schema to apply')
    parser.add_argument(
        '--format',
        choices=['human', 'json'],
        default='human',
        help='Output format (default: human)',
    )
    parser.add_argument('--strict', action='store_true', help='Reject unsupported schema keywords')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the schemacast CLI."""
    args = build_parser().parse_args(argv)
    engine_config.set_logging()

    try:
        registry = load_registry(args.schemas, strict_mode=args.strict)
    except SchemaDefinitionError as e:
        logger.error(f"Failed to load schemas: {e}")
        sys.exit(2)

    if args.schema not in registry:
        logger.error(f"Schema '{args.schema}' not found in {', '.join(args.schemas)}")
        sys.exit(2)

    schema = Reference(args.schema)
    results = []
    for document in args.documents:
        try:
            value = load_document(document)
            if args.command == 'validate':
                issues = validate(schema, value, registry)
                output = None
            else:
                result = cast(schema, value, registry, types=_GenericRecords())
                issues = list(result.issues)
                output = result.value
        except (SchemaDefinitionError, SchemaTooDeepError) as e:
            logger.error(f"{document}: {e}")
            sys.exit(2)
        results.append((document, issues, output))

    if args.format == 'json':
        payload = [
            {
                'file': document,
                'ok': not issues,
                'issues': [_issue_dict(issue) for issue in issues],
                **({'value': output} if args.command == 'cast' and not issues else {}),
            }
            for document, issues, output in results
        ]
        print(json.dumps(payload, indent=2, default=_json_default))
    else:  # human-readable
        for document, issues, output in results:
            if issues:
                print(f"\n{document}:")
                for issue in issues:
                    print(f"  ERROR {issue.pointer} [{issue.kind.value}]: {issue.message}")
            elif args.command == 'cast':
                print(json.dumps(output, indent=2, default=_json_default))

    if any(issues for _, issues, _ in results):
        sys.exit(1)
    if args.format == 'human' and args.command == 'validate':
        print(f"{len(results)} document(s) conform to {args.schema}.")
    sys.exit(0)


if __name__ == '__main__':
    main()
