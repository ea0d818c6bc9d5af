#!/usr/bin/env python3
"""Check an organization JSON document for data-integrity problems.

Run from the backend/ directory:

    python3 scripts/check_organization.py [PATH] [--evaluators] [--verbose]

Reports dangling manager / evaluator references, self-evaluation overrides and
employees placed in units missing from the tree. With ``--evaluators`` it also
prints every employee's resolved evaluator. Exits with status 1 when issues
are found.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from orgchart.core.config import Settings  # noqa: E402
from orgchart.core.store import OrganizationStoreError, read_organization_file  # noqa: E402
from orgchart.models.organization import Organization  # noqa: E402
from orgchart.services.evaluation_relations import build_evaluation_map  # noqa: E402
from orgchart.services.integrity import find_integrity_issues  # noqa: E402

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Check an organization document for integrity problems",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Organization JSON file (default: ORGANIZATION_DATA_FILE setting)",
    )
    parser.add_argument(
        "--evaluators",
        action="store_true",
        help="List each employee's resolved evaluator",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return parser.parse_args(argv)


def format_evaluator_lines(org: Organization) -> list[str]:
    relations = build_evaluation_map(org)
    lines: list[str] = []
    for employee in org.employees:
        relation = relations[employee.id]
        evaluator = relation.evaluator
        target = f"{evaluator.name} ({evaluator.id})" if evaluator else "-"
        lines.append(f"{employee.id}\t{employee.name}\t-> {target}\t[{relation.evaluatee_count} evaluatees]")
    return lines


def check(args: argparse.Namespace) -> int:
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    path = Path(args.path or Settings().ORGANIZATION_DATA_FILE)
    logger.info("Reading %s...", path)
    try:
        org = read_organization_file(path)
    except OrganizationStoreError as e:
        logger.error("%s", e)
        return 2

    logger.info(
        "Loaded %s: %d departments, %d employees",
        org.name,
        len(org.departments),
        len(org.employees),
    )

    if args.evaluators:
        for line in format_evaluator_lines(org):
            print(line)

    issues = find_integrity_issues(org)
    for issue in issues:
        logger.warning("[%s] %s", issue.kind, issue.message)

    if issues:
        logger.info("%d issue(s) found", len(issues))
        return 1
    logger.info("No issues found")
    return 0


def main() -> None:
    sys.exit(check(parse_args()))


if __name__ == "__main__":
    main()
