#!/usr/bin/env python3
"""
Validate that test_scenarios_business_summary.md stays in sync with test_integration_scenarios.py.

This script checks:
1. Every scenario class is documented
2. Every scenario method is documented under its own class
3. Warns about documented scenarios that no longer exist

Run: python scripts/validate_test_docs_sync.py
"""

import ast
import re
import sys
from pathlib import Path

CLASS_PATTERN = re.compile(r'\*\*Test Class\*\*:\s*`(Test\w+)`')
METHOD_PATTERN = re.compile(r'\*\*Test Method\*\*:\s*`(test_\w+)`')


def collect_scenarios(test_file: Path) -> dict[str, list[str]]:
    """Map each Test* class in the test module to its test_* methods."""
    tree = ast.parse(test_file.read_text())

    scenarios = {}
    for node in tree.body:
        if isinstance(node, ast.ClassDef) and node.name.startswith('Test'):
            scenarios[node.name] = [
                item.name for item in node.body
                if isinstance(item, ast.FunctionDef) and item.name.startswith('test_')
            ]
    return scenarios


def collect_documented(doc_file: Path) -> dict[str, list[str]]:
    """Map each documented class to the methods listed beneath it."""
    documented = {}
    current = None

    for line in doc_file.read_text().splitlines():
        class_match = CLASS_PATTERN.search(line)
        if class_match:
            current = class_match.group(1)
            documented.setdefault(current, [])
            continue

        method_match = METHOD_PATTERN.search(line)
        if method_match:
            # Methods listed before any class heading are filed under None
            documented.setdefault(current, []).append(method_match.group(1))

    return documented


def compare(scenarios: dict[str, list[str]], documented: dict[str, list[str]]) -> tuple[list[str], list[str]]:
    """Return (errors, warnings) describing how the two sides differ."""
    errors = []
    warnings = []

    for cls, methods in scenarios.items():
        if cls not in documented:
            errors.append(f"Missing class documentation: {cls}")
            continue
        for method in methods:
            if method not in documented[cls]:
                errors.append(f"Missing method documentation: {cls}.{method}")

    for cls, methods in documented.items():
        if cls not in scenarios:
            warnings.append(f"Documented class no longer exists: {cls}")
            continue
        for method in methods:
            if method not in scenarios[cls]:
                warnings.append(f"Documented method no longer exists: {cls}.{method}")

    return errors, warnings


def main():
    project_root = Path(__file__).parent.parent
    test_file = project_root / 'tests' / 'test_integration_scenarios.py'
    doc_file = project_root / 'docs' / 'test_scenarios_business_summary.md'

    for path in (test_file, doc_file):
        if not path.exists():
            print(f"❌ File not found: {path}")
            sys.exit(1)

    scenarios = collect_scenarios(test_file)
    documented = collect_documented(doc_file)
    errors, warnings = compare(scenarios, documented)

    print("=" * 60)
    print("Test Documentation Sync Validation")
    print("=" * 60)
    print(f"\nScenario classes: {len(scenarios)}")
    print(f"Scenario methods: {sum(len(m) for m in scenarios.values())}")

    if errors:
        print(f"\n❌ ERRORS ({len(errors)}):")
        for error in sorted(errors):
            print(f"   - {error}")

    if warnings:
        print(f"\n⚠️  WARNINGS ({len(warnings)}):")
        for warning in sorted(warnings):
            print(f"   - {warning}")

    if not errors and not warnings:
        print("\n✅ All scenarios are documented and in sync!")

    print("\n" + "=" * 60)

    sys.exit(1 if errors else 0)


if __name__ == '__main__':
    main()
