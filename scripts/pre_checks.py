#!/usr/bin/env python3
"""Consistency checks for the entity table and release metadata.

Covers things the test suite takes for granted. Exits non-zero when any
check fails, so it can gate CI or a pre-commit hook.

Usage:
    python scripts/pre_checks.py
"""

import html.entities
import re
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
BACKEND = ROOT / "backend"
PACKAGE = BACKEND / "entity_encoder"

sys.path.insert(0, str(BACKEND))

_NAME_RE = re.compile(r"[A-Za-z][A-Za-z0-9]*")
_checks: list = []


def check(title: str):
    """Register fn as a check. It returns a list of problems; empty means pass."""
    def register(fn):
        _checks.append((title, fn))
        return fn
    return register


@check("Entity table equals html.entities.codepoint2name plus apos")
def entity_table_matches_stdlib():
    from entity_encoder.entities import ENTITY_TABLE

    expected = {**html.entities.codepoint2name, 0x27: "apos"}
    problems = []
    for codepoint in sorted(set(expected) | set(ENTITY_TABLE)):
        ours, theirs = ENTITY_TABLE.get(codepoint), expected.get(codepoint)
        if ours != theirs:
            problems.append(f"U+{codepoint:04X}: table has {ours!r}, expected {theirs!r}")
    return problems


@check("Entity names are ASCII identifiers")
def entity_names_are_identifiers():
    from entity_encoder.entities import ENTITY_TABLE

    return [f"bad name {name!r}" for name in ENTITY_TABLE.values() if not _NAME_RE.fullmatch(name)]


@check("APP_VERSION is only spelled out in config.py and pyproject.toml")
def version_defined_once():
    source = (PACKAGE / "config.py").read_text(encoding="utf-8")
    match = re.search(r'^APP_VERSION[^=]*=\s*["\']([^"\']+)["\']', source, re.MULTILINE)
    if not match:
        return ["APP_VERSION not found in config.py"]
    version = match.group(1)

    problems = []
    pyproject = (ROOT / "pyproject.toml").read_text(encoding="utf-8")
    if f'version = "{version}"' not in pyproject:
        problems.append(f"pyproject.toml version differs from APP_VERSION {version}")
    quoted = (f'"{version}"', f"'{version}'")
    for path in sorted(PACKAGE.rglob("*.py")):
        if path.name == "config.py":
            continue
        for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), 1):
            if not line.lstrip().startswith("#") and any(q in line for q in quoted):
                problems.append(f"{path.relative_to(BACKEND)}:{lineno}: {line.strip()[:80]}")
    return problems


def main() -> int:
    failed = 0
    for title, fn in _checks:
        try:
            problems = fn()
        except Exception as exc:
            problems = [f"check raised {exc!r}"]
        print(f"[{'FAIL' if problems else 'PASS'}] {title}")
        for problem in problems:
            print(f"       {problem}")
        failed += bool(problems)

    print(f"\n{len(_checks) - failed} passed, {failed} failed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
