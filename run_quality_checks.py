#!/usr/bin/env python
"""Run the linters, type checker and test suite used for pihal.

Usage:
    python run_quality_checks.py                     # every check, no fixes
    python run_quality_checks.py --fix               # let black/isort rewrite files
    python run_quality_checks.py --skip lint type    # leave out some checks
    python run_quality_checks.py --only tests        # a single check

Install the tools with: pip install -e ".[dev]"
"""

import argparse
import subprocess
import sys
from dataclasses import dataclass
from typing import Callable, Optional

PACKAGE_DIR = "pihal"
TESTS_DIR = "tests"
SOURCE_DIRS = [PACKAGE_DIR, TESTS_DIR]


@dataclass(frozen=True)
class Check:
    key: str
    title: str
    command: Callable[[bool], list[str]]


CHECKS = [
    Check(
        "formatting",
        "black",
        lambda fix: ["black", *SOURCE_DIRS] if fix else ["black", "--check", *SOURCE_DIRS],
    ),
    Check(
        "imports",
        "isort",
        lambda fix: ["isort", *SOURCE_DIRS] if fix else ["isort", "--check-only", *SOURCE_DIRS],
    ),
    Check("lint", "pylint", lambda _fix: ["pylint", PACKAGE_DIR]),
    Check("type", "mypy", lambda _fix: ["mypy", PACKAGE_DIR]),
    Check("deadcode", "vulture", lambda _fix: ["vulture", PACKAGE_DIR, "--min-confidence", "80"]),
    Check("complexity", "radon", lambda _fix: ["radon", "cc", PACKAGE_DIR, "-a", "-nc"]),
    Check(
        "tests",
        "pytest + coverage",
        lambda _fix: [
            "pytest",
            f"--cov={PACKAGE_DIR}",
            "--cov-report=term-missing",
            "--cov-report=xml",
            TESTS_DIR,
        ],
    ),
]


class CheckRunner:
    """Runs the selected checks and remembers which ones failed."""

    def __init__(self, fix: bool = False, verbose: bool = False, selected: Optional[list[str]] = None):
        self.fix = fix
        self.verbose = verbose
        self.selected = selected if selected is not None else [c.key for c in CHECKS]
        self.passed: list[str] = []
        self.failed: list[str] = []

    def run_check(self, check: Check) -> bool:
        cmd = check.command(self.fix)
        print(f"\n{'=' * 70}\n> {check.title}: {' '.join(cmd)}\n{'=' * 70}")

        try:
            result = subprocess.run(cmd, check=False, capture_output=not self.verbose, text=True)
        except FileNotFoundError as exc:
            print(f"[FAIL] {check.title}: {exc}")
            print('       Install the tools with: pip install -e ".[dev]"')
            self.failed.append(check.title)
            return False

        if result.returncode == 0:
            print(f"[ OK ] {check.title}")
            self.passed.append(check.title)
            return True

        if not self.verbose:
            print(result.stdout)
            print(result.stderr)
        print(f"[FAIL] {check.title}")
        self.failed.append(check.title)
        return False

    def run_all(self) -> int:
        for check in CHECKS:
            if check.key in self.selected:
                self.run_check(check)

        print(f"\n{'=' * 70}\nSUMMARY\n{'=' * 70}")
        for title in self.passed:
            print(f"  passed: {title}")
        for title in self.failed:
            print(f"  failed: {title}")
        if not self.failed:
            print("All checks passed.")

        return 1 if self.failed else 0


def main() -> int:
    keys = [c.key for c in CHECKS]
    parser = argparse.ArgumentParser(description="Run pihal quality checks and tests")
    parser.add_argument("--fix", action="store_true", help="Apply black and isort fixes")
    parser.add_argument("--verbose", "-v", action="store_true", help="Stream tool output")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--skip", nargs="+", choices=keys, default=[], help="Checks to leave out")
    group.add_argument("--only", nargs="+", choices=keys, help="Checks to run exclusively")
    args = parser.parse_args()

    selected = args.only or [k for k in keys if k not in args.skip]
    return CheckRunner(fix=args.fix, verbose=args.verbose, selected=selected).run_all()


if __name__ == "__main__":
    sys.exit(main())
