#!/usr/bin/env python3
"""Run CI checks locally: formatting, linting, tests, and type checking."""

import argparse
import subprocess
import sys
import time
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent.resolve()
TARGETS = ["src", "tests"]

_USE_COLOR = sys.stdout.isatty()


def _color(code: str, text: str) -> str:
    if _USE_COLOR:
        return f"\033[{code}m{text}\033[0m"
    return text


def checks(fix: bool) -> list[tuple[str, list[str]]]:
    """Return (display name, command) pairs, auto-fixing ruff findings when asked."""
    ruff = [sys.executable, "-m", "ruff"]
    if fix:
        lint = [("ruff format", [*ruff, "format", *TARGETS]), ("ruff check", [*ruff, "check", "--fix", *TARGETS])]
    else:
        lint = [
            ("ruff format", [*ruff, "format", "--check", *TARGETS]),
            ("ruff check", [*ruff, "check", *TARGETS]),
        ]
    return [
        *lint,
        ("pytest", [sys.executable, "-m", "pytest", "-q"]),
        ("pyright", [sys.executable, "-m", "pyright"]),
    ]


def run_check(cmd: list[str]) -> tuple[bool, float]:
    """Run one command from the project root and time it."""
    start = time.monotonic()
    result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    return result.returncode == 0, time.monotonic() - start


def main() -> None:
    parser = argparse.ArgumentParser(description="Run imgcdn checks locally.")
    parser.add_argument("--fail-fast", action="store_true", help="Stop on the first failing check.")
    parser.add_argument("--fix", action="store_true", help="Let ruff rewrite files instead of only checking.")
    args = parser.parse_args()

    failed: list[str] = []
    planned = checks(args.fix)
    width = max(len(name) for name, _ in planned)

    for name, cmd in planned:
        print(f"  {_color('1', name.ljust(width))}  ", end="", flush=True)
        passed, elapsed = run_check(cmd)
        status = _color("32", "PASS") if passed else _color("31", "FAIL")
        print(f"{status}  {_color('2', f'({elapsed:.1f}s)')}")
        if not passed:
            failed.append(name)
            if args.fail_fast:
                break

    print()
    if failed:
        print(_color("31", f"Failed: {', '.join(failed)}"))
        sys.exit(1)
    print(_color("32", f"All {len(planned)} checks passed"))


if __name__ == "__main__":
    main()
