#!/usr/bin/env python
"""
run_tests.py: run the pywaveform test suites one after another.

Suites are the tests/ sub-directories listed in SUITE_DIRS plus the
top-level tests/test_*.py files. GUI suites run in their own pytest
process so Qt state never leaks into the pure core suites.

Usage:
    python run_tests.py                   # run all suites
    python run_tests.py --suite plots     # run one suite by name
    python run_tests.py --failfast -v     # stop on first failure, verbose pytest
"""

import argparse
import subprocess
import sys
import time
from pathlib import Path

REPO_ROOT = Path(__file__).parent.resolve()
TESTS_DIR = REPO_ROOT / "tests"

# Execution order
SUITE_DIRS = ["core", "plots", "gui"]

GREEN = "\033[32m"
RED = "\033[31m"
BOLD = "\033[1m"
RESET = "\033[0m"


def discover_suites(tests_dir: Path) -> dict[str, list[Path]]:
    """Return {suite_name: [test_file, ...]} in execution order."""
    suites: dict[str, list[Path]] = {}
    for sub in SUITE_DIRS:
        files = sorted((tests_dir / sub).glob("test_*.py"))
        if files:
            suites[sub] = files

    top = sorted(tests_dir.glob("test_*.py"))
    if top:
        suites["top-level"] = top
    return suites


def run_suite(files: list[Path], extra_args: list[str], failfast: bool) -> tuple[int, float]:
    """Run pytest on ``files``; return (returncode, elapsed_seconds)."""
    cmd = [sys.executable, "-m", "pytest", *map(str, files), *extra_args]
    if failfast:
        cmd.append("-x")

    t0 = time.perf_counter()
    result = subprocess.run(cmd, cwd=REPO_ROOT)
    return result.returncode, time.perf_counter() - t0


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the pywaveform test suites.")
    parser.add_argument("--suite", metavar="NAME",
                        help=f"Run only the named suite ({' | '.join(SUITE_DIRS)} | top-level).")
    parser.add_argument("--failfast", action="store_true", help="Stop after the first failing suite.")
    parser.add_argument("pytest_args", nargs=argparse.REMAINDER,
                        help="Extra arguments forwarded verbatim to pytest.")
    args = parser.parse_args()

    suites = discover_suites(TESTS_DIR)
    if args.suite:
        if args.suite not in suites:
            print(f"{RED}Unknown suite '{args.suite}'. Available: {', '.join(suites)}{RESET}")
            return 1
        suites = {args.suite: suites[args.suite]}

    results = []
    for name, files in suites.items():
        print(f"\n{BOLD}== Suite: {name} ({len(files)} file(s)) =={RESET}\n")
        rc, elapsed = run_suite(files, args.pytest_args, args.failfast)
        results.append((name, rc, elapsed))
        if rc != 0 and args.failfast:
            break

    print(f"\n{BOLD}== Results =={RESET}")
    for name, rc, elapsed in results:
        label = f"{GREEN}PASSED{RESET}" if rc == 0 else f"{RED}FAILED{RESET}"
        print(f"  {name:<12}  {label}  ({elapsed:.1f}s)")

    return max((rc for _, rc, _ in results), default=0)


if __name__ == "__main__":
    sys.exit(main())
