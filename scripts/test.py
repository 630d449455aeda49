#!/usr/bin/env -S uv run --script
#
# /// script
# requires-python = ">=3.11"
# dependencies = []
# ///
"""Run unit, engine and integration tests.

Usage:
    uv run scripts/test.py
    uv run scripts/test.py --unit-only
    uv run scripts/test.py --docker          # integration against a Postgres container
    uv run scripts/test.py --db postgresql+psycopg://user@localhost/fitmemory_test
"""
import argparse
import os
import shutil
import subprocess
import sys


def run(cmd: list[str], **kwargs) -> subprocess.CompletedProcess:
    return subprocess.run(cmd, **kwargs)


def main():
    parser = argparse.ArgumentParser(description="fitmemory test runner")
    parser.add_argument("--unit-only", action="store_true", help="Skip integration tests")
    parser.add_argument("--docker", action="store_true", help="Run integration tests in a testcontainers Postgres")
    parser.add_argument("--db", default=None, help="SQLAlchemy URL for integration tests")
    args = parser.parse_args()

    if args.docker and not shutil.which("docker"):
        print("ERROR: docker not found. Drop --docker to use SQLite.", file=sys.stderr)
        sys.exit(1)

    print("=== fitmemory test runner ===\n")

    print("── Unit + engine tests ──")
    result = run(["uv", "run", "--extra", "dev", "pytest", "tests/test_unit.py", "tests/test_engine.py", "-v"])
    if result.returncode != 0:
        sys.exit(result.returncode)

    if args.unit_only:
        print("\n=== Unit tests passed ===")
        sys.exit(0)

    env = dict(os.environ)
    cmd = ["uv", "run", "--extra", "dev"]
    if args.db:
        env["FITMEMORY_TEST_URL"] = args.db
        target = args.db
    elif args.docker:
        env["FITMEMORY_TEST_DOCKER"] = "1"
        target = "postgres container"
    else:
        target = "sqlite://"
    if args.db or args.docker:
        cmd += ["--extra", "postgres"]

    print(f"\n── Integration tests ({target}) ──")
    result = run(cmd + ["pytest", "tests/test_integration.py", "-v"], env=env)
    if result.returncode != 0:
        sys.exit(result.returncode)

    print("\n=== All tests passed ===")


if __name__ == "__main__":
    main()
