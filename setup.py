"""Build hook writing storecheck/_build_info.py.

pyproject.toml holds the project metadata. This file only swaps in a
build_py command that records the git commit the harness was built from,
which storecheck.version reads back for ``--version`` and the JUnit suite
properties.
"""

import subprocess
import sys
from datetime import UTC, datetime
from pathlib import Path

from setuptools import setup
from setuptools.command.build_py import build_py

PACKAGE = "storecheck"

_TEMPLATE = '''\
"""Generated by setup.py at build time."""

COMMIT_HASH = "{commit}"
COMMIT_SHORT = "{short}"
BUILD_TIME = "{built}"
MODIFIED = {modified}
'''


def _git(*args: str) -> str | None:
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            timeout=5,
            cwd=Path(__file__).parent,
        )
    except (subprocess.SubprocessError, OSError):
        return None
    return result.stdout.strip() if result.returncode == 0 else None


def write_build_info(package_dir: Path) -> bool:
    """Write _build_info.py into package_dir; False outside a git checkout."""
    commit = _git("rev-parse", "HEAD")
    if not commit:
        print(f"{PACKAGE}: no git checkout, build info skipped", file=sys.stderr)
        return False

    content = _TEMPLATE.format(
        commit=commit,
        short=commit[:7],
        built=datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
        modified=bool(_git("status", "--porcelain")),
    )
    (package_dir / "_build_info.py").write_text(content)
    print(f"{PACKAGE}: build info for {commit[:7]}", file=sys.stderr)
    return True


class BuildPyWithBuildInfo(build_py):
    """build_py that adds _build_info.py to the built package, not the source."""

    def run(self):
        super().run()
        package_dir = Path(self.build_lib) / PACKAGE
        if package_dir.is_dir():
            write_build_info(package_dir)


setup(cmdclass={"build_py": BuildPyWithBuildInfo})
