"""
Harness version and build information.

``_build_info.py`` is generated by setup.py during builds from a git
checkout; in a plain source tree it is absent and only the package version
is known.
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version

DIST_NAME = "storecheck"


def package_version() -> str:
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        # Not installed, running from a source tree
        return "0.1.0-dev"


@dataclass(frozen=True)
class BuildInfo:
    version: str
    commit: str | None = None
    commit_short: str | None = None
    build_time: str | None = None
    modified: bool = False

    def __str__(self) -> str:
        if self.commit_short is None:
            return self.version
        dirty = "+modified" if self.modified else ""
        return f"{self.version} ({self.commit_short}{dirty})"

    def properties(self) -> dict[str, str]:
        """Report properties (JUnit suite properties, HTML metadata)."""
        props = {"storecheck_version": self.version}
        if self.commit is not None:
            props["storecheck_commit"] = self.commit
        if self.build_time is not None:
            props["storecheck_build_time"] = self.build_time
        return props


def build_info() -> BuildInfo:
    """Collect the package version and, when generated, the build commit."""
    try:
        from . import _build_info  # type: ignore[attr-defined]
    except ImportError:
        return BuildInfo(package_version())

    return BuildInfo(
        version=package_version(),
        commit=getattr(_build_info, "COMMIT_HASH", "") or None,
        commit_short=getattr(_build_info, "COMMIT_SHORT", "") or None,
        build_time=getattr(_build_info, "BUILD_TIME", "") or None,
        modified=bool(getattr(_build_info, "MODIFIED", False)),
    )
