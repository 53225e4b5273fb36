"""
Browser-driven scenario runner settings.

RunnerSettings is the declarative configuration surface of the scenario
suite: target, browser, ceilings, retry, capture and reporting. It is
translated into pytest / pytest-playwright / pytest-html command lines and
into the markers applied to every collected scenario.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import pytest


@dataclass(frozen=True)
class Reports:
    """Report destinations."""

    html: str = "playwright-report/index.html"
    junit: str = "playwright-report/results.xml"
    server_junit: str = "reports/junit/py-test-results.xml"
    artifacts: str = "test-results"


@dataclass(frozen=True)
class RunnerSettings:
    """
    Immutable scenario runner configuration.

    Timeouts ending in ``_timeout`` are Playwright waits in milliseconds;
    ``timeout`` is the per-test ceiling in seconds.
    """

    base_url: str = "http://localhost:8080"
    headless: bool = True
    browser: str = "chromium"
    timeout: int = 90
    retries: int = 1
    video: str = "retain-on-failure"
    screenshot: str = "only-on-failure"
    workers: int = 1
    navigation_timeout: int = 30_000
    selector_timeout: int = 10_000
    item_timeout: int = 30_000
    login_timeout: int = 15_000
    settle_time: int = 3_000
    probe_timeout: float = 5.0
    tests: str = "tests/e2e"
    server_tests: str = "tests/integration"
    reports: Reports = field(default_factory=Reports)

    @classmethod
    def from_config(cls, section: Any) -> RunnerSettings:
        """
        Create settings from the ``runner`` section of the harness config.

        Example:
            cfg = load_config()
            settings = RunnerSettings.from_config(cfg.runner)
        """
        if hasattr(section, "model_dump"):
            values = section.model_dump()
        else:
            values = dict(section)
        reports = values.pop("reports", None) or {}
        known = set(cls.__dataclass_fields__) - {"reports"}
        return cls(
            reports=Reports(**reports),
            **{k: v for k, v in values.items() if k in known},
        )

    def pytest_args(self, extra: Sequence[str] = ()) -> list[str]:
        """
        Command line running the scenario suite.

        Produces a list report on the console (``-v``), a browsable HTML
        report and a JUnit XML file for CI ingestion.
        """
        args = [
            self.tests,
            "-v",
            "-m",
            "e2e",
            "--base-url",
            self.base_url,
            "--browser",
            self.browser,
            "--video",
            self.video,
            "--screenshot",
            self.screenshot,
            "--output",
            self.reports.artifacts,
            "--reruns",
            str(self.retries),
            "--timeout",
            str(self.timeout),
            f"--html={self.reports.html}",
            "--self-contained-html",
            f"--junitxml={self.reports.junit}",
        ]
        if not self.headless:
            args.append("--headed")
        if self.workers > 1:
            args += ["-n", str(self.workers)]
        return args + list(extra)

    def server_pytest_args(self, extra: Sequence[str] = ()) -> list[str]:
        """Command line running the server-side suite with its JUnit report."""
        return [
            self.server_tests,
            "-v",
            f"--junitxml={self.reports.server_junit}",
        ] + list(extra)

    def markers(self) -> list[pytest.MarkDecorator]:
        """Retry and ceiling markers applied to every collected scenario."""
        return [
            pytest.mark.flaky(reruns=self.retries),
            pytest.mark.timeout(self.timeout),
        ]

    def context_args(self) -> dict[str, Any]:
        """Browser context arguments for pytest-playwright."""
        return {
            "base_url": self.base_url,
            "viewport": {"width": 1280, "height": 720},
            "ignore_https_errors": True,
        }

    def launch_args(self) -> dict[str, Any]:
        """Browser launch arguments for pytest-playwright."""
        return {
            "headless": self.headless,
            "args": ["--no-sandbox"],
        }
