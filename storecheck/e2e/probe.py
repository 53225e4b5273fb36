"""
Deployment readiness probe.

Classifies the deployment under test before any browser is launched:

- UNREACHABLE: connection refused, DNS failure or timeout
- STARTING: the deployment answered 503
- UP: any other answer
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

import requests

from ..exceptions import DeploymentNotReady


class ProbeStatus(enum.Enum):
    UP = "up"
    STARTING = "starting"
    UNREACHABLE = "unreachable"


# Command line exit codes per status
EXIT_CODES = {
    ProbeStatus.UP: 0,
    ProbeStatus.UNREACHABLE: 1,
    ProbeStatus.STARTING: 2,
}


@dataclass(frozen=True)
class ProbeResult:
    status: ProbeStatus
    url: str
    http_status: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is ProbeStatus.UP

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.status]


def probe(
    base_url: str,
    path: str = "/",
    timeout: float = 5.0,
    session: Any = None,
) -> ProbeResult:
    """
    Issue one GET against the deployment and classify the outcome.

    Args:
        base_url: Deployment root, e.g. http://localhost:8080
        path: Path to request
        timeout: Connect/read timeout in seconds
        session: Optional requests.Session (or anything with ``get``)

    Returns:
        ProbeResult; never raises for network failures
    """
    url = base_url.rstrip("/") + "/" + path.lstrip("/")
    getter = session if session is not None else requests
    try:
        response = getter.get(url, timeout=timeout)
    except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
        return ProbeResult(ProbeStatus.UNREACHABLE, url, error=str(e))

    if response.status_code == 503:
        return ProbeResult(ProbeStatus.STARTING, url, http_status=503)
    return ProbeResult(ProbeStatus.UP, url, http_status=response.status_code)


def require_ready(result: ProbeResult, allow_starting: bool = False) -> ProbeResult:
    """
    Raise unless the deployment is up.

    Args:
        result: Outcome of probe()
        allow_starting: Accept a deployment answering 503; scenarios then
            handle the starting state page by page

    Raises:
        DeploymentNotReady: For UNREACHABLE results, and STARTING ones unless
            allow_starting is set
    """
    if result.status is ProbeStatus.STARTING and allow_starting:
        return result
    if not result.ok:
        raise DeploymentNotReady(
            "deployment not ready",
            status=result.status.value,
            url=result.url,
            error=result.error or result.http_status,
        )
    return result
