"""
Browser-driven scenario runner.

Runner settings, readiness probing and the scenario helpers used by the
page-level suite under tests/e2e.
"""

from .probe import ProbeResult, ProbeStatus, probe, require_ready
from .scenario import (
    LISTING_PATH,
    Readiness,
    await_listing,
    check_status,
    fetch_listing,
    listing_state,
    login,
    open_path,
    price_count,
    product_names,
)
from .settings import Reports, RunnerSettings
from .ui import StateProbe, UIState, resolve_state

__all__ = [
    # Settings
    "Reports",
    "RunnerSettings",
    # Probe
    "ProbeResult",
    "ProbeStatus",
    "probe",
    "require_ready",
    # UI states
    "StateProbe",
    "UIState",
    "resolve_state",
    # Scenarios
    "LISTING_PATH",
    "Readiness",
    "await_listing",
    "check_status",
    "fetch_listing",
    "listing_state",
    "login",
    "open_path",
    "price_count",
    "product_names",
]
