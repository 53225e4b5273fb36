"""
Fixtures for the browser-driven scenarios.

Runner settings come from the ``runner`` config section. The browser,
context and page fixtures of pytest-playwright are narrowed to them, and
every scenario gets the retry and ceiling markers.
"""

from collections.abc import Generator

import pytest

from storecheck.config import load_config
from storecheck.e2e import ProbeResult, RunnerSettings, probe, require_ready
from storecheck.exceptions import DeploymentNotReady
from storecheck.log import LoggerFactory


def pytest_collection_modifyitems(config, items):
    """Apply the configured retry and timeout markers to every scenario."""
    markers = RunnerSettings.from_config(load_config().runner).markers()
    for item in items:
        if item.get_closest_marker("e2e") is None:
            continue
        for marker in markers:
            if item.get_closest_marker(marker.name) is None:
                item.add_marker(marker)


@pytest.fixture(scope="session")
def runner_settings(storecheck_config) -> RunnerSettings:
    return RunnerSettings.from_config(storecheck_config.runner)


@pytest.fixture(scope="session")
def base_url(request, runner_settings) -> str:
    """``--base-url`` when given, else the configured deployment."""
    return request.config.getoption("base_url", None) or runner_settings.base_url


@pytest.fixture(scope="session")
def e2e_lg(storecheck_logger):
    return LoggerFactory.derive(storecheck_logger, "e2e")


@pytest.fixture(scope="session")
def browser_type_launch_args(browser_type_launch_args, runner_settings):
    launch = {**browser_type_launch_args, **runner_settings.launch_args()}
    # Headed when either --headed or runner.headless=false asks for it
    launch["headless"] = browser_type_launch_args.get("headless", True) and (
        runner_settings.headless
    )
    return launch


@pytest.fixture(scope="session")
def browser_context_args(browser_context_args, runner_settings, base_url):
    return {
        **browser_context_args,
        **runner_settings.context_args(),
        "base_url": base_url,
    }


@pytest.fixture
def page(page, runner_settings):
    """The pytest-playwright page with the configured wait ceilings."""
    page.set_default_timeout(runner_settings.selector_timeout)
    page.set_default_navigation_timeout(runner_settings.navigation_timeout)
    return page


@pytest.fixture(scope="session")
def deployment(base_url, runner_settings, e2e_lg) -> ProbeResult:
    result = probe(base_url, timeout=runner_settings.probe_timeout)
    e2e_lg.info(
        "probed deployment",
        extra={"status": result.status.value, "url": result.url},
    )
    return result


@pytest.fixture(autouse=True)
def _require_deployment(deployment) -> Generator[None, None, None]:
    """Skip scenarios when the deployment cannot be reached at all."""
    try:
        require_ready(deployment, allow_starting=True)
    except DeploymentNotReady as e:
        pytest.skip(str(e))
    yield
