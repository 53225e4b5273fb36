"""Smoke scenarios: homepage, product API and shop page."""

import re

import pytest

from storecheck.e2e import Readiness, UIState, fetch_listing, listing_state, open_path
from storecheck.e2e import ui

pytestmark = pytest.mark.e2e


def test_homepage_loads(page, runner_settings, e2e_lg):
    if open_path(page, "/", runner_settings, e2e_lg) is Readiness.STARTING:
        return

    title = page.title()
    if not ui.TITLE_PATTERN.search(title):
        e2e_lg.warning("unexpected page title", extra={"title": title})

    assert page.locator(ui.LANDMARK).first.is_visible()


def test_api_health_check(page, e2e_lg):
    readiness, body = fetch_listing(page.request, lg=e2e_lg)
    if readiness is Readiness.STARTING:
        return

    assert isinstance(body["products"], list)
    assert body["count"] >= len(body["products"])


def test_shop_page_renders(page, runner_settings, e2e_lg):
    if open_path(page, "/shop", runner_settings, e2e_lg) is Readiness.STARTING:
        return

    assert re.search(r"/shop/?$", page.url)
    page.wait_for_timeout(runner_settings.settle_time)

    state = listing_state(page)
    if state is UIState.UNKNOWN:
        preview = (page.locator("body").text_content() or "")[:500]
        e2e_lg.warning("shop page in unknown state", extra={"preview": preview})

    assert state in (UIState.PRODUCTS, UIState.EMPTY, UIState.LOADING)
    e2e_lg.info("shop page state", extra={"state": state.value})


def test_deployment_diagnostics(page, deployment, runner_settings, e2e_lg):
    """Log what each entry point answers; only the readiness contract fails."""
    e2e_lg.info(
        "deployment",
        extra={"status": deployment.status.value, "http": deployment.http_status},
    )
    if open_path(page, "/", runner_settings, e2e_lg) is Readiness.STARTING:
        preview = (page.locator("body").text_content() or "")[:500]
        e2e_lg.warning("deployment starting", extra={"preview": preview})
        return

    for path in ("/login", "/shop"):
        readiness = open_path(page, path, runner_settings, e2e_lg)
        e2e_lg.info(path, extra={"readiness": readiness.value, "title": page.title()})
