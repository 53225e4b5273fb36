"""
Scenario helpers implementing the readiness contract.

Every page-level scenario navigates, waits for the network to settle and
then branches on what the deployment answered:

- 503: the deployment is still starting; logged and the scenario returns
- 200: the scenario goes on to its structural assertions
- anything else: ScenarioError, a test failure

Waits are bounded by the runner settings. Navigation and selector timeouts
fall back to resolving a known UI state before failing.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from ..exceptions import ScenarioError
from . import ui
from .ui import UIState, resolve_state

if TYPE_CHECKING:
    from playwright.sync_api import APIRequestContext, Page

    from .settings import RunnerSettings

LISTING_PATH = "/api/product/list"
LISTING_KEYS = ("products", "totalPages", "currentPage", "count")

# Resolves once at least one product name has rendered text
ITEM_NAMES_READY = """() => {
    const names = document.querySelectorAll('.product-list .item-name');
    return names.length > 0 && names[0].textContent.trim().length > 0;
}"""


class Readiness(enum.Enum):
    READY = "ready"
    STARTING = "starting"


def check_status(status: int | None, target: str = "") -> Readiness:
    """
    Classify a response status.

    Raises:
        ScenarioError: For anything other than 200 or 503
    """
    if status == 503:
        return Readiness.STARTING
    if status == 200:
        return Readiness.READY
    raise ScenarioError("unexpected response", status=status, target=target)


def open_path(
    page: Page, path: str, settings: RunnerSettings, lg: Any = None
) -> Readiness:
    """
    Navigate to path, wait for network idle and classify the response.

    Raises:
        ScenarioError: If there is no response or its status is unexpected
    """
    response = page.goto(
        path, wait_until="networkidle", timeout=settings.navigation_timeout
    )
    if response is None:
        raise ScenarioError("navigation returned no response", path=path)

    readiness = check_status(response.status, path)
    if readiness is Readiness.STARTING and lg is not None:
        lg.warning(
            "deployment still starting",
            extra={"path": path, "status": response.status},
        )
    return readiness


def listing_state(page: Page) -> UIState:
    """Classify the shop page right now: products, empty or loading."""
    return resolve_state(page, ui.SHOP_STATES)


def await_listing(page: Page, settings: RunnerSettings, lg: Any = None) -> UIState:
    """
    Wait for the product list to render at least one named item.

    On timeout, an explicit empty-state message is accepted.

    Returns:
        UIState.PRODUCTS or UIState.EMPTY

    Raises:
        playwright TimeoutError: If neither products nor the empty state show
    """
    try:
        page.wait_for_selector(ui.PRODUCT_LIST, timeout=settings.selector_timeout)
        page.wait_for_function(ITEM_NAMES_READY, timeout=settings.item_timeout)
    except PlaywrightTimeoutError:
        if resolve_state(page, ui.EMPTY_STATES) is UIState.EMPTY:
            if lg is not None:
                lg.info("shop shows no products, store is empty")
            return UIState.EMPTY
        raise
    return UIState.PRODUCTS


def product_names(page: Page) -> list[str]:
    return page.locator(ui.ITEM_NAME).all_text_contents()


def price_count(page: Page) -> int:
    return page.locator(ui.ITEM_PRICE).count()


def login(
    page: Page, credentials: Any, settings: RunnerSettings, lg: Any = None
) -> UIState:
    """
    Submit the login form and classify the outcome.

    Returns:
        UIState.AUTHENTICATED on redirect to the dashboard,
        UIState.LOGIN_ERROR when an inline error shows (unseeded store),
        UIState.UNAVAILABLE when the deployment answered 503

    Raises:
        playwright TimeoutError: For any other outcome
    """
    if open_path(page, "/login", settings, lg) is Readiness.STARTING:
        return UIState.UNAVAILABLE

    page.wait_for_selector(ui.LOGIN_FORM, timeout=settings.navigation_timeout)
    page.locator(ui.EMAIL_INPUT).fill(credentials.email)
    page.locator(ui.PASSWORD_INPUT).fill(credentials.password)
    page.get_by_role("button", name=ui.SIGN_IN).click()

    try:
        page.wait_for_url("**/dashboard", timeout=settings.login_timeout)
    except PlaywrightTimeoutError:
        state = resolve_state(page, ui.LOGIN_STATES)
        if state is UIState.AUTHENTICATED:
            return state
        if state is UIState.LOGIN_ERROR:
            if lg is not None:
                text = page.locator(ui.LOGIN_ALERT).first.text_content() or ""
                lg.warning(
                    "login rejected, store may not be seeded",
                    extra={"email": credentials.email, "error": text.strip()},
                )
            return state
        raise

    if lg is not None:
        lg.info("logged in", extra={"email": credentials.email})
    return UIState.AUTHENTICATED


def fetch_listing(
    request: APIRequestContext, path: str = LISTING_PATH, lg: Any = None
) -> tuple[Readiness, dict[str, Any] | None]:
    """
    Fetch the product listing API and validate its shape.

    Returns:
        (Readiness.STARTING, None) on 503, else (Readiness.READY, body)

    Raises:
        ScenarioError: On an unexpected status or a malformed body
    """
    response = request.get(path)
    readiness = check_status(response.status, path)
    if readiness is Readiness.STARTING:
        if lg is not None:
            lg.warning("api still starting", extra={"path": path})
        return readiness, None

    body = response.json()
    missing = [key for key in LISTING_KEYS if key not in body]
    if missing or not isinstance(body.get("products"), list):
        raise ScenarioError("malformed listing", path=path, missing=",".join(missing))

    if lg is not None:
        lg.debug("api listing", extra={"products": len(body["products"])})
    return readiness, body
