"""
Known UI states and their resolution.

Each page declares a small table of StateProbe entries; resolve_state()
returns the first state whose selector is visible (or whose URL pattern
matches), or UIState.UNKNOWN.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from playwright.sync_api import Page


class UIState(enum.Enum):
    PRODUCTS = "products"
    EMPTY = "empty"
    LOADING = "loading"
    LOGIN_FORM = "login-form"
    AUTHENTICATED = "authenticated"
    LOGIN_ERROR = "login-error"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class StateProbe:
    """A state and how to recognise it: a visible selector or a URL pattern."""

    state: UIState
    selector: str | None = None
    url: str | None = None

    def __post_init__(self) -> None:
        if self.selector is None and self.url is None:
            raise ValueError("StateProbe needs a selector or a url pattern")

    def matches(self, page: Page) -> bool:
        if self.url is not None and re.search(self.url, page.url):
            return True
        if self.selector is not None:
            return page.locator(self.selector).first.is_visible()
        return False


def resolve_state(page: Page, probes: Iterable[StateProbe]) -> UIState:
    """Return the first state whose probe matches the page, else UNKNOWN."""
    for probe in probes:
        if probe.matches(page):
            return probe.state
    return UIState.UNKNOWN


# Selectors of the storefront's client-side UI
PRODUCT_LIST = ".product-list"
ITEM_NAME = ".product-list .item-name"
ITEM_PRICE = ".product-list .price"
EMPTY_MESSAGE = "text=No products found"
LOADING = '.loading, .spinner, [data-testid="loading"]'
LANDMARK = "body, main, #root, .app"
LOGIN_FORM = ".login-form"
EMAIL_INPUT = '.login-form input[name="email"]'
PASSWORD_INPUT = '.login-form input[name="password"]'
SIGN_IN = "Sign In"
LOGIN_ALERT = ".alert, .error, .notification"
DASHBOARD_URL = r"/dashboard/?$"

TITLE_PATTERN = re.compile(r"RMIT Store|Home|React|Ecommerce|Store", re.IGNORECASE)

SHOP_STATES = (
    StateProbe(UIState.PRODUCTS, selector=ITEM_NAME),
    StateProbe(UIState.EMPTY, selector=EMPTY_MESSAGE),
    StateProbe(UIState.LOADING, selector=LOADING),
)

EMPTY_STATES = (StateProbe(UIState.EMPTY, selector=EMPTY_MESSAGE),)

LOGIN_STATES = (
    StateProbe(UIState.AUTHENTICATED, url=DASHBOARD_URL),
    StateProbe(UIState.LOGIN_ERROR, selector=LOGIN_ALERT),
    StateProbe(UIState.LOGIN_FORM, selector=LOGIN_FORM),
)
