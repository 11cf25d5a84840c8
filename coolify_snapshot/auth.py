"""Login flow for the admin interface."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .cards import CARD_SELECTOR
from .errors import AuthenticationError

if TYPE_CHECKING:
    from .session import BrowserSession

logger = logging.getLogger("coolify_snapshot")

EMAIL_SELECTOR = 'input[type="email"], input[name="email"], input[placeholder*="email" i]'
PASSWORD_SELECTOR = 'input[type="password"], input[name="password"]'
SUBMIT_SELECTOR = 'button[type="submit"], button:has-text("Login"), button:has-text("Sign in")'
ACCEPT_BANNER_SELECTOR = 'button:has-text("Accept and Close")'
LOGOUT_FORM_SELECTOR = 'form[action="/logout"]'


async def login(session: "BrowserSession") -> None:
    """Submit the login form and dismiss the consent banner if one appears."""
    config = session.config
    logger.info("Navigating to login page")
    await session.navigate("/")

    await session.fill(EMAIL_SELECTOR, config.email)
    await session.fill(PASSWORD_SELECTOR, config.password)
    await session.click(SUBMIT_SELECTOR)
    await session.wait_for_settled()
    await session.pause(3.0)

    try:
        await session.wait_for_selector(ACCEPT_BANNER_SELECTOR, config.login_banner_timeout)
    except PlaywrightTimeoutError:
        logger.info("No consent banner found, continuing")
        return
    await session.pause(0.5)
    await session.click(ACCEPT_BANNER_SELECTOR)
    await session.pause(1.0)
    logger.info("Dismissed consent banner")


def verify_login(document: BeautifulSoup) -> bool:
    """A logout form or any project card means the dashboard is showing."""
    return bool(document.select_one(LOGOUT_FORM_SELECTOR) or document.select(CARD_SELECTOR))


async def authenticate(session: "BrowserSession") -> None:
    try:
        await login(session)
    except Exception as exc:
        raise AuthenticationError(f"Login failed: {exc}") from exc
    if not verify_login(await session.document()):
        raise AuthenticationError("Login could not be verified: no logout form or project cards found")
    session.authenticated = True
    logger.info("Login successful")
