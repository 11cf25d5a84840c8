"""Environment variable view shared by every configuration extractor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .fields import wire_model
from .models import ResourceConfig
from .utils import slugify, split_lines

if TYPE_CHECKING:
    from .session import BrowserSession

logger = logging.getLogger("coolify_snapshot")

ENV_MENU_SELECTOR = 'a.menu-item[href*="/environment-variables"]'
DEVELOPER_VIEW_SELECTOR = 'button:has-text("Developer view")'
VARIABLES_SELECTOR = wire_model("textarea", "variables")

MENU_NOT_FOUND = "Environment Variables menu not found"
DEVELOPER_VIEW_NOT_FOUND = "Developer view button not found"


@dataclass
class EnvironmentResult:
    """Outcome of reading the variables view: a payload, a note, or an error."""

    payload: Optional[str] = None
    note: Optional[str] = None
    error: Optional[str] = None

    def apply(self, config: ResourceConfig, as_lines: bool = False) -> None:
        config.environment_variables = split_lines(self.payload) if as_lines else self.payload
        config.environment_variables_note = self.note
        config.environment_variables_error = self.error


async def read_environment_variables(
    session: "BrowserSession", screenshot_name: Optional[str] = None
) -> EnvironmentResult:
    """Open the variables view in developer mode and read the raw payload.

    Never raises: a missing menu entry or mode button is reported as a note,
    anything else (including the bounded wait timing out) as an error.
    """
    try:
        if await session.count(ENV_MENU_SELECTOR) == 0:
            return EnvironmentResult(note=MENU_NOT_FOUND)
        await session.click(ENV_MENU_SELECTOR)
        await session.wait_for_settled()

        if await session.count(DEVELOPER_VIEW_SELECTOR) == 0:
            return EnvironmentResult(note=DEVELOPER_VIEW_NOT_FOUND)
        await session.click(DEVELOPER_VIEW_SELECTOR)

        await session.wait_for_selector(VARIABLES_SELECTOR, session.config.env_wait_timeout)
        await session.pause(0.5)
        if screenshot_name:
            await session.capture_image(f"env-vars-{slugify(screenshot_name)}")

        reading = await session.read_field(VARIABLES_SELECTOR)
        return EnvironmentResult(payload=reading.value if reading is not None else None)
    except Exception as exc:  # noqa: BLE001 - the config is kept without variables
        logger.warning("Could not read environment variables at %s: %s", session.url, exc)
        return EnvironmentResult(error=str(exc) or exc.__class__.__name__)
