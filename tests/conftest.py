"""Shared pytest fixtures: a document-backed stand-in for the browser session."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import pytest
from bs4 import BeautifulSoup, Tag
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from coolify_snapshot.config import SnapshotConfig
from coolify_snapshot.errors import SessionError
from coolify_snapshot.fields import FieldReading


def make_config(**overrides) -> SnapshotConfig:
    values = {
        "base_url": "https://coolify.example.com",
        "email": "admin@example.com",
        "password": "secret",
        "settle_wait": 0.0,
    }
    values.update(overrides)
    return SnapshotConfig(**values)


def _soup_selector(selector: str) -> str:
    return selector.replace(":has-text(", ":-soup-contains(")


def reading_from_tag(element: Tag) -> FieldReading:
    value: Optional[str] = None
    if element.name == "textarea":
        value = element.get_text()
    elif element.name == "select":
        option = element.find("option", selected=True) or element.find("option")
        if option is not None:
            value = option.get("value", option.get_text())
    elif element.name == "input":
        value = element.get("value", "")
    return FieldReading(
        tag=element.name,
        input_type=element.get("type", "text") if element.name == "input" else None,
        value=value,
        checked=element.has_attr("checked"),
        text=element.get_text(),
    )


class FakeSession:
    """Serves fixture HTML keyed by URL and follows configured click targets."""

    def __init__(
        self,
        pages: Dict[str, str],
        start_url: str = "/",
        clicks: Optional[Dict[str, str]] = None,
        authenticated: bool = True,
        config: Optional[SnapshotConfig] = None,
        failing_urls: Iterable[str] = (),
        failing_fields: Iterable[str] = (),
        escape_target: Optional[str] = None,
    ) -> None:
        self.pages = pages
        self.current = start_url
        self.clicks = clicks or {}
        self.authenticated = authenticated
        self.config = config or make_config()
        self.failing_urls = set(failing_urls)
        self.failing_fields = set(failing_fields)
        self.escape_target = escape_target
        self.visited: List[str] = []
        self.clicked: List[str] = []
        self.filled: Dict[str, str] = {}
        self.pressed: List[str] = []
        self.screenshots: List[str] = []

    def ensure_authenticated(self) -> None:
        if not self.authenticated:
            raise SessionError("Session is not authenticated")

    @property
    def url(self) -> str:
        return self.current

    def _soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.pages[self.current], "html.parser")

    def _select(self, selector: str) -> Sequence[Tag]:
        return self._soup().select(_soup_selector(selector))

    async def title(self) -> str:
        soup = self._soup()
        return soup.title.get_text().strip() if soup.title else ""

    async def navigate(self, url: str) -> None:
        if url in self.failing_urls:
            raise PlaywrightTimeoutError(f"Timeout 30000ms exceeded navigating to {url}")
        if url not in self.pages:
            raise RuntimeError(f"net::ERR_HTTP_RESPONSE_CODE_FAILURE at {url}")
        self.current = url
        self.visited.append(url)

    async def wait_for_settled(self) -> None:
        return None

    async def pause(self, seconds: float) -> None:
        return None

    async def document(self) -> BeautifulSoup:
        return self._soup()

    async def count(self, selector: str) -> int:
        return len(self._select(selector))

    async def click(self, selector: str) -> None:
        if not self._select(selector):
            raise PlaywrightTimeoutError(f"Timeout exceeded waiting for {selector}")
        self.clicked.append(selector)
        if selector in self.clicks:
            self.current = self.clicks[selector]

    async def fill(self, selector: str, value: str) -> None:
        if not self._select(selector):
            raise PlaywrightTimeoutError(f"Timeout exceeded waiting for {selector}")
        self.filled[selector] = value

    async def press(self, key: str) -> None:
        self.pressed.append(key)
        if key == "Escape" and self.escape_target:
            self.current = self.escape_target

    async def click_at(self, x: float, y: float) -> None:
        self.clicked.append(f"@{x},{y}")

    async def wait_for_selector(self, selector: str, timeout: float) -> None:
        if not self._select(selector):
            raise PlaywrightTimeoutError(f"Timeout {int(timeout * 1000)}ms exceeded waiting for {selector}")

    async def read_field(self, selector: str) -> Optional[FieldReading]:
        if selector in self.failing_fields:
            raise RuntimeError("Element is not attached to the DOM")
        matches = self._select(selector)
        if not matches:
            return None
        return reading_from_tag(matches[0])

    async def capture_image(self, name: str):
        self.screenshots.append(name)
        return None


def card(
    name: Optional[str],
    url: Optional[str],
    badge: Optional[str] = None,
    descriptions: Sequence[str] = (),
    tags: Sequence[str] = (),
) -> str:
    """Render a dashboard card the way the admin interface lays it out."""
    parts = []
    if name is not None:
        parts.append(f'<div class="box-title"> {name} </div>')
    parts.extend(f'<div class="box-description">{text}</div>' for text in descriptions)
    if badge is not None:
        parts.append(f'<div class="badge badge-dashboard {badge}"></div>')
    box = f'<div class="coolbox group">{"".join(parts)}</div>'
    linked = f'<a href="{url}">{box}</a>' if url is not None else box
    tag_html = "".join(f'<div class="tag">{tag}</div>' for tag in tags)
    return f"<span>{linked}{tag_html}</span>"


def project_page(sections: Dict[str, Sequence[str]], title: str = "Project") -> str:
    body = "".join(
        f'<h2>{heading}</h2><div class="grid">{"".join(cards)}</div>'
        for heading, cards in sections.items()
    )
    return f"<html><head><title>{title}</title></head><body><div>{body}</div></body></html>"


def dashboard_page(cards: Sequence[str]) -> str:
    return (
        "<html><head><title>Dashboard | Coolify</title></head><body>"
        '<form action="/logout" method="post"><button>Logout</button></form>'
        f'<div class="grid">{"".join(cards)}</div>'
        "</body></html>"
    )


@pytest.fixture
def config() -> SnapshotConfig:
    return make_config()
