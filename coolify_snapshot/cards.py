"""Extraction of flat records from card elements."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import Tag

from .models import EXITED, RUNNING, UNKNOWN, WARNING, Project, Resource

CARD_SELECTOR = ".coolbox.group"
TITLE_SELECTOR = ".box-title"
DESCRIPTION_SELECTOR = ".box-description"
BADGE_SELECTOR = ".badge-dashboard"
TAG_SELECTOR = ".tag"

BADGE_STATUSES = (
    ("bg-success", RUNNING),
    ("bg-error", EXITED),
    ("bg-warning", WARNING),
)


@dataclass
class CardRecord:
    """Fields read from a single card."""

    name: str
    url: str
    description: Optional[str] = None
    fqdn: Optional[str] = None
    status: str = UNKNOWN
    tags: List[str] = field(default_factory=list)

    def to_resource(self, category: str) -> Resource:
        return Resource(
            name=self.name,
            url=self.url,
            category=category,
            description=self.description,
            fqdn=self.fqdn,
            status=self.status,
            tags=list(self.tags),
        )

    def to_project(self) -> Project:
        return Project(title=self.name, url=self.url, description=self.description)


def _closest(element: Tag, name: str) -> Optional[Tag]:
    if element.name == name:
        return element
    return element.find_parent(name)


def card_link(card: Tag) -> Optional[str]:
    """Return the href of the enclosing link, or of a link nested in the card."""
    link = _closest(card, "a")
    if link is None:
        link = card.find("a", href=True)
    if link is None:
        return None
    href = link.get("href")
    return href or None


def classify_status(card: Tag) -> str:
    badge = card.select_one(BADGE_SELECTOR)
    if badge is None:
        return UNKNOWN
    classes = badge.get("class") or []
    for css_class, status in BADGE_STATUSES:
        if css_class in classes:
            return status
    return UNKNOWN


def card_tags(card: Tag) -> List[str]:
    """Collect tag labels from the nearest enclosing ``span``."""
    container = _closest(card, "span")
    if container is None:
        return []
    labels = (tag.get_text().strip() for tag in container.select(TAG_SELECTOR))
    return [label for label in labels if label]


def extract_card(card: Tag) -> Optional[CardRecord]:
    """Read a card; returns None when the card has no title or no link."""
    title = card.select_one(TITLE_SELECTOR)
    name = title.get_text().strip() if title is not None else ""
    url = card_link(card)
    if not name or not url:
        return None

    descriptions = card.select(DESCRIPTION_SELECTOR)
    description = descriptions[0].get_text().strip() if descriptions else None
    fqdn = descriptions[1].get_text().strip() if len(descriptions) > 1 else None

    return CardRecord(
        name=name,
        url=url,
        description=description,
        fqdn=fqdn,
        status=classify_status(card),
        tags=card_tags(card),
    )


def extract_cards(cards: List[Tag]) -> List[CardRecord]:
    records = (extract_card(card) for card in cards)
    return [record for record in records if record is not None]
