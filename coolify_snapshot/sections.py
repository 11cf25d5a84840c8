"""Heading-delimited section parsing for rendered project views.

A project view lists its resources as a sequence of ``h2`` headings, each
followed (somewhere among its next siblings) by a ``div.grid`` holding the
resource cards. Headings are the only ordering signal in the document, so
a heading owns the first grid that appears after it and before the next
heading. A heading reached by another heading first owns nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from bs4 import BeautifulSoup, Tag

from .cards import CARD_SELECTOR

TagPredicate = Callable[[Tag], bool]


def is_heading(element: Tag) -> bool:
    return element.name == "h2"


def is_card_group(element: Tag) -> bool:
    return element.name == "div" and "grid" in (element.get("class") or [])


@dataclass
class Section:
    """A heading with the raw cards of the first card group that follows it."""

    heading: str
    cards: List[Tag]


def find_card_group(
    heading: Tag,
    heading_predicate: TagPredicate = is_heading,
    group_predicate: TagPredicate = is_card_group,
) -> Optional[Tag]:
    """Walk forward from a heading until a card group or the next heading."""
    for sibling in heading.find_next_siblings():
        if group_predicate(sibling):
            return sibling
        if heading_predicate(sibling):
            return None
    return None


def parse_sections(
    document: BeautifulSoup,
    heading_predicate: TagPredicate = is_heading,
    group_predicate: TagPredicate = is_card_group,
    card_selector: str = CARD_SELECTOR,
) -> List[Section]:
    """Return every heading that owns a card group, in document order."""
    sections: List[Section] = []
    for heading in document.find_all(heading_predicate):
        group = find_card_group(heading, heading_predicate, group_predicate)
        if group is None:
            continue
        sections.append(Section(heading=heading.get_text().strip(), cards=group.select(card_selector)))
    return sections
