"""Project and resource discovery from the rendered dashboard and project views."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List

from bs4 import BeautifulSoup

from .cards import CARD_SELECTOR, extract_cards
from .models import Project, Resource, ResourceSet
from .sections import parse_sections
from .utils import slugify

if TYPE_CHECKING:
    from .session import BrowserSession

logger = logging.getLogger("coolify_snapshot")


def list_projects(document: BeautifulSoup) -> List[Project]:
    """Every valid card on the dashboard, in document order."""
    return [record.to_project() for record in extract_cards(document.select(CARD_SELECTOR))]


def categorize(document: BeautifulSoup) -> Dict[str, List[Resource]]:
    """Map each section heading to the valid resources listed under it.

    Sections without a valid card are left out. When two sections share a
    heading the later one replaces the earlier.
    """
    by_category: Dict[str, List[Resource]] = {}
    for section in parse_sections(document):
        resources = [record.to_resource(section.heading) for record in extract_cards(section.cards)]
        if resources:
            by_category[section.heading] = resources
    return by_category


async def discover_projects(session: "BrowserSession") -> List[Project]:
    session.ensure_authenticated()
    projects = list_projects(await session.document())
    logger.info("Projects found: %d", len(projects))
    return projects


async def discover_resources(session: "BrowserSession", project: Project) -> ResourceSet:
    session.ensure_authenticated()
    await session.navigate(project.url)
    await session.capture_image(f"03-resources-{slugify(project.title)}")
    by_category = categorize(await session.document())
    return ResourceSet(project=project, by_category=by_category)
