"""High-level orchestration of a snapshot run."""

from __future__ import annotations

import enum
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .auth import authenticate
from .config import KNOWN_CATEGORIES, SnapshotConfig
from .discovery import discover_projects, discover_resources
from .errors import FatalRunError, NoProjectsError
from .extractors import EXTRACTORS, ConfigExtractor
from .models import ConfigCollection, ConfigOutcome, ExtractionFailure, Project, Resource, ResourceSet, Snapshot
from .session import BrowserSession, open_session
from .storage import SnapshotWriter
from .utils import utc_timestamp

logger = logging.getLogger("coolify_snapshot")

Authenticator = Callable[[BrowserSession], Awaitable[None]]


class Stage(enum.Enum):
    NOT_STARTED = "NotStarted"
    AUTHENTICATED = "Authenticated"
    PROJECTS_DISCOVERED = "ProjectsDiscovered"
    RESOURCES_DISCOVERED = "ResourcesDiscovered"
    CONFIGS_EXTRACTED = "ConfigsExtracted"
    DONE = "Done"


class SnapshotPipeline:
    """Runs login, discovery and extraction over one session, strictly in order."""

    def __init__(
        self,
        session: BrowserSession,
        writer: Optional[SnapshotWriter] = None,
        extractors: Optional[Dict[str, ConfigExtractor]] = None,
        authenticator: Authenticator = authenticate,
    ) -> None:
        self.session = session
        self.writer = writer
        self.extractors = dict(EXTRACTORS if extractors is None else extractors)
        self.authenticator = authenticator
        self.stage = Stage.NOT_STARTED

    async def run(self) -> Snapshot:
        try:
            await self.authenticate()
            projects = await self.discover_projects()
        except FatalRunError:
            await self.session.capture_image("error")
            raise

        snapshot = Snapshot()
        await self.discover_resources(projects, snapshot)
        await self.extract_configs(snapshot)
        self.stage = Stage.DONE
        logger.info("=== COMPLETE FLOW FINISHED ===")
        return snapshot

    async def authenticate(self) -> None:
        logger.info("=== STEP 1: LOGIN ===")
        await self.authenticator(self.session)
        await self.session.capture_image("01-login-success")
        self.stage = Stage.AUTHENTICATED

    async def discover_projects(self) -> List[Project]:
        logger.info("=== STEP 2: SCRAPE PROJECTS ===")
        await self.session.capture_image("02-projects-dashboard")
        projects = await discover_projects(self.session)
        if not projects:
            raise NoProjectsError("No projects found on the dashboard")
        for index, project in enumerate(projects, start=1):
            logger.info("%d. %s (%s)", index, project.title, project.url)
        self._persist(
            {
                "title": await self.session.title(),
                "url": self.session.url,
                "timestamp": utc_timestamp(),
                "projects": [project.to_dict() for project in projects],
            },
            "projects-data",
        )
        self.stage = Stage.PROJECTS_DISCOVERED
        return projects

    async def discover_resources(self, projects: List[Project], snapshot: Snapshot) -> None:
        logger.info("=== STEP 3: SCRAPE RESOURCES ===")
        total = len(projects)
        for index, project in enumerate(projects, start=1):
            logger.info("[%d/%d] Processing: %s", index, total, project.title)
            try:
                resource_set = await discover_resources(self.session, project)
            except Exception as exc:  # noqa: BLE001 - isolate the failing project
                logger.error("Error scraping project %r: %s", project.title, exc)
                snapshot.projects.append(
                    ExtractionFailure(
                        entity_name=project.title,
                        entity_url=project.url,
                        project_name=project.title,
                        error_message=str(exc) or exc.__class__.__name__,
                        entity_description=project.description,
                    )
                )
                continue
            snapshot.projects.append(resource_set)
            logger.info(
                "  Applications: %d, Databases: %d, Services: %d",
                len(resource_set.applications),
                len(resource_set.databases),
                len(resource_set.services),
            )
        self._persist(snapshot.resources_document(), "resources-data")
        self.stage = Stage.RESOURCES_DISCOVERED

    async def extract_configs(self, snapshot: Snapshot) -> None:
        logger.info("=== STEP 4: SCRAPE DETAILED CONFIGURATIONS ===")
        resource_sets = [entry for entry in snapshot.projects if isinstance(entry, ResourceSet)]
        total = len(resource_sets)
        for index, resource_set in enumerate(resource_sets, start=1):
            project = resource_set.project
            logger.info("[%d/%d] Checking resources for: %s", index, total, project.title)
            for category, resources in resource_set.by_category.items():
                extractor = self.extractors.get(category)
                if extractor is None:
                    logger.info("  Skipping %d resource(s) under %r: no extractor", len(resources), category)
                    continue
                logger.info("  %s (%d):", category, len(resources))
                collection = snapshot.configs.setdefault(category, ConfigCollection(category))
                for resource in resources:
                    collection.items.append(await self.extract_one(extractor, resource, project))

        for category in KNOWN_CATEGORIES:
            collection = snapshot.configs[category]
            if collection.items:
                self._persist(collection.to_dict(), f"{collection.entity_key}-configs")
        self.stage = Stage.CONFIGS_EXTRACTED

    async def extract_one(self, extractor: ConfigExtractor, resource: Resource, project: Project) -> ConfigOutcome:
        """Extract one resource; any error becomes a failure record for that resource."""
        try:
            config = await extractor.extract(self.session, resource)
        except Exception as exc:  # noqa: BLE001 - isolate the failing resource
            logger.error("    %s - Error: %s", resource.name, exc)
            return ExtractionFailure(
                entity_name=resource.name,
                entity_url=resource.url,
                project_name=project.title,
                error_message=str(exc) or exc.__class__.__name__,
            )
        config.link(resource, project.title)
        if config.partial:
            logger.warning("    %s - Configuration scraped with gaps", resource.name)
        else:
            logger.info("    %s - Configuration scraped", resource.name)
        return config

    def _persist(self, data: Dict[str, Any], category: str) -> None:
        if self.writer is not None:
            self.writer.write(data, category)


async def run_snapshot(config: SnapshotConfig, save: bool = True) -> Snapshot:
    """Open a browser, run the whole pipeline and close the browser again."""
    writer = SnapshotWriter(config.output_root) if save else None
    async with open_session(config) as session:
        return await SnapshotPipeline(session, writer=writer).run()
