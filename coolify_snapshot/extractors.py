"""Per-category configuration extractors for resource detail views."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional, Sequence, Type

from .config import APPLICATIONS, DATABASES, SERVICES
from .environment import read_environment_variables
from .errors import ExtractionError
from .fields import FieldKind, FieldSpec, field_spec, read_fields, wire_model
from .models import ApplicationConfig, DatabaseConfig, Resource, ResourceConfig, ServiceConfig
from .utils import slugify, split_lines

if TYPE_CHECKING:
    from .session import BrowserSession

logger = logging.getLogger("coolify_snapshot")

CHECKBOX = FieldKind.CHECKBOX
SELECT = FieldKind.SELECT
MULTILINE = FieldKind.MULTILINE

APPLICATION_FIELDS = (
    field_spec("general", "name", wire_model("input", "name")),
    field_spec("general", "description", wire_model("input", "description")),
    field_spec("general", "buildPack", wire_model("select", "buildPack", "live"), kind=SELECT),
    field_spec("general", "domains", wire_model("input", "fqdn")),
    field_spec("general", "redirect", wire_model("select", "redirect"), kind=SELECT),
    field_spec("docker", "registryImageName", wire_model("input", "dockerRegistryImageName")),
    field_spec("docker", "registryImageTag", wire_model("input", "dockerRegistryImageTag")),
    field_spec(
        "docker",
        "customLabels",
        wire_model("textarea", "customLabels"),
        wire_model("", "customLabels"),
        kind=MULTILINE,
    ),
    field_spec(
        "docker",
        "isContainerLabelReadonlyEnabled",
        wire_model("input", "isContainerLabelReadonlyEnabled"),
        kind=CHECKBOX,
    ),
    field_spec(
        "docker",
        "isContainerLabelEscapeEnabled",
        wire_model("input", "isContainerLabelEscapeEnabled"),
        kind=CHECKBOX,
    ),
    field_spec("build", "baseDirectory", wire_model("input", "baseDirectory", "defer")),
    field_spec("build", "dockerfileLocation", wire_model("input", "dockerfileLocation", "defer")),
    field_spec("build", "dockerfileTargetBuild", wire_model("input", "dockerfileTargetBuild")),
    field_spec("build", "watchPaths", wire_model("textarea", "watchPaths"), kind=MULTILINE),
    field_spec("build", "customDockerRunOptions", wire_model("input", "customDockerRunOptions")),
    field_spec("build", "isBuildServerEnabled", wire_model("input", "isBuildServerEnabled"), kind=CHECKBOX),
    field_spec("network", "portsExposes", wire_model("input", "portsExposes")),
    field_spec("network", "portsMappings", wire_model("input", "portsMappings")),
    field_spec("network", "customNetworkAliases", wire_model("input", "customNetworkAliases")),
    field_spec("network", "isHttpBasicAuthEnabled", wire_model("input", "isHttpBasicAuthEnabled"), kind=CHECKBOX),
    field_spec("deployment", "preDeploymentCommand", wire_model("input", "preDeploymentCommand")),
    field_spec("deployment", "postDeploymentCommand", wire_model("input", "postDeploymentCommand")),
)

DATABASE_FIELDS = (
    field_spec("general", "name", wire_model("input", "name")),
    field_spec("general", "description", wire_model("input", "description")),
    field_spec("general", "image", wire_model("input", "image")),
    field_spec("general", "initialUsername", wire_model("input", "mongoInitdbRootUsername")),
    field_spec("general", "initialPassword", wire_model("input", "mongoInitdbRootPassword")),
    field_spec("general", "initialDatabase", wire_model("input", "mongoInitdbDatabase")),
    field_spec("general", "customDockerRunOptions", wire_model("input", "customDockerRunOptions")),
    field_spec("network", "portsMappings", wire_model("input", "portsMappings")),
    field_spec("network", "dbUrlInternal", wire_model("input", "db_url")),
    field_spec("network", "dbUrlPublic", wire_model("input", "db_url_public")),
    field_spec("network", "isPublic", wire_model("input", "isPublic"), kind=CHECKBOX),
    field_spec("network", "publicPort", wire_model("input", "publicPort")),
    field_spec("advanced", "enableSsl", wire_model("input", "enableSsl"), kind=CHECKBOX),
    field_spec("advanced", "customMongoConfig", wire_model("textarea", "mongoConf"), kind=MULTILINE),
    field_spec("advanced", "isLogDrainEnabled", wire_model("input", "isLogDrainEnabled"), kind=CHECKBOX),
)

EDIT_COMPOSE_SELECTOR = 'button:has-text("Edit Compose File")'
COMPOSE_MODAL_SELECTOR = 'h3:has-text("Edit Docker Compose")'
COMPOSE_TEXT_SELECTOR = wire_model("textarea", "dockerComposeRaw")
EDIT_COMPOSE_NOT_FOUND = "Edit Compose File button not found"


class ConfigExtractor:
    """Reads a resource's detail view into a category-specific config.

    A failure to load the detail view raises :class:`ExtractionError`; every
    later step degrades the returned config instead of raising.
    """

    config_class: Type[ResourceConfig] = ResourceConfig
    fields: Sequence[FieldSpec] = ()
    environment_as_lines = False

    def __init__(self, category: str, screenshot_prefix: str) -> None:
        self.category = category
        self.screenshot_prefix = screenshot_prefix

    async def extract(self, session: "BrowserSession", resource: Resource) -> ResourceConfig:
        await self.load(session, resource)
        config = self.config_class(title=await session.title(), url=session.url)
        await self.read_primary(session, config)
        environment = await read_environment_variables(session, screenshot_name=resource.name)
        environment.apply(config, as_lines=self.environment_as_lines)
        return config

    async def load(self, session: "BrowserSession", resource: Resource) -> None:
        try:
            await session.navigate(resource.url)
        except Exception as exc:
            raise ExtractionError(f"Failed to load {resource.url}: {exc}") from exc
        await session.capture_image(f"04-{self.screenshot_prefix}-config-{slugify(resource.name)}")

    async def read_primary(self, session: "BrowserSession", config: ResourceConfig) -> None:
        sections, notes = await read_fields(session, self.fields)
        config.sections = sections
        config.notes.extend(notes)


class ApplicationExtractor(ConfigExtractor):
    config_class = ApplicationConfig
    fields = APPLICATION_FIELDS


class DatabaseExtractor(ConfigExtractor):
    config_class = DatabaseConfig
    fields = DATABASE_FIELDS


class ServiceExtractor(ConfigExtractor):
    """Services have no form; their definition lives in the compose editor modal."""

    config_class = ServiceConfig
    environment_as_lines = True

    async def read_primary(self, session: "BrowserSession", config: ResourceConfig) -> None:
        assert isinstance(config, ServiceConfig)
        try:
            if await session.count(EDIT_COMPOSE_SELECTOR) == 0:
                config.docker_compose_note = EDIT_COMPOSE_NOT_FOUND
                return
            await session.click(EDIT_COMPOSE_SELECTOR)
            await session.wait_for_selector(COMPOSE_MODAL_SELECTOR, session.config.modal_timeout)
            await session.pause(0.5)

            reading = await session.read_field(COMPOSE_TEXT_SELECTOR)
            config.docker_compose = split_lines(reading.value if reading is not None else None)
            await session.capture_image(f"service-compose-modal-{slugify(config.title or 'service')}")

            await dismiss_modal(session)
            await session.wait_for_settled()
        except Exception as exc:  # noqa: BLE001 - keep whatever was read
            logger.warning("Could not read compose file at %s: %s", session.url, exc)
            config.docker_compose_error = str(exc) or exc.__class__.__name__


async def dismiss_modal(session: "BrowserSession") -> None:
    """Close the compose modal; a modal that stays open is tolerated."""
    if await session.count(COMPOSE_MODAL_SELECTOR) == 0:
        return
    try:
        await session.press("Escape")
        await session.pause(0.5)
        if await session.count(COMPOSE_MODAL_SELECTOR) > 0:
            await session.click_at(10, 10)
            await session.pause(0.3)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Compose modal did not close: %s", exc)


EXTRACTORS: Dict[str, ConfigExtractor] = {
    APPLICATIONS: ApplicationExtractor(APPLICATIONS, "app"),
    DATABASES: DatabaseExtractor(DATABASES, "db"),
    SERVICES: ServiceExtractor(SERVICES, "svc"),
}


def extractor_for(category: str) -> Optional[ConfigExtractor]:
    return EXTRACTORS.get(category)
