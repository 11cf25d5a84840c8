"""Data models used throughout the snapshot pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

from .config import APPLICATIONS, DATABASES, KNOWN_CATEGORIES, SERVICES
from .utils import utc_timestamp

RUNNING = "running"
EXITED = "exited"
WARNING = "warning"
UNKNOWN = "unknown"

FieldValue = Union[str, bool, None]


@dataclass
class Project:
    """A project card listed on the dashboard."""

    title: str
    url: str
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"title": self.title}
        if self.description is not None:
            data["description"] = self.description
        data["url"] = self.url
        return data


@dataclass
class Resource:
    """A resource card discovered under one section of a project view."""

    name: str
    url: str
    category: str
    description: Optional[str] = None
    fqdn: Optional[str] = None
    status: str = UNKNOWN
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "url": self.url}
        if self.description is not None:
            data["description"] = self.description
        if self.fqdn is not None:
            data["fqdn"] = self.fqdn
        data["status"] = self.status
        data["tags"] = list(self.tags)
        data["category"] = self.category
        return data


@dataclass
class ResourceSet:
    """Resources of one project, keyed by the heading they were found under."""

    project: Project
    by_category: Dict[str, List[Resource]] = field(default_factory=dict)

    def resources_for(self, category: str) -> List[Resource]:
        return self.by_category.get(category, [])

    @property
    def applications(self) -> List[Resource]:
        return self.resources_for(APPLICATIONS)

    @property
    def databases(self) -> List[Resource]:
        return self.resources_for(DATABASES)

    @property
    def services(self) -> List[Resource]:
        return self.resources_for(SERVICES)

    @property
    def total(self) -> int:
        return len(self.applications) + len(self.databases) + len(self.services)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectName": self.project.title,
            "projectDescription": self.project.description,
            "projectUrl": self.project.url,
            "applications": [r.to_dict() for r in self.applications],
            "databases": [r.to_dict() for r in self.databases],
            "services": [r.to_dict() for r in self.services],
            "resourcesByCategory": {
                category: [r.to_dict() for r in resources]
                for category, resources in self.by_category.items()
            },
        }


@dataclass
class ExtractionFailure:
    """Placeholder recorded when a project or resource could not be extracted."""

    entity_name: str
    entity_url: str
    project_name: str
    error_message: str
    timestamp: str = field(default_factory=utc_timestamp)
    entity_description: Optional[str] = None

    def to_dict(self, entity_key: str) -> Dict[str, Any]:
        return {
            f"{entity_key}Name": self.entity_name,
            f"{entity_key}Url": self.entity_url,
            "projectName": self.project_name,
            "error": self.error_message,
            "timestamp": self.timestamp,
        }

    def to_project_dict(self) -> Dict[str, Any]:
        """Render a failed project the way a project entry of the resources document looks."""
        return {
            "projectName": self.entity_name,
            "projectDescription": self.entity_description,
            "projectUrl": self.entity_url,
            "error": self.error_message,
            "timestamp": self.timestamp,
            "applications": [],
            "databases": [],
            "services": [],
            "resourcesByCategory": {},
        }


@dataclass
class ResourceConfig:
    """Configuration read from one resource's detail view.

    Extractors fill the page fields, ``sections`` and the environment
    variables. The linkage fields (``resource_name`` through ``fqdn``) are
    copied in afterwards by the pipeline through :meth:`link`.
    """

    ENTITY_KEY: ClassVar[str] = "resource"
    SECTIONS: ClassVar[Tuple[str, ...]] = ()

    title: str = ""
    url: str = ""
    timestamp: str = field(default_factory=utc_timestamp)
    sections: Dict[str, Dict[str, FieldValue]] = field(default_factory=dict)
    environment_variables: Union[str, List[str], None] = None
    environment_variables_note: Optional[str] = None
    environment_variables_error: Optional[str] = None
    notes: List[str] = field(default_factory=list)
    resource_name: Optional[str] = None
    resource_url: Optional[str] = None
    project_name: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    fqdn: Optional[str] = None

    def link(self, resource: Resource, project_name: str) -> None:
        self.resource_name = resource.name
        self.resource_url = resource.url
        self.project_name = project_name
        self.category = resource.category
        self.status = resource.status
        self.fqdn = resource.fqdn

    @property
    def partial(self) -> bool:
        """True when part of the extraction was skipped because of an error."""
        return bool(self.notes) or self.environment_variables_error is not None

    def _body(self) -> Dict[str, Any]:
        return {name: dict(self.sections.get(name, {})) for name in self.SECTIONS}

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "title": self.title,
            "url": self.url,
            "timestamp": self.timestamp,
        }
        data.update(self._body())
        data["environmentVariables"] = self.environment_variables
        if self.environment_variables_note is not None:
            data["environmentVariablesNote"] = self.environment_variables_note
        if self.environment_variables_error is not None:
            data["environmentVariablesError"] = self.environment_variables_error
        if self.notes:
            data["notes"] = list(self.notes)
        key = self.ENTITY_KEY
        data[f"{key}Name"] = self.resource_name
        data[f"{key}Url"] = self.resource_url
        data["projectName"] = self.project_name
        data["category"] = self.category
        data["status"] = self.status
        data["fqdn"] = self.fqdn
        return data


@dataclass
class ApplicationConfig(ResourceConfig):
    ENTITY_KEY: ClassVar[str] = "application"
    SECTIONS: ClassVar[Tuple[str, ...]] = ("general", "docker", "network", "build", "deployment")


@dataclass
class DatabaseConfig(ResourceConfig):
    ENTITY_KEY: ClassVar[str] = "database"
    SECTIONS: ClassVar[Tuple[str, ...]] = ("general", "network", "advanced")


@dataclass
class ServiceConfig(ResourceConfig):
    ENTITY_KEY: ClassVar[str] = "service"

    docker_compose: Optional[List[str]] = None
    docker_compose_note: Optional[str] = None
    docker_compose_error: Optional[str] = None

    @property
    def partial(self) -> bool:
        return super().partial or self.docker_compose_error is not None

    def _body(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"dockerCompose": self.docker_compose}
        if self.docker_compose_note is not None:
            data["dockerComposeNote"] = self.docker_compose_note
        if self.docker_compose_error is not None:
            data["dockerComposeError"] = self.docker_compose_error
        return data


ConfigOutcome = Union[ResourceConfig, ExtractionFailure]
ProjectOutcome = Union[ResourceSet, ExtractionFailure]

CONFIG_ENTITY_KEYS = {
    APPLICATIONS: ApplicationConfig.ENTITY_KEY,
    DATABASES: DatabaseConfig.ENTITY_KEY,
    SERVICES: ServiceConfig.ENTITY_KEY,
}


@dataclass
class ConfigCollection:
    """Every extraction attempt made for one category during a run."""

    category: str
    items: List[ConfigOutcome] = field(default_factory=list)
    timestamp: str = field(default_factory=utc_timestamp)

    @property
    def entity_key(self) -> str:
        return CONFIG_ENTITY_KEYS.get(self.category, "resource")

    @property
    def configs(self) -> List[ResourceConfig]:
        return [item for item in self.items if isinstance(item, ResourceConfig)]

    @property
    def failures(self) -> List[ExtractionFailure]:
        return [item for item in self.items if isinstance(item, ExtractionFailure)]

    def to_dict(self) -> Dict[str, Any]:
        singular = self.entity_key.capitalize()
        return {
            "title": f"Coolify {singular} Configurations",
            "timestamp": self.timestamp,
            f"total{self.category}": len(self.items),
            self.category.lower(): [
                item.to_dict(self.entity_key) if isinstance(item, ExtractionFailure) else item.to_dict()
                for item in self.items
            ],
        }


@dataclass
class Snapshot:
    """The complete result of one run."""

    timestamp: str = field(default_factory=utc_timestamp)
    projects: List[ProjectOutcome] = field(default_factory=list)
    configs: Dict[str, ConfigCollection] = field(
        default_factory=lambda: {category: ConfigCollection(category) for category in KNOWN_CATEGORIES}
    )

    @property
    def totals(self) -> Dict[str, int]:
        return {category: len(collection.items) for category, collection in self.configs.items()}

    def resources_document(self) -> Dict[str, Any]:
        return {
            "title": "Coolify Resources",
            "timestamp": self.timestamp,
            "totalProjects": len(self.projects),
            "projects": [
                entry.to_project_dict() if isinstance(entry, ExtractionFailure) else entry.to_dict()
                for entry in self.projects
            ],
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "totals": self.totals,
            "resources": self.resources_document(),
            "configs": {category: collection.to_dict() for category, collection in self.configs.items()},
        }
