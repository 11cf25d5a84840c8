"""Tests for the per-category configuration extractors."""

from __future__ import annotations

import pytest

from coolify_snapshot.environment import DEVELOPER_VIEW_SELECTOR, ENV_MENU_SELECTOR, MENU_NOT_FOUND
from coolify_snapshot.errors import ExtractionError
from coolify_snapshot.extractors import (
    COMPOSE_MODAL_SELECTOR,
    EDIT_COMPOSE_NOT_FOUND,
    EDIT_COMPOSE_SELECTOR,
    EXTRACTORS,
    extractor_for,
)
from coolify_snapshot.fields import wire_model
from coolify_snapshot.models import ApplicationConfig, DatabaseConfig, Resource, ServiceConfig

from conftest import FakeSession

APPLICATION_PAGE = """
<html><head><title>web | Coolify</title></head><body>
<a class="menu-item" href="/application/w1/environment-variables">Environment Variables</a>
<input wire:model="name" value="web">
<input wire:model="description" value="">
<select wire:model.live="buildPack"><option value="nixpacks" selected>Nixpacks</option></select>
<input wire:model="fqdn" value="https://web.example.com">
<input wire:model="dockerRegistryImageName" value="ghcr.io/acme/web">
<input wire:model.defer="baseDirectory" value="/">
<input wire:model.defer="dockerfileLocation" value="/Dockerfile">
<textarea wire:model="watchPaths">src/**
app/**</textarea>
<input type="checkbox" wire:model="isBuildServerEnabled">
<input wire:model="portsExposes" value="3000">
<input type="checkbox" wire:model="isHttpBasicAuthEnabled" checked>
<textarea wire:model="customLabels">traefik.enable=true</textarea>
<input wire:model="preDeploymentCommand" value="php artisan migrate">
</body></html>
"""

APPLICATION_ENV = "<html><body><button>Developer view</button></body></html>"
APPLICATION_ENV_DEV = '<html><body><textarea wire:model="variables">APP_KEY=abc\nDEBUG=false</textarea></body></html>'

DATABASE_PAGE = """
<html><head><title>db | Coolify</title></head><body>
<input wire:model="name" value="db">
<input wire:model="image" value="mongo:7">
<input wire:model="mongoInitdbRootUsername" value="root">
<input wire:model="portsMappings" value="27017:27017">
<input type="checkbox" wire:model="isPublic" checked>
<input wire:model="publicPort" value="27017">
<input type="checkbox" wire:model="enableSsl">
<textarea wire:model="mongoConf">net:
  bindIp: 0.0.0.0</textarea>
</body></html>
"""

SERVICE_PAGE = """
<html><head><title>plausible | Coolify</title></head><body>
<a class="menu-item" href="/service/s1/environment-variables">Environment Variables</a>
<button>Edit Compose File</button>
</body></html>
"""

SERVICE_MODAL = """
<html><head><title>plausible | Coolify</title></head><body>
<a class="menu-item" href="/service/s1/environment-variables">Environment Variables</a>
<h3>Edit Docker Compose</h3>
<textarea wire:model="dockerComposeRaw">services:
  plausible:
    image: plausible/analytics</textarea>
</body></html>
"""

SERVICE_ENV_DEV = '<html><body><textarea wire:model="variables">SERVICE_FQDN=https://stats.example.com\nSECRET=x</textarea></body></html>'


def _application_session(**kwargs) -> FakeSession:
    return FakeSession(
        {
            "/application/w1": APPLICATION_PAGE,
            "/application/w1/env": APPLICATION_ENV,
            "/application/w1/env#dev": APPLICATION_ENV_DEV,
        },
        clicks={
            ENV_MENU_SELECTOR: "/application/w1/env",
            DEVELOPER_VIEW_SELECTOR: "/application/w1/env#dev",
        },
        **kwargs,
    )


def _service_session(**kwargs) -> FakeSession:
    return FakeSession(
        {
            "/service/s1": SERVICE_PAGE,
            "/service/s1#compose": SERVICE_MODAL,
            "/service/s1/env": APPLICATION_ENV,
            "/service/s1/env#dev": SERVICE_ENV_DEV,
        },
        clicks={
            EDIT_COMPOSE_SELECTOR: "/service/s1#compose",
            ENV_MENU_SELECTOR: "/service/s1/env",
            DEVELOPER_VIEW_SELECTOR: "/service/s1/env#dev",
        },
        **kwargs,
    )


WEB = Resource(name="web", url="/application/w1", category="Applications", status="running")
DB = Resource(name="db", url="/database/d1", category="Databases")
PLAUSIBLE = Resource(name="plausible", url="/service/s1", category="Services", fqdn="https://stats.example.com")


def test_registry_covers_known_categories():
    assert set(EXTRACTORS) == {"Applications", "Databases", "Services"}
    assert extractor_for("Workers") is None


@pytest.mark.asyncio
async def test_application_config():
    session = _application_session()

    config = await extractor_for("Applications").extract(session, WEB)

    assert isinstance(config, ApplicationConfig)
    assert config.title == "web | Coolify"
    assert config.url == "/application/w1"
    assert config.sections["general"] == {
        "name": "web",
        "description": None,
        "buildPack": "nixpacks",
        "domains": "https://web.example.com",
        "redirect": None,
    }
    assert config.sections["docker"]["registryImageName"] == "ghcr.io/acme/web"
    assert config.sections["docker"]["customLabels"] == "traefik.enable=true"
    assert config.sections["build"]["watchPaths"] == "src/**\napp/**"
    assert config.sections["build"]["isBuildServerEnabled"] is False
    assert config.sections["network"]["isHttpBasicAuthEnabled"] is True
    assert config.sections["deployment"]["preDeploymentCommand"] == "php artisan migrate"
    assert config.environment_variables == "APP_KEY=abc\nDEBUG=false"
    assert config.notes == []
    assert not config.partial
    assert session.screenshots[0] == "04-app-config-web"


@pytest.mark.asyncio
async def test_application_leaves_linkage_to_the_caller():
    config = await extractor_for("Applications").extract(_application_session(), WEB)
    data = config.to_dict()
    assert data["applicationName"] is None
    assert data["projectName"] is None


@pytest.mark.asyncio
async def test_page_load_failure_is_hard():
    session = _application_session(failing_urls=["/application/w1"])

    with pytest.raises(ExtractionError, match="Failed to load /application/w1"):
        await extractor_for("Applications").extract(session, WEB)


@pytest.mark.asyncio
async def test_field_failure_is_soft():
    session = _application_session(failing_fields=[wire_model("input", "portsExposes")])

    config = await extractor_for("Applications").extract(session, WEB)

    assert config.sections["network"]["portsExposes"] is None
    assert config.sections["general"]["name"] == "web"
    assert config.environment_variables == "APP_KEY=abc\nDEBUG=false"
    assert config.partial
    assert config.to_dict()["notes"] == [
        "network.portsExposes skipped: Element is not attached to the DOM"
    ]


@pytest.mark.asyncio
async def test_database_config_without_variables_menu():
    session = FakeSession({"/database/d1": DATABASE_PAGE})

    config = await extractor_for("Databases").extract(session, DB)

    assert isinstance(config, DatabaseConfig)
    assert config.sections["general"]["image"] == "mongo:7"
    assert config.sections["general"]["initialUsername"] == "root"
    assert config.sections["general"]["initialPassword"] is None
    assert config.sections["network"]["isPublic"] is True
    assert config.sections["network"]["publicPort"] == "27017"
    assert config.sections["advanced"] == {
        "enableSsl": False,
        "customMongoConfig": "net:\n  bindIp: 0.0.0.0",
        "isLogDrainEnabled": None,
    }
    assert config.environment_variables is None
    assert config.environment_variables_note == MENU_NOT_FOUND
    assert set(config.to_dict()) >= {"general", "network", "advanced", "databaseName"}


@pytest.mark.asyncio
async def test_service_config_reads_compose_and_variables_as_lines():
    session = _service_session()

    config = await extractor_for("Services").extract(session, PLAUSIBLE)

    assert isinstance(config, ServiceConfig)
    assert config.docker_compose == ["services:", "  plausible:", "    image: plausible/analytics"]
    assert config.environment_variables == ["SERVICE_FQDN=https://stats.example.com", "SECRET=x"]
    assert "Escape" in session.pressed
    assert not config.partial


@pytest.mark.asyncio
async def test_service_modal_that_stays_open_is_tolerated():
    session = _service_session()

    config = await extractor_for("Services").extract(session, PLAUSIBLE)

    # the fake ignores Escape, so the fallback click outside the modal is used
    assert "@10,10" in session.clicked
    assert config.docker_compose_error is None


@pytest.mark.asyncio
async def test_service_closes_modal_with_escape():
    session = _service_session(escape_target="/service/s1")

    await extractor_for("Services").extract(session, PLAUSIBLE)

    assert "@10,10" not in session.clicked


@pytest.mark.asyncio
async def test_service_without_compose_button():
    session = _service_session()
    session.pages["/service/s1"] = "<html><body></body></html>"

    config = await extractor_for("Services").extract(session, PLAUSIBLE)

    assert config.docker_compose is None
    assert config.docker_compose_note == EDIT_COMPOSE_NOT_FOUND
    assert config.environment_variables_note == MENU_NOT_FOUND


@pytest.mark.asyncio
async def test_service_modal_timeout_is_soft():
    session = _service_session()
    session.pages["/service/s1#compose"] = SERVICE_PAGE.replace("Edit Compose File", "Edit")

    config = await extractor_for("Services").extract(session, PLAUSIBLE)

    assert config.docker_compose is None
    assert COMPOSE_MODAL_SELECTOR in config.docker_compose_error
    assert config.partial
    assert config.to_dict()["dockerComposeError"] == config.docker_compose_error
