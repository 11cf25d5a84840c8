"""Configuration objects and constants for the snapshot run."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

DEFAULT_OUTPUT_DIR = "scraped-data"
APPLICATIONS = "Applications"
DATABASES = "Databases"
SERVICES = "Services"
KNOWN_CATEGORIES = (APPLICATIONS, DATABASES, SERVICES)


@dataclass
class SnapshotConfig:
    """Top-level settings that control login, navigation and output."""

    base_url: str
    email: str
    password: str
    output_root: Path = Path(DEFAULT_OUTPUT_DIR)
    screenshot_dir: Optional[Path] = None
    navigation_timeout: float = 30.0
    settle_wait: float = 1.0
    env_wait_timeout: float = 5.0
    modal_timeout: float = 5.0
    login_banner_timeout: float = 10.0
    headless: bool = True

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url is required")
        if not self.email or not self.password:
            raise ValueError("email and password are required")
        self.base_url = self.base_url.rstrip("/")
        self.output_root = Path(self.output_root).expanduser()
        if self.screenshot_dir is not None:
            self.screenshot_dir = Path(self.screenshot_dir).expanduser()

    @classmethod
    def from_env(cls, **overrides) -> "SnapshotConfig":
        """Create configuration from environment variables with optional overrides."""
        load_dotenv(find_dotenv(usecwd=True))

        screenshot_dir = os.getenv("COOLIFY_SCREENSHOT_DIR") or None
        config_dict = {
            "base_url": os.getenv("COOLIFY_URL", ""),
            "email": os.getenv("COOLIFY_EMAIL", ""),
            "password": os.getenv("COOLIFY_PASSWORD", ""),
            "output_root": Path(os.getenv("COOLIFY_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)),
            "screenshot_dir": Path(screenshot_dir) if screenshot_dir else None,
            "navigation_timeout": float(os.getenv("COOLIFY_TIMEOUT", "30")),
            "headless": not os.getenv("HEADED"),
        }
        config_dict.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**config_dict)
