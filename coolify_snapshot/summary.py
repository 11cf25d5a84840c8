"""Run-level totals derived from a snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .models import ExtractionFailure, ResourceSet, Snapshot


@dataclass
class CategoryTotals:
    category: str
    configs: int = 0
    partial: int = 0
    failures: int = 0

    @property
    def total(self) -> int:
        return self.configs + self.failures


@dataclass
class RunSummary:
    projects: int = 0
    failed_projects: int = 0
    resources: int = 0
    categories: List[CategoryTotals] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projects": self.projects,
            "failedProjects": self.failed_projects,
            "resources": self.resources,
            "categories": {
                totals.category: {
                    "total": totals.total,
                    "configs": totals.configs,
                    "partial": totals.partial,
                    "failures": totals.failures,
                }
                for totals in self.categories
            },
        }


def summarize(snapshot: Snapshot) -> RunSummary:
    summary = RunSummary(projects=len(snapshot.projects))
    for entry in snapshot.projects:
        if isinstance(entry, ExtractionFailure):
            summary.failed_projects += 1
        elif isinstance(entry, ResourceSet):
            summary.resources += entry.total
    for category, collection in snapshot.configs.items():
        configs = collection.configs
        summary.categories.append(
            CategoryTotals(
                category=category,
                configs=len(configs),
                partial=sum(1 for config in configs if config.partial),
                failures=len(collection.failures),
            )
        )
    return summary


def log_summary(summary: RunSummary, logger: logging.Logger) -> None:
    logger.info(
        "Projects: %d (%d failed), resources found: %d",
        summary.projects,
        summary.failed_projects,
        summary.resources,
    )
    for totals in summary.categories:
        logger.info(
            "  - %s configured: %d (%d partial, %d failed)",
            totals.category,
            totals.configs,
            totals.partial,
            totals.failures,
        )
