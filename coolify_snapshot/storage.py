"""JSON persistence for snapshot documents."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from .utils import epoch_millis

logger = logging.getLogger("coolify_snapshot")


class SnapshotWriter:
    """Writes one timestamped JSON file per document."""

    def __init__(self, output_root: Path) -> None:
        self.output_root = Path(output_root)

    def path_for(self, category: str) -> Path:
        return self.output_root / f"scraped-{category}-{epoch_millis()}.json"

    def write(self, data: Mapping[str, Any], category: str) -> Path:
        self.output_root.mkdir(parents=True, exist_ok=True)
        destination = self.path_for(category)
        destination.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Saved %s to %s", category, destination)
        return destination
