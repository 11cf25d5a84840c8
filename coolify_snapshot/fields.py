"""Declarative form-field tables and the routine that reads them."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from .models import FieldValue

if TYPE_CHECKING:
    from .session import BrowserSession

logger = logging.getLogger("coolify_snapshot")


class FieldKind(enum.Enum):
    TEXT = "text"
    CHECKBOX = "checkbox"
    SELECT = "select"
    MULTILINE = "multiline"


@dataclass(frozen=True)
class FieldSpec:
    """One configuration field: where it goes, how to find it, how to read it."""

    section: str
    label: str
    selectors: Tuple[str, ...]
    kind: FieldKind = FieldKind.TEXT


@dataclass
class FieldReading:
    """Raw state of a form element as reported by the browser."""

    tag: str
    input_type: Optional[str] = None
    value: Optional[str] = None
    checked: bool = False
    text: Optional[str] = None


def wire_model(tag: str, name: str, modifier: str = "") -> str:
    """Build a selector for an element bound through ``wire:model``."""
    attribute = "wire\\:model" + "".join(f"\\.{part}" for part in modifier.split(".") if part)
    return f'{tag}[{attribute}="{name}"]'


def field_spec(section: str, label: str, *selectors: str, kind: FieldKind = FieldKind.TEXT) -> FieldSpec:
    return FieldSpec(section=section, label=label, selectors=tuple(selectors), kind=kind)


def coerce_reading(reading: Optional[FieldReading], kind: FieldKind) -> FieldValue:
    """Turn a raw reading into the value stored on a config."""
    if reading is None:
        return None
    if kind is FieldKind.CHECKBOX or (reading.tag == "input" and reading.input_type == "checkbox"):
        return bool(reading.checked)
    if reading.value is None:
        return (reading.text or "").strip() or None
    if kind in (FieldKind.SELECT, FieldKind.MULTILINE) or reading.tag in ("select", "textarea"):
        return reading.value
    return reading.value.strip() or (reading.text or "").strip() or None


async def read_field(session: "BrowserSession", spec: FieldSpec) -> FieldValue:
    """Read one field, trying each selector until one yields a value."""
    value: FieldValue = None
    for selector in spec.selectors:
        value = coerce_reading(await session.read_field(selector), spec.kind)
        if value is not None and value != "":
            return value
    return value


async def read_fields(
    session: "BrowserSession", table: Sequence[FieldSpec]
) -> Tuple[Dict[str, Dict[str, FieldValue]], List[str]]:
    """Read every field of a table; a field that fails is stored as None with a note."""
    sections: Dict[str, Dict[str, FieldValue]] = {}
    notes: List[str] = []
    for spec in table:
        bucket = sections.setdefault(spec.section, {})
        try:
            bucket[spec.label] = await read_field(session, spec)
        except Exception as exc:  # noqa: BLE001 - one field never aborts the config
            logger.warning("Skipped field %s.%s: %s", spec.section, spec.label, exc)
            bucket[spec.label] = None
            notes.append(f"{spec.section}.{spec.label} skipped: {exc}")
    return sections, notes
