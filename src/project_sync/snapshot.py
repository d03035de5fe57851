from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from .common import load_json_object, schema_errors, validate_with_schema
from .model import CompilationUnit

LOGGER = logging.getLogger("project_sync")


@dataclass(frozen=True)
class SkippedUnit:
    index: int
    reason: str

    def as_dict(self) -> dict[str, Any]:
        return {"index": self.index, "reason": self.reason}


@dataclass(frozen=True)
class UnitSnapshot:
    units: tuple[CompilationUnit, ...]
    skipped: tuple[SkippedUnit, ...] = field(default=())


def parse_units(payload: dict[str, Any], logger: logging.Logger | None = None) -> UnitSnapshot:
    log = logger or LOGGER
    validate_with_schema("units", payload)

    units: list[CompilationUnit] = []
    skipped: list[SkippedUnit] = []
    for index, item in enumerate(payload["units"]):
        errors = schema_errors("unit", item)
        if errors:
            reason = "; ".join(errors)
            log.warning("Skipping malformed unit #%d: %s", index, reason)
            skipped.append(SkippedUnit(index=index, reason=reason))
            continue
        units.append(CompilationUnit.from_payload(item))
    return UnitSnapshot(units=tuple(units), skipped=tuple(skipped))


def load_units(path: Path, logger: logging.Logger | None = None) -> UnitSnapshot:
    return parse_units(load_json_object(path), logger=logger)


def is_safe_unit_name(name: str) -> bool:
    return "/" not in name and "\\" not in name and name not in {".", ".."}


def filter_units(
    units: Iterable[CompilationUnit | None],
    logger: logging.Logger | None = None,
) -> UnitSnapshot:
    """Drop in-memory units that cannot be rendered (missing, blank or path-like name)."""
    log = logger or LOGGER
    kept: list[CompilationUnit] = []
    skipped: list[SkippedUnit] = []
    for index, unit in enumerate(units):
        if unit is None or not isinstance(unit.name, str) or not unit.name.strip():
            reason = "unit has no name"
        elif not is_safe_unit_name(unit.name):
            reason = f"unit name '{unit.name}' is not a plain file name"
        else:
            reason = None
        if reason:
            log.warning("Skipping malformed unit #%d: %s", index, reason)
            skipped.append(SkippedUnit(index=index, reason=reason))
            continue
        kept.append(unit)
    return UnitSnapshot(units=tuple(kept), skipped=tuple(skipped))
