from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from pathlib import Path

from .model import LibraryReference

LOGGER = logging.getLogger("project_sync")


@dataclass(frozen=True)
class ScanLayout:
    managed_dir: str = "Managed"
    root_pattern: str = "Unity*.dll"
    module_dir: str = "UnityEngine"
    module_pattern: str = "UnityEngine.*.dll"


@dataclass(frozen=True)
class LibraryScan:
    libraries: frozenset[LibraryReference]
    missing_root: Path | None = None

    @property
    def warnings(self) -> list[str]:
        if self.missing_root is None:
            return []
        return [f"Could not find managed library directory at: {self.missing_root}"]


def iter_matching_files(directory: Path, pattern: str) -> list[Path]:
    lowered = pattern.lower()
    matches: list[Path] = []
    for entry in directory.iterdir():
        if entry.is_file() and fnmatch.fnmatchcase(entry.name.lower(), lowered):
            matches.append(entry)
    return matches


def scan_libraries(
    install_root: Path,
    layout: ScanLayout | None = None,
    logger: logging.Logger | None = None,
) -> LibraryScan:
    layout = layout or ScanLayout()
    log = logger or LOGGER

    managed_root = Path(install_root) / layout.managed_dir
    if not managed_root.is_dir():
        log.error("Could not find managed library directory at: %s", managed_root)
        return LibraryScan(libraries=frozenset(), missing_root=managed_root)

    found: set[LibraryReference] = set()
    for path in iter_matching_files(managed_root, layout.root_pattern):
        found.add(LibraryReference(str(path)))

    module_root = managed_root / layout.module_dir
    if module_root.is_dir():
        for path in iter_matching_files(module_root, layout.module_pattern):
            found.add(LibraryReference(str(path)))
    else:
        log.debug("Module library directory not present: %s", module_root)

    log.debug("Discovered %d libraries under %s", len(found), managed_root)
    return LibraryScan(libraries=frozenset(found))
