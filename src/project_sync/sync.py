from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Sequence

from .common import TOOL_NAME, TOOL_VERSION, write_if_changed
from .emitter import ProjectRenderOptions, render_project, render_solution
from .model import CompilationUnit, project_file_name
from .resolver import resolve_unit
from .scanner import ScanLayout, scan_libraries
from .snapshot import SkippedUnit, filter_units

LOGGER = logging.getLogger("project_sync")


@dataclass(frozen=True)
class FileStatus:
    path: Path
    status: str
    unit: str | None = None


@dataclass(frozen=True)
class WriteFailure:
    path: Path
    message: str
    unit: str | None = None

    def describe(self) -> str:
        owner = f"unit '{self.unit}'" if self.unit else "solution"
        return f"{owner}: unable to write '{self.path}': {self.message}"


@dataclass
class SyncResult:
    files: list[FileStatus] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    skipped: list[SkippedUnit] = field(default_factory=list)
    failures: list[WriteFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def has_drift(self) -> bool:
        return any(item.status == "drift" for item in self.files)

    @property
    def failed_units(self) -> list[str]:
        return [item.unit for item in self.failures if item.unit]

    def paths_with_status(self, status: str) -> list[str]:
        return [str(item.path) for item in self.files if item.status == status]

    def as_dict(self) -> dict[str, Any]:
        return {
            "tool": {"name": TOOL_NAME, "version": TOOL_VERSION},
            "status": "pass" if self.ok else "fail",
            "written": self.paths_with_status("written"),
            "unchanged": self.paths_with_status("unchanged"),
            "drift": self.paths_with_status("drift"),
            "would_write": self.paths_with_status("would-write"),
            "warnings": list(self.warnings),
            "skipped_units": [item.as_dict() for item in self.skipped],
            "failures": [item.describe() for item in self.failures],
        }


def solution_file_name(output_dir: Path) -> str:
    return f"{output_dir.resolve().name}.sln"


def _write(
    result: SyncResult,
    path: Path,
    content: str,
    unit: str | None,
    check: bool,
    dry_run: bool,
    print_diff: bool,
    log: logging.Logger,
) -> None:
    try:
        status = write_if_changed(path, content, check=check, dry_run=dry_run, print_diff=print_diff)
    except OSError as exc:
        failure = WriteFailure(path=path, message=str(exc), unit=unit)
        log.error("%s", failure.describe())
        result.failures.append(failure)
        return
    log.debug("%s: %s", path.name, status)
    result.files.append(FileStatus(path=path, status=status, unit=unit))


def sync(
    units: Sequence[CompilationUnit | None],
    install_root: Path,
    output_dir: Path | None = None,
    *,
    layout: ScanLayout | None = None,
    options: ProjectRenderOptions | None = None,
    logger: logging.Logger | None = None,
    check: bool = False,
    dry_run: bool = False,
    print_diff: bool = True,
) -> SyncResult:
    """Regenerate every project descriptor and the solution descriptor.

    The library scan runs once and is shared by all units. Each file is written
    independently; a failed write is recorded in the result and the remaining files are
    still produced. Re-running with the same input leaves the files byte-identical.
    """
    log = logger or LOGGER
    output_dir = Path(output_dir) if output_dir is not None else Path.cwd()
    result = SyncResult()

    snapshot = filter_units(units, logger=log)
    result.skipped.extend(snapshot.skipped)

    scan = scan_libraries(Path(install_root), layout=layout, logger=log)
    result.warnings.extend(scan.warnings)

    for unit in snapshot.units:
        resolved = resolve_unit(unit, scan.libraries)
        content = render_project(resolved, options)
        _write(result, output_dir / project_file_name(unit.name), content, unit.name, check, dry_run, print_diff, log)

    solution = render_solution(snapshot.units)
    _write(result, output_dir / solution_file_name(output_dir), solution, None, check, dry_run, print_diff, log)

    log.info("Generated project files for %d units.", len(snapshot.units))
    if result.failures:
        log.error("Failed to write %d file(s).", len(result.failures))
    return result


def sync_if_needed(
    changed_paths: Iterable[str],
    units: Sequence[CompilationUnit | None],
    install_root: Path,
    output_dir: Path | None = None,
    **kwargs: Any,
) -> SyncResult:
    """Asset-change hook; the change set is not inspected and a full sync always runs."""
    del changed_paths
    return sync(units, install_root, output_dir, **kwargs)
