from .common import ProjectSyncError, load_json_object, write_if_changed
from .config import SyncConfig, load_config
from .emitter import ProjectRenderOptions, render_project, render_solution, select_references
from .identifier import braced_guid, project_guid
from .model import CompilationUnit, LibraryReference, ResolvedUnit
from .resolver import ReferenceSet, resolve_unit
from .scanner import LibraryScan, ScanLayout, scan_libraries
from .snapshot import SkippedUnit, UnitSnapshot, load_units, parse_units
from .sync import SyncResult, WriteFailure, sync, sync_if_needed

__all__ = [
    "CompilationUnit",
    "LibraryReference",
    "LibraryScan",
    "ProjectRenderOptions",
    "ProjectSyncError",
    "ReferenceSet",
    "ResolvedUnit",
    "ScanLayout",
    "SkippedUnit",
    "SyncConfig",
    "SyncResult",
    "UnitSnapshot",
    "WriteFailure",
    "braced_guid",
    "load_config",
    "load_json_object",
    "load_units",
    "parse_units",
    "project_guid",
    "render_project",
    "render_solution",
    "resolve_unit",
    "scan_libraries",
    "select_references",
    "sync",
    "sync_if_needed",
    "write_if_changed",
]
