from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .common import ProjectSyncError, load_json_object, validate_with_schema
from .emitter import ProjectRenderOptions
from .scanner import ScanLayout


@dataclass(frozen=True)
class SyncConfig:
    install_root: Path | None = None
    output_dir: Path | None = None
    layout: ScanLayout = field(default_factory=ScanLayout)
    project: ProjectRenderOptions = field(default_factory=ProjectRenderOptions)


def ensure_relative_path(root: Path, value: str) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path
    return root / path


def parse_layout(payload: dict[str, Any]) -> ScanLayout:
    defaults = ScanLayout()
    return ScanLayout(
        managed_dir=payload.get("managed_dir", defaults.managed_dir),
        root_pattern=payload.get("root_pattern", defaults.root_pattern),
        module_dir=payload.get("module_dir", defaults.module_dir),
        module_pattern=payload.get("module_pattern", defaults.module_pattern),
    )


def parse_project_options(payload: dict[str, Any]) -> ProjectRenderOptions:
    defaults = ProjectRenderOptions()
    guids = payload.get("project_type_guids")
    return ProjectRenderOptions(
        target_framework=payload.get("target_framework", defaults.target_framework),
        lang_version=payload.get("lang_version", defaults.lang_version),
        output_path=payload.get("output_path", defaults.output_path),
        allow_unsafe_blocks=payload.get("allow_unsafe_blocks", defaults.allow_unsafe_blocks),
        project_type_guids=tuple(guids) if guids is not None else defaults.project_type_guids,
        reference_collisions=payload.get("reference_collisions", defaults.reference_collisions),
    )


def parse_config(payload: dict[str, Any], base_dir: Path) -> SyncConfig:
    validate_with_schema("config", payload)

    install_root = payload.get("install_root")
    output_dir = payload.get("output_dir")
    return SyncConfig(
        install_root=ensure_relative_path(base_dir, install_root).resolve() if install_root else None,
        output_dir=ensure_relative_path(base_dir, output_dir).resolve() if output_dir else None,
        layout=parse_layout(payload.get("layout") or {}),
        project=parse_project_options(payload.get("project") or {}),
    )


def load_config(path: Path | None) -> SyncConfig:
    if path is None:
        return SyncConfig()
    path = path.resolve()
    if not path.is_file():
        raise ProjectSyncError(f"Config file does not exist: {path}")
    return parse_config(load_json_object(path), path.parent)
