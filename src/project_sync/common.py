from __future__ import annotations

import difflib
import json
from pathlib import Path
from typing import Any

import jsonschema

TOOL_NAME = "project_sync"
TOOL_VERSION = "1.0.0"


class ProjectSyncError(Exception):
    pass


def load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ProjectSyncError(f"Unable to read JSON file '{path}': {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ProjectSyncError(f"Invalid JSON in '{path}': {exc}") from exc


def load_json_object(path: Path) -> dict[str, Any]:
    payload = load_json(path)
    if not isinstance(payload, dict):
        raise ProjectSyncError(f"JSON root in '{path}' must be an object")
    return payload


def write_json(path: Path, value: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(value, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def get_schema_path(kind: str) -> Path:
    base = Path(__file__).resolve().parent / "schemas"
    mapping = {
        "config": base / "config.schema.json",
        "units": base / "units.schema.json",
        "unit": base / "unit.schema.json",
    }
    if kind not in mapping:
        raise ProjectSyncError(f"Unknown schema kind: {kind}")
    return mapping[kind]


def load_schema(kind: str) -> dict[str, Any]:
    return load_json_object(get_schema_path(kind))


def validate_with_schema(kind: str, payload: Any) -> None:
    try:
        jsonschema.validate(payload, load_schema(kind))
    except jsonschema.ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise ProjectSyncError(f"{kind} failed JSON schema validation at {location}: {exc.message}") from exc


def schema_errors(kind: str, payload: Any) -> list[str]:
    schema = load_schema(kind)
    validator = jsonschema.validators.validator_for(schema)(schema)
    messages: list[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda item: [str(part) for part in item.absolute_path]):
        location = "/".join(str(part) for part in error.absolute_path) or "<root>"
        messages.append(f"{location}: {error.message}")
    return messages


def unified_diff(path: Path, existing: str, content: str) -> str:
    diff = difflib.unified_diff(
        existing.splitlines(),
        content.splitlines(),
        fromfile=f"a/{path}",
        tofile=f"b/{path}",
        lineterm="",
    )
    return "\n".join(diff)


def write_if_changed(path: Path, content: str, check: bool, dry_run: bool, print_diff: bool = True) -> str:
    """Write ``content`` to ``path`` unless the file already holds exactly those UTF-8 bytes.

    Existing files are compared as bytes, so a file in another encoding counts as changed.
    Returns ``"unchanged"``, ``"drift"`` (check mode found a difference, nothing written),
    ``"would-write"`` (dry run) or ``"written"``. ``OSError`` propagates to the caller.
    """
    encoded = content.encode("utf-8")
    exists = path.exists()
    existing = path.read_bytes() if exists else b""
    if exists and existing == encoded:
        return "unchanged"
    if check:
        if print_diff:
            print(unified_diff(path, existing.decode("utf-8", errors="replace"), content))
        return "drift"
    if dry_run:
        return "would-write"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encoded)
    return "written"
