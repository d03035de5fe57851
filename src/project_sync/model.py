from __future__ import annotations

import ntpath
import os
from dataclasses import dataclass, field
from typing import Any, Iterable


def normalize_library_path(path: str) -> str:
    return os.path.normpath(os.path.abspath(path))


def library_key(path: str) -> str:
    return normalize_library_path(path).replace("\\", "/").casefold()


@dataclass(frozen=True, eq=False)
class LibraryReference:
    """A compiled library on disk.

    Two references are equal when their normalised absolute paths match case-insensitively;
    ``path`` keeps whatever spelling the producer used.
    """

    path: str

    @property
    def key(self) -> str:
        return library_key(self.path)

    @property
    def display_name(self) -> str:
        base = ntpath.basename(self.path)
        stem, _ = os.path.splitext(base)
        return stem

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LibraryReference):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        out.append(value)
    return tuple(out)


@dataclass(frozen=True)
class CompilationUnit:
    name: str
    source_files: tuple[str, ...] = ()
    defines: tuple[str, ...] = ()
    references: tuple[str, ...] = ()
    project_references: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CompilationUnit":
        return cls(
            name=payload["name"],
            source_files=tuple(payload.get("source_files") or ()),
            defines=_unique(payload.get("defines") or ()),
            references=tuple(payload.get("references") or ()),
            project_references=_unique(payload.get("project_references") or ()),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "source_files": list(self.source_files),
            "defines": list(self.defines),
            "references": list(self.references),
            "project_references": list(self.project_references),
        }


@dataclass(frozen=True)
class ResolvedUnit:
    name: str
    source_files: tuple[str, ...]
    defines: tuple[str, ...]
    references: tuple[LibraryReference, ...]
    project_references: tuple[str, ...] = field(default=())


def project_file_name(unit_name: str) -> str:
    return f"{unit_name}.csproj"
