from __future__ import annotations

from typing import Iterable, Iterator

from .model import CompilationUnit, LibraryReference, ResolvedUnit


class ReferenceSet:
    """Ordered library references keyed by case-folded absolute path.

    Adding a path that is already present replaces the stored spelling (last write wins)
    and keeps the position of the first insertion.
    """

    def __init__(self, references: Iterable[LibraryReference] = ()) -> None:
        self._items: dict[str, LibraryReference] = {}
        self.update(references)

    def add(self, reference: LibraryReference) -> None:
        self._items[reference.key] = reference

    def update(self, references: Iterable[LibraryReference]) -> None:
        for reference in references:
            self.add(reference)

    def __contains__(self, reference: object) -> bool:
        return isinstance(reference, LibraryReference) and reference.key in self._items

    def __iter__(self) -> Iterator[LibraryReference]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def as_tuple(self) -> tuple[LibraryReference, ...]:
        return tuple(self._items.values())


def resolve_unit(unit: CompilationUnit, discovered: Iterable[LibraryReference]) -> ResolvedUnit:
    references = ReferenceSet(LibraryReference(path) for path in unit.references)
    references.update(sorted(discovered, key=lambda item: (item.key, item.path)))
    return ResolvedUnit(
        name=unit.name,
        source_files=tuple(unit.source_files),
        defines=tuple(unit.defines),
        references=references.as_tuple(),
        project_references=tuple(dict.fromkeys(unit.project_references)),
    )
