from __future__ import annotations

import sys
import unittest
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from project_sync.model import CompilationUnit, LibraryReference
from project_sync.resolver import ReferenceSet, resolve_unit

LIBS = Path(__file__).resolve().parent / "libs"


def lib(*parts: str) -> str:
    return str(LIBS.joinpath(*parts))


class ReferenceSetTests(unittest.TestCase):
    def test_last_write_wins_on_same_path(self) -> None:
        references = ReferenceSet()
        references.add(LibraryReference(lib("Plugins", "Foo.dll")))
        references.add(LibraryReference(lib("Other.dll")))
        references.add(LibraryReference(lib("PLUGINS", "foo.DLL")))

        self.assertEqual(len(references), 2)
        stored = references.as_tuple()
        self.assertEqual(stored[0].path, lib("PLUGINS", "foo.DLL"))
        self.assertEqual(stored[1].path, lib("Other.dll"))

    def test_same_file_name_at_different_paths_is_kept(self) -> None:
        references = ReferenceSet(
            [
                LibraryReference(lib("a", "Shared.dll")),
                LibraryReference(lib("b", "Shared.dll")),
            ]
        )
        self.assertEqual(len(references), 2)

    def test_contains_is_case_insensitive(self) -> None:
        references = ReferenceSet([LibraryReference(lib("A.dll"))])
        self.assertIn(LibraryReference(lib("a.DLL")), references)
        self.assertNotIn(lib("A.dll"), references)


class ResolveUnitTests(unittest.TestCase):
    def setUp(self) -> None:
        self.unit = CompilationUnit(
            name="App",
            source_files=("Assets/a.cs", "Assets/sub/b.cs"),
            defines=("DEBUG", "UNITY_EDITOR"),
            references=(lib("A.dll"), lib("B.dll")),
            project_references=("Lib", "Missing"),
        )
        self.discovered = frozenset({LibraryReference(lib("b.dll")), LibraryReference(lib("C.dll"))})

    def test_union_is_keyed_by_case_insensitive_path(self) -> None:
        resolved = resolve_unit(self.unit, self.discovered)

        self.assertEqual(len(resolved.references), 3)
        self.assertEqual(
            {reference.key for reference in resolved.references},
            {LibraryReference(path).key for path in (lib("A.dll"), lib("B.dll"), lib("C.dll"))},
        )

    def test_own_references_come_first_in_reported_order(self) -> None:
        resolved = resolve_unit(self.unit, self.discovered)
        self.assertEqual(resolved.references[0].display_name, "A")
        self.assertEqual(resolved.references[-1].display_name, "C")

    def test_merge_is_idempotent(self) -> None:
        once = resolve_unit(self.unit, self.discovered)
        again = resolve_unit(
            CompilationUnit(name="App", references=tuple(reference.path for reference in once.references)),
            self.discovered,
        )
        self.assertEqual([r.key for r in once.references], [r.key for r in again.references])

    def test_is_deterministic(self) -> None:
        first = resolve_unit(self.unit, self.discovered)
        second = resolve_unit(self.unit, frozenset(reversed(sorted(self.discovered, key=lambda item: item.key))))
        self.assertEqual([r.path for r in first.references], [r.path for r in second.references])
        self.assertEqual(first, second)

    def test_unit_fields_and_project_references_are_carried_through(self) -> None:
        resolved = resolve_unit(self.unit, frozenset())

        self.assertEqual(resolved.name, "App")
        self.assertEqual(resolved.source_files, ("Assets/a.cs", "Assets/sub/b.cs"))
        self.assertEqual(resolved.defines, ("DEBUG", "UNITY_EDITOR"))
        self.assertEqual(resolved.project_references, ("Lib", "Missing"))
        self.assertEqual([r.path for r in resolved.references], [lib("A.dll"), lib("B.dll")])


if __name__ == "__main__":
    unittest.main()
