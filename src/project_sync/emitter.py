from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Iterable, Sequence

from .common import ProjectSyncError
from .identifier import braced_guid
from .model import CompilationUnit, LibraryReference, ResolvedUnit, project_file_name

CSHARP_PROJECT_TYPE_GUID = "{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}"
UNITY_PROJECT_TYPE_GUID = "{E097FAD1-6243-4DAD-9C02-E9B9EFC3FFC1}"
SOLUTION_CONFIGURATIONS = ("Debug", "Release")
SOLUTION_PLATFORM = "Any CPU"
REFERENCE_COLLISION_MODES = {"keep", "overwrite"}


@dataclass(frozen=True)
class ProjectRenderOptions:
    target_framework: str = "netstandard2.1"
    lang_version: str = "latest"
    output_path: str = "Temp\\bin\\Debug\\"
    allow_unsafe_blocks: bool = True
    project_type_guids: tuple[str, ...] = (UNITY_PROJECT_TYPE_GUID, CSHARP_PROJECT_TYPE_GUID)
    reference_collisions: str = "keep"

    def __post_init__(self) -> None:
        if self.reference_collisions not in REFERENCE_COLLISION_MODES:
            raise ProjectSyncError(
                f"reference_collisions must be one of: {', '.join(sorted(REFERENCE_COLLISION_MODES))}"
            )


def escape(value: str) -> str:
    return html.escape(value, quote=True)


def to_windows_path(path: str) -> str:
    return path.replace("/", "\\")


def select_references(references: Iterable[LibraryReference], mode: str) -> list[LibraryReference]:
    if mode == "keep":
        return list(references)
    if mode != "overwrite":
        raise ProjectSyncError(f"Unknown reference collision mode: {mode}")
    by_name: dict[str, LibraryReference] = {}
    for reference in references:
        by_name[reference.display_name.casefold()] = reference
    return list(by_name.values())


def render_properties(options: ProjectRenderOptions) -> list[str]:
    lines = [
        "  <PropertyGroup>",
        f"    <TargetFramework>{escape(options.target_framework)}</TargetFramework>",
        "    <OutputType>Library</OutputType>",
        f"    <OutputPath>{escape(options.output_path)}</OutputPath>",
        f"    <LangVersion>{escape(options.lang_version)}</LangVersion>",
        f"    <AllowUnsafeBlocks>{'true' if options.allow_unsafe_blocks else 'false'}</AllowUnsafeBlocks>",
        "    <EnableDefaultCompileItems>false</EnableDefaultCompileItems>",
        "    <EnableDefaultEmbeddedResourceItems>false</EnableDefaultEmbeddedResourceItems>",
    ]
    if options.project_type_guids:
        lines.append(f"    <ProjectTypeGuids>{escape(';'.join(options.project_type_guids))}</ProjectTypeGuids>")
    lines.append("  </PropertyGroup>")
    return lines


def render_item_group(items: list[str]) -> list[str]:
    if not items:
        return []
    return ["  <ItemGroup>", *items, "  </ItemGroup>"]


def render_project(unit: ResolvedUnit, options: ProjectRenderOptions | None = None) -> str:
    options = options or ProjectRenderOptions()

    lines: list[str] = ['<Project Sdk="Microsoft.NET.Sdk">']
    lines.extend(render_properties(options))
    lines.extend(
        [
            "  <PropertyGroup>",
            f"    <ProjectGuid>{braced_guid(unit.name)}</ProjectGuid>",
            f"    <AssemblyName>{escape(unit.name)}</AssemblyName>",
            f"    <RootNamespace>{escape(unit.name)}</RootNamespace>",
            f"    <DefineConstants>{escape(';'.join(unit.defines))}</DefineConstants>",
            "  </PropertyGroup>",
        ]
    )

    reference_items: list[str] = []
    for reference in select_references(unit.references, options.reference_collisions):
        reference_items.append(f'    <Reference Include="{escape(reference.display_name)}">')
        reference_items.append(f"      <HintPath>{escape(to_windows_path(reference.path))}</HintPath>")
        reference_items.append("    </Reference>")
    lines.extend(render_item_group(reference_items))

    compile_items = [f'    <Compile Include="{escape(to_windows_path(source))}" />' for source in unit.source_files]
    lines.extend(render_item_group(compile_items))

    project_items: list[str] = []
    for name in unit.project_references:
        project_items.append(f'    <ProjectReference Include="{escape(project_file_name(name))}">')
        project_items.append(f"      <Project>{braced_guid(name)}</Project>")
        project_items.append(f"      <Name>{escape(name)}</Name>")
        project_items.append("    </ProjectReference>")
    lines.extend(render_item_group(project_items))

    lines.append("</Project>")
    return "\n".join(lines) + "\n"


def unique_unit_names(units: Sequence[CompilationUnit]) -> list[str]:
    return list(dict.fromkeys(unit.name for unit in units if unit.name))


def render_solution(units: Sequence[CompilationUnit]) -> str:
    names = unique_unit_names(units)
    lines: list[str] = [
        "Microsoft Visual Studio Solution File, Format Version 12.00",
        "# Visual Studio 15",
    ]
    for name in names:
        lines.append(
            f'Project("{CSHARP_PROJECT_TYPE_GUID}") = "{name}", "{project_file_name(name)}", "{braced_guid(name)}"'
        )
        lines.append("EndProject")

    lines.append("Global")
    lines.append("\tGlobalSection(SolutionConfigurationPlatforms) = preSolution")
    for configuration in SOLUTION_CONFIGURATIONS:
        pair = f"{configuration}|{SOLUTION_PLATFORM}"
        lines.append(f"\t\t{pair} = {pair}")
    lines.append("\tEndGlobalSection")
    lines.append("\tGlobalSection(ProjectConfigurationPlatforms) = postSolution")
    for name in names:
        guid = braced_guid(name)
        for configuration in SOLUTION_CONFIGURATIONS:
            pair = f"{configuration}|{SOLUTION_PLATFORM}"
            lines.append(f"\t\t{guid}.{pair}.ActiveCfg = {pair}")
            lines.append(f"\t\t{guid}.{pair}.Build.0 = {pair}")
    lines.append("\tEndGlobalSection")
    lines.append("EndGlobal")
    return "\n".join(lines) + "\n"
