from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .common import ProjectSyncError, load_json_object, write_json
from .config import ensure_relative_path, load_config
from .identifier import braced_guid
from .scanner import scan_libraries
from .snapshot import parse_units
from .sync import sync

LOG_FORMAT = "[project_sync] %(levelname)s: %(message)s"


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT, stream=sys.stderr)


def resolve_install_root(cli_value: str | None, config_value: Path | None, snapshot_value: Path | None) -> Path:
    if cli_value:
        return Path(cli_value).resolve()
    if config_value is not None:
        return config_value
    if snapshot_value is not None:
        return snapshot_value
    raise ProjectSyncError("No install root given: pass --install-root or set 'install_root' in the config or unit snapshot.")


def command_sync(args: argparse.Namespace) -> int:
    configure_logging(bool(args.verbose))
    config = load_config(Path(args.config) if args.config else None)

    units_path = Path(args.units).resolve()
    payload = load_json_object(units_path)
    snapshot = parse_units(payload)

    snapshot_root = payload.get("install_root")
    install_root = resolve_install_root(
        args.install_root,
        config.install_root,
        ensure_relative_path(units_path.parent, snapshot_root).resolve() if snapshot_root else None,
    )
    if args.output_dir:
        output_dir = Path(args.output_dir).resolve()
    elif config.output_dir is not None:
        output_dir = config.output_dir
    else:
        output_dir = Path.cwd()

    result = sync(
        list(snapshot.units),
        install_root,
        output_dir,
        layout=config.layout,
        options=config.project,
        check=bool(args.check),
        dry_run=bool(args.dry_run),
        print_diff=not bool(args.no_diff),
    )
    result.skipped[:0] = list(snapshot.skipped)

    for item in result.files:
        print(f"[{item.unit or 'solution'}] {item.path.name}: {item.status}")
    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    for failure in result.failures:
        print(f"error: {failure.describe()}", file=sys.stderr)

    if args.report_json:
        write_json(Path(args.report_json).resolve(), result.as_dict())

    if not result.ok:
        return 1
    if args.check and result.has_drift:
        return 1
    return 0


def command_scan(args: argparse.Namespace) -> int:
    configure_logging(bool(args.verbose))
    config = load_config(Path(args.config) if args.config else None)
    install_root = resolve_install_root(args.install_root, config.install_root, None)

    scan = scan_libraries(install_root, layout=config.layout)
    for reference in sorted(scan.libraries, key=lambda item: item.key):
        print(reference.path)
    return 0


def command_guid(args: argparse.Namespace) -> int:
    for name in args.names:
        print(f"{name} {braced_guid(name)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="project_sync",
        description="Generate IDE project and solution files from a compilation unit snapshot.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sync_cmd = sub.add_parser("sync", help="Regenerate every project file and the solution file.")
    sync_cmd.add_argument("--units", required=True, help="Path to the unit snapshot JSON exported by the build pipeline.")
    sync_cmd.add_argument("--config", help="Path to project_sync config JSON.")
    sync_cmd.add_argument("--install-root", help="Host installation root (overrides config and snapshot).")
    sync_cmd.add_argument("--output-dir", help="Directory receiving the generated files (default: current directory).")
    sync_cmd.add_argument("--check", action="store_true", help="Do not write; fail if any file would change.")
    sync_cmd.add_argument("--dry-run", action="store_true", help="Render everything but do not write.")
    sync_cmd.add_argument("--no-diff", action="store_true", help="Do not print unified diffs in --check mode.")
    sync_cmd.add_argument("--report-json", help="Write sync report JSON to path.")
    sync_cmd.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    sync_cmd.set_defaults(func=command_sync)

    scan = sub.add_parser("scan", help="List libraries discovered under the install root.")
    scan.add_argument("--install-root", help="Host installation root (overrides config).")
    scan.add_argument("--config", help="Path to project_sync config JSON.")
    scan.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    scan.set_defaults(func=command_scan)

    guid = sub.add_parser("guid", help="Print the project GUID derived from unit names.")
    guid.add_argument("names", nargs="+", help="Unit names.")
    guid.set_defaults(func=command_guid)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args))
    except ProjectSyncError as exc:
        print(f"project_sync error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
