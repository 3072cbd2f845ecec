"""CLI entrypoints for slnsync commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .generator import ProjectGeneration
from .host import DEFAULT_MANIFEST, ManifestAssemblyProvider, ManifestError
from .logging import configure_logging


def _add_common_options(parser: argparse.ArgumentParser, *, suppress_default: bool = False) -> None:
    default = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only report warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        metavar="FILE",
        help="Also write the full log of this pass to FILE.",
    )


def _add_project_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help=f"Assembly manifest to read (defaults to <path>/{DEFAULT_MANIFEST.as_posix()}).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slnsync",
        description="Generate and keep solution and project files in sync with an assembly graph.",
    )
    _add_common_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser(
        "sync",
        help="Regenerate the solution and every project file.",
    )
    _add_common_options(sync_parser, suppress_default=True)
    _add_project_arguments(sync_parser)
    sync_parser.add_argument(
        "--generate-all",
        action="store_true",
        help="Include files from registry, git and built-in packages.",
    )

    incremental_parser = subparsers.add_parser(
        "sync-if-needed",
        help="Regenerate only the projects affected by changed files.",
    )
    _add_common_options(incremental_parser, suppress_default=True)
    _add_project_arguments(incremental_parser)
    incremental_parser.add_argument(
        "--affected",
        action="append",
        default=None,
        metavar="PATH",
        help="File whose content changed (repeat for several).",
    )
    incremental_parser.add_argument(
        "--reimported",
        action="append",
        default=None,
        metavar="PATH",
        help="File the asset pipeline reimported (repeat for several).",
    )

    return parser


def _create_generator(args: argparse.Namespace) -> ProjectGeneration:
    project_path = Path(args.path).expanduser().resolve()
    if not project_path.is_dir():
        raise FileNotFoundError(f"Project path not found: {args.path}")
    config = load_config(project_path)
    manifest = args.manifest or project_path / DEFAULT_MANIFEST
    provider = ManifestAssemblyProvider.from_file(manifest, project_path)
    return ProjectGeneration(str(project_path), provider, config=config)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for slnsync commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file)

    try:
        generator = _create_generator(args)
    except (FileNotFoundError, ConfigError, ManifestError) as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "sync":
        if getattr(args, "generate_all", False):
            generator.generate_all(True)
        try:
            generator.sync()
        except OSError as exc:
            parser.exit(1, f"slnsync sync failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Solution synced at {_relativize(Path(generator.solution_file()))}")
    elif args.command == "sync-if-needed":
        try:
            synced = generator.sync_if_needed(args.affected or [], args.reimported or [])
        except OSError as exc:
            parser.exit(1, f"slnsync sync-if-needed failed: {exc}\nRun with --verbose for more details.\n")
        print("Projects resynced" if synced else "Projects already up to date")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
