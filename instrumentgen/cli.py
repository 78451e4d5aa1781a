"""CLI entrypoints for instrumentgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the source tree (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="instrumentgen",
        description="Generate traced wrapper classes for classes marked with @Instrumentation.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write debug-level logs, including worker thread names, to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate wrapper modules for every eligible marked class.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_path_argument(generate_parser)
    generate_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Directory to write wrappers into (defaults to next to each source module).",
    )
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print generated modules instead of writing them.",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="List marked classes and whether a wrapper would be generated.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_path_argument(check_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for instrumentgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    orchestrator = Orchestrator()

    if args.command == "generate":
        dry_run = bool(getattr(args, "dry_run", False))
        try:
            result = orchestrator.run_generate(args.path, output=args.output, dry_run=dry_run)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except ConfigError as exc:
            parser.exit(1, f"instrumentgen: invalid configuration: {exc}\n")
        if dry_run:
            for artifact in result.artifacts:
                print(f"# --- {artifact.name} ---")
                print(artifact.text)
        else:
            for written in result.written:
                print(f"Generated {_relativize(written)}")
        if not result.artifacts:
            print("No wrappers generated")
        if result.failed:
            parser.exit(1, "instrumentgen generate failed for one or more classes.\nRun with --verbose for more details.\n")
    elif args.command == "check":
        try:
            reports = orchestrator.run_check(args.path)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except ConfigError as exc:
            parser.exit(1, f"instrumentgen: invalid configuration: {exc}\n")
        if not reports:
            print("No marked classes found")
        for report in reports:
            print(
                f"{report.candidate.origin}: {report.candidate.identity.qualified_name} "
                f"[{report.reason.value}]"
            )
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
