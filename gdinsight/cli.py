"""CLI entrypoints for gdinsight commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, GDInsightConfig, load_config
from .errors import ReportError
from .extractor import GDScriptExtractor
from .logging import configure_logging, get_logger
from .orchestrator import BatchOrchestrator
from .reporters import FORMATS, render
from .repo_scanner import RepoScanner


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


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also append log records to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gdinsight",
        description="Aggregate structural facts from GDScript projects into architectural insight.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyse every script under a project directory.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_log_file_option(analyze_parser, suppress_default=True)
    analyze_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    analyze_parser.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="Report encoding (defaults to the config value, then markdown).",
    )
    analyze_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the report to this file instead of stdout.",
    )
    analyze_parser.add_argument(
        "--include",
        default=None,
        help="Filename wildcard of scripts to analyse (default: *.gd).",
    )
    analyze_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Exclude pattern; may be repeated.",
    )
    analyze_parser.add_argument(
        "--no-recursive",
        action="store_true",
        help="Only scan the top-level directory.",
    )
    analyze_parser.add_argument(
        "--directory-analysis",
        action="store_true",
        help="Include directory, size and naming statistics.",
    )
    analyze_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-file extraction timeout in seconds.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP analysis service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_log_file_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for gdinsight commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "analyze":
        _run_analyze(parser, args)
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_analyze(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    root = Path(args.path).expanduser().resolve()
    try:
        config = load_config(root)
    except ConfigError as exc:
        get_logger("cli").warning("Ignoring invalid configuration: %s", exc)
        config = GDInsightConfig(root=root)

    exclude = list(config.scan.exclude_paths) + list(args.exclude)
    paths = RepoScanner().scan(
        str(root),
        recursive=config.scan.recursive and not args.no_recursive,
        include=args.include or config.scan.include,
        exclude=exclude,
    )

    orchestrator = BatchOrchestrator(
        GDScriptExtractor(project_root=root),
        timeout=args.timeout if args.timeout is not None else config.extractor_timeout,
        thresholds=config.thresholds,
    )
    result = orchestrator.run(
        paths,
        config.options,
        directory_analysis=bool(args.directory_analysis or config.directory_analysis),
    )
    if result.no_scripts:
        parser.exit(1, f"No GDScript files found under {root}\n")

    try:
        report = render(result, args.format or config.report.format)
    except ReportError as exc:
        parser.exit(1, f"{exc}\n")
    if args.output:
        output = Path(args.output)
        output.write_text(report, encoding="utf-8")
        print(f"Report written to {_relativize(output.resolve())}")
    else:
        sys.stdout.write(report)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
