"""Command-line interface for layercheck."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from analysis import run_analysis
from errors import AnalysisTimeoutError, ConfigurationError, InvalidRootError
from graph.algos import shortest_path
from logging_config import setup_logging
from report.render import render_structured, render_text
from resolve.resolver import build_module_graph, validate_root
from rules.config import CheckConfig, ReasonCode, load_config
from verify.verify import verify_report

EXIT_PASS = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2
EXIT_TIMEOUT = 3

logger = logging.getLogger(__name__)


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )
    _add_common_options(parser)


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Rules/policy file (default: <root>/layercheck.toml if present)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Fail after this many seconds of analysis (default: config value)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Errors only")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="layercheck",
        description="Verify that imports respect architectural layer boundaries.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Analyze a project and gate on the verdict")
    _add_common_paths(check_parser)
    check_parser.add_argument(
        "--format",
        choices=("text", "structured"),
        default="text",
        help="Report format (default: text)",
    )
    blocking = check_parser.add_mutually_exclusive_group()
    blocking.add_argument(
        "--blocking",
        action="append",
        choices=[code.value for code in ReasonCode],
        default=None,
        help="Reason code that fails the verdict; repeat for several "
        "(default: config value)",
    )
    blocking.add_argument(
        "--no-blocking",
        action="store_true",
        help="Report every finding as a warning and always pass",
    )
    check_parser.add_argument(
        "--output",
        default=None,
        help="Write the report to this file instead of stdout",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Check that a stored structured report is reproducible"
    )
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--report",
        required=True,
        help="Structured report produced by an earlier 'check --format structured'",
    )

    path_parser = subparsers.add_parser(
        "path", help="Show the shortest import chain between two project files"
    )
    path_parser.add_argument("root", help="Project root")
    path_parser.add_argument("source", help="Importing file, relative to root")
    path_parser.add_argument("target", help="Imported file, relative to root")
    _add_common_options(path_parser)

    return parser


def _load(root: Path, args: argparse.Namespace) -> CheckConfig:
    validate_root(root)
    config_path = Path(args.config).expanduser().resolve() if args.config else None
    config = load_config(root, config_path)
    if args.timeout is not None:
        if args.timeout <= 0:
            msg = "--timeout must be positive"
            raise ConfigurationError(msg)
        config = config.model_copy(update={"timeout": args.timeout})
    return config


def _handle_check(root: Path, args: argparse.Namespace) -> int:
    config = _load(root, args)
    if args.no_blocking:
        report_config = config.report.model_copy(update={"blocking": frozenset()})
        config = config.model_copy(update={"report": report_config})
    elif args.blocking is not None:
        report_config = config.report.model_copy(
            update={"blocking": frozenset(ReasonCode(code) for code in args.blocking)}
        )
        config = config.model_copy(update={"report": report_config})

    result = run_analysis(root, config)

    if args.format == "structured":
        payload = render_structured(result.report)
    else:
        payload = render_text(result.report).encode("utf-8")

    if args.output:
        output_path = Path(args.output).expanduser()
        output_path.write_bytes(payload)
        logger.info("Report written to %s", output_path)
    else:
        sys.stdout.write(payload.decode("utf-8"))

    return EXIT_PASS if result.passed else EXIT_VIOLATIONS


def _handle_verify(root: Path, args: argparse.Namespace) -> int:
    config = _load(root, args)
    report_path = Path(args.report).expanduser().resolve()
    try:
        result = verify_report(root=root, config=config, report_path=report_path)
    except (FileNotFoundError, IsADirectoryError) as exc:
        sys.stderr.write(f"report: {report_path}\n")
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_ERROR
    if not result.ok:
        for line in result.diff:
            sys.stderr.write(f"{line}\n")
        return EXIT_VIOLATIONS
    return EXIT_PASS


def _handle_path(root: Path, args: argparse.Namespace) -> int:
    config = _load(root, args)
    graph = build_module_graph(root, config)

    missing = [p for p in (args.source, args.target) if p not in graph.index]
    if missing:
        for path in missing:
            sys.stderr.write(f"error: {path} is not an analyzed project file\n")
        return EXIT_ERROR

    route = shortest_path(
        graph.adjacency, graph.index[args.source], graph.index[args.target]
    )
    if route is None:
        sys.stdout.write(f"no import path from {args.source} to {args.target}\n")
        return EXIT_VIOLATIONS
    if args.source == args.target:
        route = [*route, route[0]]
    sys.stdout.write(" -> ".join(graph.path_of(i) for i in route) + "\n")
    return EXIT_PASS


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    root = Path(args.root).expanduser().resolve()

    handlers = {
        "check": _handle_check,
        "verify": _handle_verify,
        "path": _handle_path,
    }
    try:
        return handlers[args.command](root, args)
    except (InvalidRootError, ConfigurationError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_ERROR
    except AnalysisTimeoutError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_TIMEOUT
    except OSError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
