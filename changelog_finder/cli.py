"""CLI entrypoint for the changelog-finder command."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, TextIO

from .config import ConfigError, FinderConfig, load_config
from .errors import MetadataError
from .logging import configure_logging, get_logger, log_stage
from .metadata import CASK, FORMULA, BrewMetadataProvider, PackageMetadata, load_metadata_file
from .orchestrator import ChangelogFinder, Outcome, OutcomeStatus, OutputMode

logger = get_logger("cli")


def _comma_list(value: str) -> List[str]:
    return value.split(",")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="changelog-finder",
        description="Display the changelog for a formula or cask.",
    )
    parser.add_argument("name", help="Formula or cask name.")

    kind_group = parser.add_mutually_exclusive_group()
    kind_group.add_argument(
        "--formula",
        action="store_true",
        help="Treat the named argument as a formula.",
    )
    kind_group.add_argument(
        "--cask",
        action="store_true",
        help="Treat the named argument as a cask.",
    )

    parser.add_argument(
        "--metadata",
        type=Path,
        default=None,
        help="Read package metadata from a YAML file instead of `brew info`.",
    )
    parser.add_argument(
        "--pattern",
        type=_comma_list,
        action="extend",
        default=None,
        help="Comma-separated wildcard patterns to match changelog filenames.",
    )

    output_group = parser.add_mutually_exclusive_group()
    output_group.add_argument(
        "-o",
        "--open",
        action="store_true",
        help="Open found changelog in browser and print its URL.",
    )
    output_group.add_argument(
        "--print-url",
        action="store_true",
        help="Print found changelog URL without opening browser.",
    )

    parser.add_argument(
        "--allow-missing",
        action="store_true",
        help="Exit successfully if no changelog is found.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .changelog-finder.yml or its directory (defaults to current directory).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print high-level progress steps.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only print the changelog and errors.",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Print stage-by-stage diagnostics and full error details.",
    )
    return parser


def main(
    argv: list[str] | None = None,
    *,
    finder: ChangelogFinder | None = None,
    provider: BrewMetadataProvider | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """CLI entrypoint; returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    out = stdout or sys.stdout
    err = stderr or sys.stderr

    try:
        config = load_config(args.config or Path.cwd())
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    configure_logging(
        verbose=bool(args.verbose),
        debug=bool(args.debug),
        quiet=bool(args.quiet),
        log_file=config.log_file,
    )
    _log_initial_context(args)

    try:
        metadata = _resolve_metadata(args, config, provider)
    except MetadataError as exc:
        parser.exit(1, f"Error: {exc}\n")
    log_stage(logger, "resolve_target", f"target={metadata.name} type={metadata.kind}")

    finder = finder or ChangelogFinder(
        git=config.git_binary,
        checkout_prefix=config.checkout_prefix,
    )
    outcome = finder.run(
        metadata,
        args.pattern if args.pattern else (config.patterns or None),
        mode=_output_mode(args),
        allow_missing=bool(args.allow_missing) or config.allow_missing,
    )
    return _render(outcome, debug=bool(args.debug), stdout=out, stderr=err)


def _resolve_metadata(
    args: argparse.Namespace,
    config: FinderConfig,
    provider: BrewMetadataProvider | None,
) -> PackageMetadata:
    if args.metadata is not None:
        return load_metadata_file(args.metadata, name=args.name)
    kind = FORMULA if args.formula else CASK if args.cask else None
    provider = provider or BrewMetadataProvider(brew=config.brew_binary)
    return provider.lookup(args.name, kind)


def _output_mode(args: argparse.Namespace) -> OutputMode:
    if args.open:
        return OutputMode.OPEN
    if args.print_url:
        return OutputMode.PRINT_URL
    return OutputMode.CONTENT


def _render(outcome: Outcome, *, debug: bool, stdout: TextIO, stderr: TextIO) -> int:
    if outcome.status is OutcomeStatus.ERROR:
        if debug and outcome.error is not None:
            print(str(outcome.error), file=stderr)
        print(outcome.message or "", file=stderr)
        return outcome.exit_code

    if outcome.output is not None:
        _puts(outcome.output, stdout)
    elif outcome.message:
        print(outcome.message, file=stdout)
    return outcome.exit_code


def _puts(text: str, stream: TextIO) -> None:
    line = text if text.endswith("\n") else f"{text}\n"
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        stream.write(line)
        return
    # Write raw bytes so content is printed unchanged regardless of the stream encoding.
    stream.flush()
    buffer.write(line.encode("utf-8", errors="surrogateescape"))
    buffer.flush()


def _log_initial_context(args: argparse.Namespace) -> None:
    logger.debug(
        "changelog-finder debug: formula=%s cask=%s open=%s print-url=%s allow-missing=%s "
        "quiet=%s verbose=%s name=%s patterns=%s",
        args.formula,
        args.cask,
        args.open,
        args.print_url,
        args.allow_missing,
        args.quiet,
        args.verbose,
        args.name,
        ", ".join(args.pattern) if args.pattern else "(none)",
    )


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
