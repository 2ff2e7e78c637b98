"""
jackal CLI Entrypoint.

This module provides the command-line interface for analyzing Jack source code.
For every input file it writes a flat token listing and a full parse tree.

Features:
    - Accept a single `.jack` file or a directory of them.
    - Lex and parse each file independently; one bad file does not stop the rest.
    - Write `XxxT.xml` (tokens) and `Xxx.xml` (parse tree) beside each input, or
      into `--out-dir`.
    - Select JSON output instead of markup with `-t json`.

Example usage:
    jackal Main.jack
    jackal Square/ -o build/
    jackal Square/ -t json --no-tokens --verbose

Functions:
    analyze_source(source, target="xml", indent=None) -> tuple[str, str]:
        Lex, parse and serialize a source string in memory.

    analyze_file(path, config) -> list[Path]:
        Analyze one file and write its outputs.

    analyze_path(path, config) -> AnalysisReport:
        Analyze a file or every source file in a directory.

    main(argv=None) -> int:
        Parses CLI arguments and runs `analyze_path`.
"""

from __future__ import annotations

import argparse
import contextlib
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from jackal.jack_config import AnalyzerConfig
from jackal.jack_errors import JackSyntaxError, LexError, ResourceError
from jackal.jack_lexer import tokenize
from jackal.jack_logging import configure_logging, get_logger
from jackal.jack_parser import parse_unit
from jackal.jack_serialize import EMITTERS, Serializer

logger = get_logger(__name__)

ANALYSIS_ERRORS = (LexError, JackSyntaxError, ResourceError)


@dataclass
class AnalysisReport:
    """Outcome of analyzing one or more files.

    Attributes:
        succeeded (list[Path]): Inputs whose outputs were written.
        failed (dict[Path, Exception]): Inputs that failed, with their error.
    """

    succeeded: list[Path] = field(default_factory=list)
    failed: dict[Path, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def analyze_source(
    source: str, target: str = "xml", indent: int | None = None
) -> tuple[str, str]:
    """
    Run the front-end over a source string: lex, parse, and serialize.

    Args:
        source (str): Jack source text.
        target (str): Output format, "xml" or "json".
        indent (int | None): Emitter indent width; None for the target default.

    Returns:
        tuple[str, str]: The token listing and the parse tree, rendered.

    Raises:
        LexError: On lexical errors.
        JackSyntaxError: On grammatical errors.
    """
    serializer = Serializer(target, indent=indent)
    tokens = tokenize(source)
    listing = serializer.serialize_tokens(tokens)
    tree = parse_unit(tokens)
    return listing, serializer.serialize(tree)


def _remove_outputs(paths: Iterable[Path]) -> None:
    for path in paths:
        with contextlib.suppress(OSError):
            path.unlink(missing_ok=True)


def _write_outputs(outputs: list[tuple[Path, str]], encoding: str) -> list[Path]:
    written: list[Path] = []
    for path, text in outputs:
        try:
            with open(path, "w", encoding=encoding) as f:
                f.write(text)
        except OSError as e:
            raise ResourceError("Cannot write output", str(path)) from e
        written.append(path)
    return written


def analyze_file(path: Path, config: AnalyzerConfig | None = None) -> list[Path]:
    """
    Analyze one source file and write its outputs.

    Outputs are rendered in memory first and written only after the whole file
    lexes and parses. On any failure both output paths are removed, so
    nothing on disk looks like a result for this input.

    Args:
        path (Path): The `.jack` file.
        config (AnalyzerConfig | None): Naming and format settings.

    Returns:
        list[Path]: The files written.

    Raises:
        LexError, JackSyntaxError, ResourceError: The file could not be analyzed.
    """
    config = config or AnalyzerConfig()
    token_path, tree_path = config.token_output(path), config.tree_output(path)

    try:
        try:
            source = path.read_text(encoding=config.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ResourceError("Cannot read source", str(path)) from e

        listing, tree = analyze_source(source, config.target, config.indent)
        outputs = [(tree_path, tree)]
        if config.write_tokens:
            outputs.insert(0, (token_path, listing))
        return _write_outputs(outputs, config.encoding)
    except ANALYSIS_ERRORS:
        # Covers partial writes and stale outputs from earlier runs alike.
        _remove_outputs([token_path, tree_path])
        raise


def collect_sources(path: Path, config: AnalyzerConfig) -> list[Path]:
    """
    Resolve the CLI path argument into the list of files to analyze.

    Raises:
        ResourceError: If the path does not exist.
        ValueError: If a single file without the source suffix is given.
    """
    if path.is_dir():
        return sorted(p for p in path.iterdir() if config.is_source(p))
    if path.is_file():
        if path.suffix != config.source_suffix:
            raise ValueError(f"Only {config.source_suffix} files are supported.")
        return [path]
    raise ResourceError("No such file or directory", str(path))


def analyze_path(path: Path, config: AnalyzerConfig | None = None) -> AnalysisReport:
    """Analyze a file or every source file directly inside a directory."""
    config = config or AnalyzerConfig()
    sources = collect_sources(path, config)
    if not sources:
        logger.warning("no %s files found in %s", config.source_suffix, path)
    if config.output_dir is not None:
        config.output_dir.mkdir(parents=True, exist_ok=True)

    report = AnalysisReport()
    for source in sources:
        try:
            written = analyze_file(source, config)
        except ANALYSIS_ERRORS as e:
            report.failed[source] = e
            logger.error("%s: %s: %s", source, type(e).__name__, e)
            continue
        report.succeeded.append(source)
        logger.info("%s -> %s", source, ", ".join(str(p) for p in written))
    return report


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jackal",
        description="Tokenize and parse Jack source files into tagged parse trees.",
    )
    parser.add_argument("path", help="A .jack file or a directory of .jack files")
    parser.add_argument(
        "-t",
        "--target",
        choices=sorted(EMITTERS),
        default="xml",
        help="Output format (default: xml)",
    )
    parser.add_argument(
        "-o", "--out-dir", metavar="DIR", help="Write outputs here instead of beside inputs"
    )
    parser.add_argument(
        "--no-tokens", action="store_true", help="Skip the token listing output"
    )
    parser.add_argument(
        "--indent", type=int, default=None, metavar="N", help="Indent nested tags by N spaces"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log problems")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the jackal CLI.

    Returns:
        int: 0 when every file was analyzed, 1 when any failed. Usage errors
        exit with status 2 through argparse.
    """
    args = build_arg_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    config = AnalyzerConfig(
        target=args.target,
        output_dir=Path(args.out_dir) if args.out_dir else None,
        write_tokens=not args.no_tokens,
        indent=args.indent,
    )
    try:
        report = analyze_path(Path(args.path), config)
    except (ValueError, ResourceError) as e:
        logger.error("%s", e)
        return 1
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
