"""Entry point for ``python -m transcript_studio``.

Uses stdlib :mod:`argparse` for argument parsing.

Subcommands:
    parse   -- Parse a transcript text file and print it in normalised form.
    import  -- Import a transcript folder and write its ``meta.json``.
    search  -- Search the segments of a transcript text file.
    library -- List every transcript under the library root.

Speaker names come from repeated ``--speaker`` options, falling back to
``KNOWN_SPEAKERS`` from the environment.

Exit codes:
    0 -- Success (including searches with no matches).
    1 -- An error occurred (bad file, bad config, unparseable transcript).
    2 -- Argument parsing error (handled by argparse).
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from transcript_studio.config import ConfigError, Settings, load_settings
from transcript_studio.display import (
    format_library,
    format_search_results,
    format_transcript_summary,
)
from transcript_studio.editor import TranscriptEditor
from transcript_studio.exceptions import TranscriptExportError, TranscriptImportError
from transcript_studio.exporter import build_transcript_text, export_to_text_file
from transcript_studio.importer import import_from_folder
from transcript_studio.log import get_logger, setup_logging
from transcript_studio.manager import TranscriptManager
from transcript_studio.models.transcript import Transcript
from transcript_studio.parser import parse_transcript_file
from transcript_studio.search import DEFAULT_FUZZY_THRESHOLD, TranscriptSearch

logger = get_logger(__name__)


def _add_common_options(parser: argparse.ArgumentParser, *, speakers: bool = True) -> None:
    if speakers:
        parser.add_argument(
            "-s",
            "--speaker",
            dest="speakers",
            action="append",
            default=[],
            metavar="NAME",
            help=(
                "Known speaker name; repeat for each speaker, in priority "
                "order (defaults to KNOWN_SPEAKERS)."
            ),
        )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug-level logging.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="transcript-studio",
        description="Parse, search and tidy speaker-labelled transcripts.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- "parse" ------------------------------------------------------
    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse a transcript file and print it in normalised form.",
    )
    parse_parser.add_argument("transcript_file", help="Path to the .txt transcript.")
    parse_parser.add_argument(
        "--normalize",
        action="store_true",
        default=False,
        help="Tidy whitespace inside every segment.",
    )
    parse_parser.add_argument(
        "--replace",
        nargs=2,
        metavar=("FROM", "TO"),
        default=None,
        help="Replace FROM with TO in every segment.",
    )
    parse_parser.add_argument(
        "--case-sensitive",
        action="store_true",
        default=False,
        help="Make --replace case-sensitive.",
    )
    parse_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the result to this file instead of stdout.",
    )
    _add_common_options(parse_parser)

    # --- "import" -----------------------------------------------------
    import_parser = subparsers.add_parser(
        "import",
        help="Import a transcript folder and write its meta.json.",
    )
    import_parser.add_argument("folder", help="Transcript folder.")
    _add_common_options(import_parser)

    # --- "search" -----------------------------------------------------
    search_parser = subparsers.add_parser(
        "search",
        help="Search the segments of a transcript file.",
    )
    search_parser.add_argument("transcript_file", help="Path to the .txt transcript.")
    search_parser.add_argument("pattern", help="Text to look for.")
    search_parser.add_argument(
        "--only",
        action="append",
        default=[],
        metavar="SPEAKER",
        help="Restrict matches to this speaker; may be repeated.",
    )
    search_parser.add_argument(
        "--case-sensitive",
        action="store_true",
        default=False,
        help="Match case exactly.",
    )
    search_parser.add_argument(
        "--fuzzy",
        action="store_true",
        default=False,
        help=f"Approximate matching (score >= {DEFAULT_FUZZY_THRESHOLD:.0f}).",
    )
    _add_common_options(search_parser)

    # --- "library" ----------------------------------------------------
    library_parser = subparsers.add_parser(
        "library",
        help="List every transcript under the library root.",
    )
    library_parser.add_argument(
        "root",
        nargs="?",
        default=None,
        help="Library root (defaults to TRANSCRIPTS_ROOT).",
    )
    _add_common_options(library_parser, speakers=False)

    return parser


def _error(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def _resolve_speakers(args: argparse.Namespace, settings: Settings) -> list[str]:
    names = [name.strip() for name in args.speakers if name.strip()]
    return names or list(settings.default_speakers)


def _check_transcript_file(path: Path) -> str | None:
    """Return an error message if *path* is not a readable file."""
    if not path.exists():
        return f"File not found: {path}"
    if not path.is_file():
        return f"Not a file: {path}"
    try:
        with open(path, "rb") as f:
            f.read(1)
    except PermissionError:
        return f"Permission denied: {path}"
    return None


def _load_transcript(args: argparse.Namespace, settings: Settings) -> Transcript | int:
    """Parse ``args.transcript_file``; an ``int`` return is an exit code."""
    path = Path(args.transcript_file)
    problem = _check_transcript_file(path)
    if problem:
        return _error(problem)

    speakers = _resolve_speakers(args, settings)
    if not speakers:
        return _error("No speaker names given (use --speaker or set KNOWN_SPEAKERS)")

    try:
        result = parse_transcript_file(path, speakers)
    except (OSError, UnicodeDecodeError) as exc:
        return _error(f"Cannot read {path}: {exc}")
    if not result.success:
        return _error(f"Could not parse {path}: {result.error.value}")
    return result.transcript


def _handle_parse(args: argparse.Namespace, settings: Settings) -> int:
    loaded = _load_transcript(args, settings)
    if isinstance(loaded, int):
        return loaded

    editor = TranscriptEditor(loaded)
    if args.normalize:
        editor.normalize_whitespace_all()
    if args.replace:
        old, new = args.replace
        count = editor.replace_all(old, new, case_sensitive=args.case_sensitive)
        print(f"Replaced {count} occurrence(s) of {old!r}", file=sys.stderr)

    if args.output:
        try:
            export_to_text_file(editor.transcript, args.output)
        except TranscriptExportError as exc:
            return _error(str(exc))
        return 0

    sys.stdout.write(build_transcript_text(editor.transcript))
    return 0


def _handle_import(args: argparse.Namespace, settings: Settings) -> int:
    speakers = _resolve_speakers(args, settings)
    try:
        transcript = import_from_folder(args.folder, speakers)
    except TranscriptImportError as exc:
        return _error(str(exc))

    sys.stdout.write(format_transcript_summary(transcript) + "\n")
    return 0


def _handle_search(args: argparse.Namespace, settings: Settings) -> int:
    loaded = _load_transcript(args, settings)
    if isinstance(loaded, int):
        return loaded

    search = TranscriptSearch(loaded)
    if args.fuzzy:
        wanted = set(args.only)
        indices = [
            index
            for index in search.find_similar(args.pattern)
            if not wanted or loaded.segments[index].speaker_id in wanted
        ]
    else:
        indices = search.find_by_speakers_and_text(
            args.only,
            args.pattern,
            case_sensitive=args.case_sensitive,
        )

    sys.stdout.write(format_search_results(loaded, indices, args.pattern) + "\n")
    return 0


def _handle_library(args: argparse.Namespace, settings: Settings) -> int:
    root = Path(args.root) if args.root else settings.transcripts_root
    if root is None:
        return _error("No library root given (pass ROOT or set TRANSCRIPTS_ROOT)")

    manager = TranscriptManager(root)
    try:
        manager.load_all_from_root()
    except TranscriptImportError as exc:
        return _error(str(exc))

    sys.stdout.write(format_library(manager.transcripts, manager.warnings) + "\n")
    return 0


_HANDLERS = {
    "parse": _handle_parse,
    "import": _handle_import,
    "search": _handle_search,
    "library": _handle_library,
}


def main(argv: list[str] | None = None) -> int:
    """Run the transcript-studio CLI.

    Args:
        argv: Command-line arguments.  Defaults to ``sys.argv[1:]``.

    Returns:
        Exit code: ``0`` on success, ``1`` on error.
    """
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = load_settings()
    except ConfigError as exc:
        return _error(str(exc))

    log_level = "DEBUG" if args.verbose else settings.log_level
    setup_logging(log_level, settings.log_file)
    logger.debug("Running %s", args.command)

    return _HANDLERS[args.command](args, settings)


if __name__ == "__main__":
    raise SystemExit(main())
