"""locreconcile command-line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from locreconcile import __version__
from locreconcile.reconcile.session import LoadError, ReconciliationSession
from locreconcile.reconcile.stats import format_stats
from locreconcile.services.export import ExportError, save_export
from locreconcile.services.settings import (
    Settings, choose_initial_language, language_codes, language_label,
)
from locreconcile.services.sources import provider_from_settings

log = logging.getLogger("locreconcile")

EXIT_OK = 0
EXIT_LOAD_ERROR = 2
EXIT_EXPORT_ERROR = 3


def _parse_assignment(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locreconcile",
        description="Compare a language's keys against the base language and export the result.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--source", metavar="DIR", help="directory holding <lang>.json files")
    source.add_argument("--url", metavar="URL", help="base URL serving <lang>.json files")
    parser.add_argument("--base", metavar="LANG", help="base language (default from settings)")

    sub = parser.add_subparsers(dest="command", required=True)

    def add_command(name: str, help_text: str) -> argparse.ArgumentParser:
        p = sub.add_parser(name, help=help_text)
        p.add_argument("lang", nargs="?", help="language to edit (default: last used)")
        p.add_argument("--set", dest="edits", metavar="KEY=VALUE", action="append",
                       type=_parse_assignment, default=[], help="edit a key before running")
        return p

    add_command("stats", "print key counts")
    p = add_command("missing", "list keys with an empty translation")
    p.add_argument("-q", "--query", default="", help="only keys matching this text")
    add_command("extras", "list keys the language has but the base lacks")
    p = add_command("export", "write the merged translation file")
    p.add_argument("-o", "--output-dir", metavar="DIR", help="directory for the exported file")
    p.add_argument("--nested", action="store_true", default=None, help="nest dot-separated keys")
    p.add_argument("--stdout", action="store_true", help="print instead of writing a file")
    sub.add_parser("languages", help="list the languages offered")
    return parser


def run(args: argparse.Namespace, settings: Settings) -> int:
    if args.command == "languages":
        for code in language_codes():
            print(language_label(code))
        return EXIT_OK

    provider = provider_from_settings(settings, args.source, args.url)
    base_language = args.base or settings.get_value("base_language")
    session = ReconciliationSession(provider, base_language, settings=settings)

    lang = args.lang or choose_initial_language(settings, base_language=base_language)
    try:
        session.load(lang)
    except LoadError as e:
        print(session.status, file=sys.stderr)
        log.debug("Load failed", exc_info=e)
        return EXIT_LOAD_ERROR

    for key, value in args.edits:
        try:
            session.edit(key, value)
        except KeyError:
            log.warning("Ignoring edit of unknown key %r", key)

    if args.command == "stats":
        print(format_stats(session.stats))
    elif args.command == "missing":
        session.set_filter(query=args.query, missing_only=True)
        for row in session.visible_rows():
            print(row.key)
    elif args.command == "extras":
        for key in session.extra_keys:
            print(key)
    elif args.command == "export":
        nested = args.nested if args.nested is not None else settings.get_value("nested_output")
        text = session.export_text(nested=bool(nested))
        if args.stdout:
            sys.stdout.write(text)
            return EXIT_OK
        directory = args.output_dir or settings.get_value("export_dir") or "."
        try:
            out = save_export(text, directory, lang, settings.get_value("export_prefix"))
        except ExportError as e:
            print(f"Export failed: {e}", file=sys.stderr)
            return EXIT_EXPORT_ERROR
        print(f"Wrote {out}")
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(name)s: %(message)s")
    return run(args, Settings.get())


if __name__ == "__main__":
    sys.exit(main())
