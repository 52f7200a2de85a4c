"""Command-line interface for TMX/CWB conversion."""

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError

from . import __version__
from .config import load_config
from .main import TMXCWB


def _add_common(parser: argparse.ArgumentParser):
    parser.add_argument(
        "-c", "--config",
        default="tmx-cwb.yaml",
        help="Configuration file (default: tmx-cwb.yaml)"
    )
    parser.add_argument(
        "-r", "--registry",
        help="CWB registry folder (default: $CORPUS_REGISTRY or cwb-config -r)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print progress to stderr"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tmx-cwb",
        description="Convert TMX translation memories to and from aligned CWB corpora",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import a TMX file, guessing the two languages
  tmx-cwb tmx2cwb memory.tmx

  # Import choosing languages and tokenizing the source side
  tmx-cwb tmx2cwb memory.tmx --from PT --to EN --tokenize-source -n memory

  # Export an aligned pair back to TMX
  tmx-cwb cwb2tmx memory_pt memory_en --source-lang PT --target-lang EN -o out.tmx
        """
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    to_cwb = commands.add_parser("tmx2cwb", help="Import a TMX file as aligned corpora")
    to_cwb.add_argument("tmx", help="TMX file")
    to_cwb.add_argument("--from", dest="from_lang", help="Source language")
    to_cwb.add_argument("--to", dest="to_lang", help="Target language")
    to_cwb.add_argument("-n", "--corpus-name", help="Corpus base name (default: from the TMX file name)")
    to_cwb.add_argument("-d", "--corpora", help="Folder for corpus data (default: /corpora)")
    to_cwb.add_argument("--tokenize-source", action="store_true", default=None,
                        help="Tokenize source segments")
    to_cwb.add_argument("--tokenize-target", action="store_true", default=None,
                        help="Tokenize target segments")
    to_cwb.add_argument("--keep-staging", action="store_true", default=None,
                        help="Keep the staging files (*.source.cqp, *.target.cqp, *.align.txt)")
    _add_common(to_cwb)

    to_tmx = commands.add_parser("cwb2tmx", help="Export aligned corpora as TMX")
    to_tmx.add_argument("source", help="Source corpus name")
    to_tmx.add_argument("target", help="Target corpus name")
    to_tmx.add_argument("--source-lang", required=True, help="Language code of the source corpus")
    to_tmx.add_argument("--target-lang", required=True, help="Language code of the target corpus")
    to_tmx.add_argument("-o", "--output", help="Output TMX file (default: stdout)")
    _add_common(to_tmx)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    overrides = {}
    if getattr(args, "keep_staging", None):
        overrides["tmx2cwb"] = {"keep_staging": True}

    try:
        settings = load_config(args.config, overrides)
    except ValidationError as e:
        print(f"Error: invalid configuration in {args.config}: {e.error_count()} problem(s), "
              f"first: {e.errors()[0]['msg']}", file=sys.stderr)
        return 2

    converter = TMXCWB(settings=settings, verbose=args.verbose)

    if args.command == "tmx2cwb":
        result = converter.to_cwb(
            args.tmx,
            from_lang=args.from_lang,
            to_lang=args.to_lang,
            corpus_name=args.corpus_name,
            corpora=args.corpora,
            registry=args.registry,
            tokenize_source=args.tokenize_source,
            tokenize_target=args.tokenize_target,
        )
    else:
        result = converter.to_tmx(
            args.source,
            args.target,
            args.source_lang,
            args.target_lang,
            output=args.output,
            registry=args.registry,
        )

    return result.exit_code


def tmx2cwb() -> int:
    """Console entry point for ``tmx2cwb``."""
    return main(["tmx2cwb", *sys.argv[1:]])


def cwb2tmx() -> int:
    """Console entry point for ``cwb2tmx``."""
    return main(["cwb2tmx", *sys.argv[1:]])


if __name__ == "__main__":
    sys.exit(main())
