import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from .errors import InvalidSourceError, UnsupportedSourceError
from .parse import parse_source

# Configure module-level logger
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

EXIT_OK = 0
EXIT_UNSUPPORTED = 1
EXIT_INVALID = 2


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mod-source",
        description="Parse Git/GitHub module sources into URL, path, subdir and ref.",
    )
    parser.add_argument(
        "sources",
        nargs="+",
        metavar="SOURCE",
        help="Module source (e.g., 'github.com/org/repo//sub?ref=v1' or 'git::https://host/repo.git')",
    )
    parser.add_argument(
        "--field",
        choices=("url", "path", "subdir", "ref"),
        help="Print only this field of each parsed source",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indent JSON output by this many spaces (default: compact)",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=os.getenv("MODSOURCE_LOG_LEVEL", "INFO").upper(),
        help="Logging level (default: $MODSOURCE_LOG_LEVEL or INFO)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    exit_code = EXIT_OK
    for raw in args.sources:
        try:
            source = parse_source(raw)
        except InvalidSourceError as exc:
            logger.error("Invalid module source %r: %s", raw, exc)
            exit_code = EXIT_INVALID
            continue
        except UnsupportedSourceError as exc:
            logger.error("Unsupported module source %r: %s", raw, exc)
            exit_code = max(exit_code, EXIT_UNSUPPORTED)
            continue

        logger.debug("Parsed %r as %s", raw, source.url)
        if args.field:
            print(getattr(source, args.field))
        else:
            print(source.model_dump_json(indent=args.indent))

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
