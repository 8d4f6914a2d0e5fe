from __future__ import annotations

import argparse
import logging
from pathlib import Path

from . import converter
from .config import RenderConfig, load_config
from .utils import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="markdocx",
        description="Convert Markdown files into Word (.docx) documents.",
    )
    parser.add_argument("inputs", nargs="+", type=str, help="Markdown file(s) to convert")
    parser.add_argument("-o", "--output", type=str, help="Output DOCX path, or a directory for several inputs")
    parser.add_argument(
        "--mode",
        choices=converter.MODES,
        default=converter.MD_TO_DOCX,
        help="Conversion direction",
    )
    parser.add_argument("--config", type=str, help="YAML file with style overrides")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)

    if len(args.inputs) > 1 and args.output and not Path(args.output).is_dir():
        parser.error("--output must be an existing directory when converting several files")

    config = RenderConfig()
    if args.config:
        logging.info("Loading style config %s", args.config)
        config = load_config(args.config)

    converted = []
    for input_name in args.inputs:
        logging.info("Converting %s", input_name)
        output_path = converter.convert_file(input_name, args.output, mode=args.mode, config=config)
        logging.info("Saved %s (%d bytes)", output_path, output_path.stat().st_size)
        converted.append(output_path)

    logging.info("Successfully converted %d file%s", len(converted), "" if len(converted) == 1 else "s")


if __name__ == "__main__":
    main()
