"""Command-line interface for shellmate."""

import argparse
import logging

from shellmate import __version__
from shellmate.config import load_config
from shellmate.shell.loop import shell_loop


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="shellmate",
        description="Run bash with a language model watching for failed commands",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "-m",
        "--model",
        help="LiteLLM model string to use for suggestions",
    )
    parser.add_argument(
        "-e",
        "--explain",
        action="store_true",
        help="Show the model's explanation under each suggestion",
    )
    parser.add_argument(
        "--context-bytes",
        type=int,
        metavar="N",
        help="Byte budget for the shell history sent to the model",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Seconds to wait for the model before giving up",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )

    config = load_config()
    if args.model:
        config.model = args.model
    if args.explain:
        config.show_explanation = True
    if args.context_bytes is not None:
        config.context_bytes = max(args.context_bytes, 0)
    if args.timeout is not None and args.timeout > 0:
        config.request_timeout = args.timeout

    return shell_loop(config)


def entrypoint() -> None:
    raise SystemExit(main())
