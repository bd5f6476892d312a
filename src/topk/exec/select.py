import logging
import sys
from typing import Iterable, Iterator, Optional, TextIO

from topk.config import SelectionConfig
from topk.strategy import select_top_k_descending, select_top_k_natural
from topk.utils import set_up_logging

logger = logging.getLogger(__name__)


def register_command(subparsers) -> None:
    parser = subparsers.add_parser(
        "select",
        help="Select the top K numbers from a file (or stdin), one number per line.",
    )
    parser.add_argument(
        "-k",
        type=int,
        required=True,
        help="The number of values to select.",
    )
    parser.add_argument(
        "--descending",
        action="store_true",
        help="Select the largest values (largest first) instead of the smallest.",
    )
    parser.add_argument(
        "--input",
        type=str,
        help="Path to the input file. Reads from stdin if omitted.",
    )
    parser.add_argument(
        "--config-file",
        type=str,
        help="Path to a YAML selection config file.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Set to enable debug logging.",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Write logs to this file instead of the console.",
    )
    parser.add_argument(
        "--also-console",
        action="store_true",
        help="When used with --log-file, also write logs to the console.",
    )
    parser.set_defaults(func=main)


def parse_values(lines: Iterable[str]) -> Iterator[Optional[float]]:
    """
    Parses one number per line. Blank lines are yielded as `None` (absent
    values), which selection skips.
    """
    for line_no, line in enumerate(lines, start=1):
        stripped = line.strip()
        if len(stripped) == 0:
            yield None
            continue
        try:
            yield float(stripped)
        except ValueError as ex:
            raise ValueError(
                "Line {}: '{}' is not a number.".format(line_no, stripped)
            ) from ex


def run_select(
    lines: Iterable[str],
    k: int,
    descending: bool,
    out: TextIO,
    config: Optional[SelectionConfig] = None,
) -> None:
    values = list(parse_values(lines))
    logger.debug("Read %d values.", len(values))
    if descending:
        selected = select_top_k_descending(values, k, config)
    else:
        selected = select_top_k_natural(values, k, config)
    for value in selected:
        print(value, file=out)


def main(args) -> None:
    set_up_logging(
        filename=args.log_file,
        debug_mode=args.debug,
        also_console=args.also_console,
    )

    config = (
        SelectionConfig.load_from_file(args.config_file)
        if args.config_file is not None
        else None
    )

    if args.input is None:
        run_select(sys.stdin, args.k, args.descending, sys.stdout, config)
    else:
        with open(args.input, "r", encoding="UTF-8") as file:
            run_select(file, args.k, args.descending, sys.stdout, config)
