import logging
import random
import time
from typing import Any, Callable, List, Tuple

from tabulate import tabulate

from topk.collector import collect_partitioned, partition, to_list
from topk.config import SelectionConfig
from topk.order import Order, as_sort_key, natural_order, reverse_order
from topk.strategy import bounded_select, select_top_k
from topk.utils import set_up_logging

logger = logging.getLogger(__name__)


def register_command(subparsers) -> None:
    parser = subparsers.add_parser(
        "bench",
        help="Compare bounded selection against a full sort on random data.",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=100_000,
        help="The number of elements in the generated source.",
    )
    parser.add_argument(
        "-k",
        type=int,
        default=10,
        help="The number of elements to select.",
    )
    parser.add_argument(
        "--partitions",
        type=int,
        default=4,
        help="The number of partitions used by the parallel run.",
    )
    parser.add_argument(
        "--descending",
        action="store_true",
        help="Select the largest values instead of the smallest.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Seed for the source shuffle.",
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


def make_source(size: int, seed: int) -> List[float]:
    source = [float(i) for i in range(size)]
    random.Random(seed).shuffle(source)
    return source


def full_sort(source: List[Any], k: int, order: Order) -> List[Any]:
    return sorted(
        (element for element in source if element is not None),
        key=as_sort_key(order),
    )[:k]


def run_bench(
    size: int,
    k: int,
    num_partitions: int,
    descending: bool,
    seed: int,
    config: SelectionConfig,
) -> List[Tuple[str, float, bool]]:
    """
    Times each selection method on the same source. Returns rows of
    (method, seconds, matches the full sort baseline).
    """
    source = make_source(size, seed)
    order = reverse_order(natural_order) if descending else natural_order
    partition_size = max(1, -(-size // max(1, num_partitions)))

    methods: List[Tuple[str, Callable[[], List[Any]]]] = [
        ("sorted", lambda: full_sort(source, k, order)),
        ("bounded", lambda: bounded_select(source, k, order)),
        ("strategy", lambda: select_top_k(source, k, order, config)),
        (
            "partitioned",
            lambda: collect_partitioned(
                partition(source, partition_size),
                to_list(k, order, config),
                max_workers=max(1, num_partitions),
            ),
        ),
    ]

    rows = []
    expected = None
    for name, method in methods:
        start = time.perf_counter()
        result = method()
        elapsed = time.perf_counter() - start
        if expected is None:
            expected = result
        logger.debug("%s took %.4f seconds.", name, elapsed)
        rows.append((name, elapsed, result == expected))
    return rows


def main(args) -> None:
    set_up_logging(
        filename=args.log_file,
        debug_mode=args.debug,
        also_console=args.also_console,
    )

    config = (
        SelectionConfig.load_from_file(args.config_file)
        if args.config_file is not None
        else SelectionConfig.default()
    )
    rows = run_bench(
        args.size, args.k, args.partitions, args.descending, args.seed, config
    )
    print(
        tabulate(
            [(name, "{:.4f}".format(secs), matches) for name, secs, matches in rows],
            headers=["Method", "Seconds", "Matches sorted()"],
            tablefmt="simple_grid",
        )
    )
