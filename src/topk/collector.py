import itertools
import logging
from collections import deque
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import (
    Callable,
    Deque,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    TypeVar,
)

from topk.config import SelectionConfig
from topk.errors import InvalidArgument, require_non_negative, require_not_none
from topk.order import Order, natural_order, reverse_order
from topk.selector import BoundedSelector

T = TypeVar("T")
A = TypeVar("A")  # Mutable accumulation container
R = TypeVar("R")  # Result

logger = logging.getLogger(__name__)

# Marks the end of the partition stream.
_EXHAUSTED = object()


class Collector(Generic[T, A, R]):
    """
    A mutable reduction described by four functions:

    - `supplier()` creates an empty container,
    - `accumulator(container, element)` folds one element into a container,
    - `combiner(left, right)` folds `right` into `left` and returns the result,
    - `finisher(container)` turns a container into the final result.

    A reduction over a partitioned source gives each partition its own
    container. Every container is owned by exactly one worker at a time, and
    a combine step owns both of its operands, so no locking is needed.
    """

    def __init__(
        self,
        supplier: Callable[[], A],
        accumulator: Callable[[A, T], None],
        combiner: Callable[[A, A], A],
        finisher: Callable[[A], R],
    ) -> None:
        self.supplier = supplier
        self.accumulator = accumulator
        self.combiner = combiner
        self.finisher = finisher

    def accumulate_all(self, elements: Iterable[T]) -> A:
        container = self.supplier()
        for element in elements:
            self.accumulator(container, element)
        return container


def to_list(
    k: int, order: Order, config: Optional[SelectionConfig] = None
) -> Collector[Optional[T], BoundedSelector[T], List[T]]:
    """
    Returns a collector that retains the `k` elements ranking first under
    `order` and finishes into a list sorted by `order`. `None` elements are
    ignored.

    The size of the source is not known when a container is created, so `k`
    may not exceed the configured collector ceiling.
    """
    require_not_none(order, "order")
    require_non_negative(k, "k")

    if config is None:
        config = SelectionConfig.default()
    ceiling = config.collector_capacity_ceiling()
    if k > ceiling:
        raise InvalidArgument(
            "Requested limit of {} is too large for reliable operation "
            "(the ceiling is {}).".format(k, ceiling)
        )

    return Collector(
        supplier=lambda: BoundedSelector[T](k, order),
        accumulator=BoundedSelector.offer,
        combiner=BoundedSelector.merge,
        finisher=BoundedSelector.drain,
    )


def to_list_natural(
    k: int, config: Optional[SelectionConfig] = None
) -> Collector[Optional[T], BoundedSelector[T], List[T]]:
    return to_list(k, natural_order, config)


def to_list_reverse_order(
    k: int, config: Optional[SelectionConfig] = None
) -> Collector[Optional[T], BoundedSelector[T], List[T]]:
    return to_list(k, reverse_order(natural_order), config)


def collect(source: Iterable[T], collector: Collector[T, A, R]) -> R:
    require_not_none(source, "source")
    require_not_none(collector, "collector")
    return collector.finisher(collector.accumulate_all(source))


def partition(
    source: Iterable[T],
    size: Optional[int] = None,
    config: Optional[SelectionConfig] = None,
) -> Iterator[List[T]]:
    """
    Lazily splits `source` into consecutive lists of at most `size` elements.
    `size` defaults to the configured partition size.
    """
    require_not_none(source, "source")
    if size is None:
        if config is None:
            config = SelectionConfig.default()
        size = config.partition_size()
    if size < 1:
        raise InvalidArgument(
            "Partition size must be at least 1 (got {}).".format(size)
        )
    return _chunks(iter(source), size)


def _chunks(it: Iterator[T], size: int) -> Iterator[List[T]]:
    while True:
        chunk = list(itertools.islice(it, size))
        if len(chunk) == 0:
            return
        yield chunk


def collect_partitioned(
    partitions: Iterable[Iterable[T]],
    collector: Collector[T, A, R],
    max_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
    config: Optional[SelectionConfig] = None,
) -> R:
    """
    Accumulates each partition into its own container on a pool of workers
    and folds the finished containers, in partition order, into a running
    result that is finished at the end.

    At most `max_workers` partitions are in flight at once. The next
    partition is only pulled from `partitions` once a slot frees up, so a
    lazily generated (or unbounded) stream of partitions is never read ahead.

    When `executor` is provided it is used as is (and left running).
    Otherwise a `ThreadPoolExecutor` with `max_workers` threads is created
    for the duration of the call. `max_workers` defaults to the configured
    value.
    """
    require_not_none(partitions, "partitions")
    require_not_none(collector, "collector")

    if max_workers is None:
        if config is None:
            config = SelectionConfig.default()
        max_workers = config.max_workers()
    if max_workers < 1:
        raise InvalidArgument(
            "`max_workers` must be at least 1 (got {}).".format(max_workers)
        )

    if executor is not None:
        return _reduce_partitions(executor, partitions, collector, max_workers)
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return _reduce_partitions(pool, partitions, collector, max_workers)


def _reduce_partitions(
    executor: Executor,
    partitions: Iterable[Iterable[T]],
    collector: Collector[T, A, R],
    max_in_flight: int,
) -> R:
    in_flight: Deque[Future] = deque()
    result: Optional[A] = None
    num_folded = 0

    def fold_oldest() -> None:
        nonlocal result, num_folded
        # Folding in submission order keeps the combination deterministic.
        # `result()` re-raises any error from the worker.
        container = in_flight.popleft().result()
        if num_folded == 0:
            result = container
        else:
            result = collector.combiner(result, container)
        num_folded += 1

    it = iter(partitions)
    while True:
        if len(in_flight) >= max_in_flight:
            fold_oldest()
            continue
        part = next(it, _EXHAUSTED)
        if part is _EXHAUSTED:
            break
        in_flight.append(executor.submit(collector.accumulate_all, part))

    while len(in_flight) > 0:
        fold_oldest()

    logger.debug("Combined %d partition results.", num_folded)
    if num_folded == 0:
        return collector.finisher(collector.supplier())
    return collector.finisher(result)

