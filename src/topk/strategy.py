import logging
from collections.abc import Sized
from typing import Iterable, List, Optional, TypeVar

from topk.config import SelectionConfig
from topk.errors import require_non_negative, require_not_none
from topk.order import Order, as_sort_key, natural_order, reverse_order
from topk.selector import BoundedSelector

T = TypeVar("T")

logger = logging.getLogger(__name__)


def select_top_k(
    source: Iterable[Optional[T]],
    k: int,
    order: Order,
    config: Optional[SelectionConfig] = None,
) -> List[T]:
    """
    Returns up to `k` elements of `source` that rank first under `order`, in
    ascending `order`. `None` elements in `source` are skipped.

    When every element is going to be retained anyway and `source` is large,
    a single full sort is cheaper than repeated bounded insertions, so that
    path is taken instead.
    """
    require_not_none(source, "source")
    require_not_none(order, "order")
    require_non_negative(k, "k")

    if config is None:
        config = SelectionConfig.default()

    if isinstance(source, Sized):
        source_len = len(source)
        if k >= source_len > config.full_sort_threshold():
            logger.debug(
                "Retaining all of %d source elements (k=%d); using a full sort.",
                source_len,
                k,
            )
            return sorted(
                (element for element in source if element is not None),
                key=as_sort_key(order),
            )

    return bounded_select(source, k, order)


def select_top_k_natural(
    source: Iterable[Optional[T]], k: int, config: Optional[SelectionConfig] = None
) -> List[T]:
    """Like `select_top_k()`, ranking by the elements' natural (`<`) order."""
    return select_top_k(source, k, natural_order, config)


def select_top_k_descending(
    source: Iterable[Optional[T]], k: int, config: Optional[SelectionConfig] = None
) -> List[T]:
    """Returns the `k` largest elements of `source`, largest first."""
    return select_top_k(source, k, reverse_order(natural_order), config)


def bounded_select(source: Iterable[Optional[T]], k: int, order: Order) -> List[T]:
    """
    Always selects through a `BoundedSelector`, regardless of how `k`
    compares to the size of `source`. The selector's capacity is limited to
    the source length when it is known.
    """
    require_not_none(source, "source")
    require_not_none(order, "order")
    require_non_negative(k, "k")

    if isinstance(source, Sized):
        if len(source) == 0:
            return []
        k = min(k, len(source))

    if k == 0:
        return []

    selector = BoundedSelector[T](k, order)
    for element in source:
        selector.offer(element)
    return selector.drain()
