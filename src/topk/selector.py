import bisect
import logging
from typing import Generic, List, Optional, TypeVar

from topk.errors import require_non_negative, require_not_none
from topk.order import Order, as_sort_key
from topk.utils import log_verbose

T = TypeVar("T")

logger = logging.getLogger(__name__)


class BoundedSelector(Generic[T]):
    """
    Retains the best `capacity` elements (as ranked by `order`) out of a
    stream of offered elements, in ascending `order`.

    The retained elements are kept in a sorted list that never grows beyond
    `capacity`. While the list is filling up, each element is inserted at its
    sorted position. Once it is full, the last (worst ranked) element is the
    boundary: a candidate that does not strictly precede it is discarded after
    a single comparison. Admitted candidates are placed with a binary search
    and the previous boundary is dropped off the end.

    `None` elements are ignored. Relative order among elements that `order`
    ranks equally is not preserved.

    This class is not thread safe. For parallel selection, use one selector
    per partition and combine them with `merge()`.
    """

    def __init__(self, capacity: int, order: Order) -> None:
        require_non_negative(capacity, "capacity")
        require_not_none(order, "order")
        self._capacity = capacity
        self._order = order
        self._sort_key = as_sort_key(order)
        self._buffer: List[T] = []
        self._boundary: Optional[T] = None

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def populated(self) -> int:
        return len(self._buffer)

    @property
    def boundary(self) -> Optional[T]:
        """The element a candidate must beat. `None` until the selector is full."""
        return self._boundary

    def __len__(self) -> int:
        return len(self._buffer)

    def is_full(self) -> bool:
        return len(self._buffer) == self._capacity

    def offer(self, element: Optional[T]) -> None:
        if element is None or self._capacity == 0:
            return

        if len(self._buffer) < self._capacity:
            bisect.insort_right(self._buffer, element, key=self._sort_key)
            if len(self._buffer) == self._capacity:
                self._boundary = self._buffer[-1]
            return

        # Early discard. Most offers end here once the selector is warmed up.
        if self._order(element, self._boundary) >= 0:
            return

        insert_at = bisect.bisect_right(
            self._buffer, self._sort_key(element), key=self._sort_key
        )
        if insert_at >= self._capacity:
            # The order claims `element` precedes the boundary but also sorts
            # after every retained element; it is not a consistent total order.
            log_verbose(
                logger,
                "Discarding %r: order is inconsistent with the boundary %r.",
                element,
                self._boundary,
            )
            return

        self._buffer.insert(insert_at, element)
        self._buffer.pop()
        self._boundary = self._buffer[-1]

    def merge(self, other: "BoundedSelector[T]") -> "BoundedSelector[T]":
        """
        Offers every element retained by `other` to this selector. `other`
        is left unchanged. Returns `self` so that merges can be chained in a
        reduction.
        """
        # Iterate over a snapshot; `other` may be `self`.
        for element in list(other._buffer):  # pylint: disable=protected-access
            self.offer(element)
        return self

    def drain(self) -> List[T]:
        """
        Returns the retained elements in ascending `order`. The buffer is
        sorted at all times, so this holds whether or not the selector ever
        filled up. This is a terminal operation; do not offer to or merge into
        a drained selector.
        """
        drained = self._buffer
        self._buffer = []
        self._boundary = None
        return drained

    def __repr__(self) -> str:
        return "BoundedSelector(capacity={}, populated={})".format(
            self._capacity, len(self._buffer)
        )
