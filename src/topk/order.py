import functools
from typing import Any, Callable, TypeVar

T = TypeVar("T")

# An `Order` returns a negative number iff its first argument ranks before its
# second argument, zero iff they rank equally, and a positive number otherwise.
# Selection keeps the elements that rank first.
Order = Callable[[T, T], int]


def natural_order(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def reverse_order(order: Order = natural_order) -> Order:
    def reversed_order(left, right) -> int:
        return order(right, left)

    return reversed_order


def by_key(key: Callable[[T], Any], reverse: bool = False) -> Order:
    """
    Ranks elements by the natural order of `key(element)`. For example,
    `by_key(lambda r: r.score, reverse=True)` ranks the highest scores first.
    """

    def compare_keys(left: T, right: T) -> int:
        left_key = key(left)
        right_key = key(right)
        result = (left_key > right_key) - (left_key < right_key)
        return -result if reverse else result

    return compare_keys


def as_sort_key(order: Order) -> Callable[[Any], Any]:
    """Adapts an `Order` for use with `sorted()`, `list.sort()` and `bisect`."""
    return functools.cmp_to_key(order)
