class TopKError(Exception):
    """
    Base class for errors raised by this package. All of them are raised
    synchronously at call entry, before any element is processed.
    """


class InvalidArgument(TopKError, ValueError):
    """Raised for a negative K, a K above a safety ceiling, or a bad config value."""


class NullReference(TopKError, TypeError):
    """Raised when a required source collection or order is missing."""


def require_not_none(value, name: str) -> None:
    if value is None:
        raise NullReference("`{}` must not be None.".format(name))


def require_non_negative(value: int, name: str) -> None:
    if value < 0:
        raise InvalidArgument("`{}` must be non-negative (got {}).".format(name, value))
