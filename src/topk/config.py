import pathlib
import yaml
from typing import Any, Dict, Optional

from topk.errors import InvalidArgument

# Above this source length, a request that retains every element is served by
# a single full sort instead of repeated bounded insertions.
DEFAULT_FULL_SORT_THRESHOLD = 1000

# The collector cannot see the source size before it allocates, so K is capped.
DEFAULT_COLLECTOR_CAPACITY_CEILING = 100_000

DEFAULT_MAX_WORKERS = 4
DEFAULT_PARTITION_SIZE = 10_000


class SelectionConfig:
    """
    Tunables used by the selection entry points. Every key is optional; a
    missing key falls back to the module level default.

    Example:

      full_sort_threshold: 1000
      collector_capacity_ceiling: 100000
      parallel:
        max_workers: 4
        partition_size: 10000
    """

    @classmethod
    def load_from_file(cls, file_path: str | pathlib.Path) -> "SelectionConfig":
        with open(file_path, "r", encoding="UTF-8") as file:
            return cls(yaml.load(file, Loader=yaml.Loader))

    @classmethod
    def load_from_yaml_str(cls, yaml_str: str) -> "SelectionConfig":
        return cls(yaml.load(yaml_str, Loader=yaml.Loader))

    @classmethod
    def default(cls) -> "SelectionConfig":
        return cls({})

    def __init__(self, raw: Optional[Dict[str, Any]]) -> None:
        self._raw = raw if raw is not None else {}

    def full_sort_threshold(self) -> int:
        return self._read_int(
            self._raw, "full_sort_threshold", DEFAULT_FULL_SORT_THRESHOLD
        )

    def collector_capacity_ceiling(self) -> int:
        return self._read_int(
            self._raw, "collector_capacity_ceiling", DEFAULT_COLLECTOR_CAPACITY_CEILING
        )

    def max_workers(self) -> int:
        value = self._read_int(self._parallel(), "max_workers", DEFAULT_MAX_WORKERS)
        if value == 0:
            raise InvalidArgument("`max_workers` must be at least 1.")
        return value

    def partition_size(self) -> int:
        value = self._read_int(
            self._parallel(), "partition_size", DEFAULT_PARTITION_SIZE
        )
        if value == 0:
            raise InvalidArgument("`partition_size` must be at least 1.")
        return value

    def _parallel(self) -> Dict[str, Any]:
        if "parallel" not in self._raw or self._raw["parallel"] is None:
            return {}
        return self._raw["parallel"]

    @staticmethod
    def _read_int(section: Dict[str, Any], key: str, default: int) -> int:
        if key not in section:
            return default
        value = section[key]
        # N.B. `bool` is a subclass of `int`.
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise InvalidArgument(
                "Config value `{}` must be a non-negative integer (got {!r}).".format(
                    key, value
                )
            )
        return value
