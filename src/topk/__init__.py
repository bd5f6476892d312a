__version__ = "0.1.0"
__description__ = "Bounded top-K selection over collections and partitioned streams."
__author__ = "topk developers"
__email__ = "topk@example.com"
__url__ = "https://example.com/topk"

from topk.errors import TopKError, InvalidArgument, NullReference
from topk.order import natural_order, reverse_order, by_key, as_sort_key
from topk.selector import BoundedSelector
from topk.strategy import (
    bounded_select,
    select_top_k,
    select_top_k_natural,
    select_top_k_descending,
)
from topk.collector import (
    Collector,
    to_list,
    to_list_natural,
    to_list_reverse_order,
    collect,
    collect_partitioned,
    partition,
)
