"""Mini README: Aggregation layer.

``transactions`` merges record streams, ``filtering`` selects what is
visible, and ``aggregator`` performs the concurrent all-or-nothing load.
"""

from .aggregator import TransactionAggregator
from .filtering import FilterFlags, apply_filter
from .transactions import Transaction, aggregate, net_total

__all__ = [
    "FilterFlags",
    "Transaction",
    "TransactionAggregator",
    "aggregate",
    "apply_filter",
    "net_total",
]
