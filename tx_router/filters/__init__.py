"""Filter module for deciding which messages reach a subscription.

Subscriptions carry a predicate over a message's flat attribute set. This
module holds that predicate and the recursive filter that applies it to a
transaction's message tree.

Key components:
- Matcher: Protocol for a single predicate
- Filters: Collection of matchers forming a subscription filter
- EqualityMatcher: Built-in ``key = 'value'`` matcher
- MessageFilter: Recursive keep/drop/prune decision per message
- FilterFactory: Factory for creating filters
- FilterException: Exception raised when a filter cannot be evaluated
"""

from tx_router.filters.base import (
    Values,
    Matcher,
    Filters,
    FilterException,
)
from tx_router.filters.matchers import EqualityMatcher
from tx_router.filters.factory import FilterFactory
from tx_router.filters.message_filter import MessageFilter

__all__ = [
    "Values",
    "Matcher",
    "Filters",
    "EqualityMatcher",
    "FilterFactory",
    "FilterException",
    "MessageFilter",
]
