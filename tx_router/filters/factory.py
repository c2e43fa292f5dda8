from typing import Iterable, List

from tx_router.filters.base import Filters, Matcher
from tx_router.filters.matchers import EqualityMatcher


class FilterFactory:
    """Factory for creating filter components.

    This factory provides methods for creating subscription filters either
    from ready matchers or from expression strings found in configuration.
    """

    @staticmethod
    def create_filters(matchers: List[Matcher]) -> Filters:
        """Create a filter collection from the provided matchers.

        Args:
            matchers: Matchers to include, evaluated in the order they
                    appear in the list.

        Returns:
            A Filters instance containing the provided matchers.
        """
        return Filters(matchers)

    @staticmethod
    def from_expressions(expressions: Iterable[str]) -> Filters:
        """Create a filter collection from expression strings.

        Raises:
            FilterException: If any expression is invalid.
        """
        return Filters(EqualityMatcher.parse(expression) for expression in expressions)
