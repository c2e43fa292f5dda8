from typing import Dict, Iterable, List, Optional, Protocol

from tx_router.utils.logger import logger


# Flat attribute set extracted from a parsed message
Values = Dict[str, str]


class FilterException(Exception):
    """Exception raised when a filter cannot be evaluated.

    Raised by matchers for evaluation errors, as opposed to a plain
    non-match, so callers can apply their own error policy.
    """

    pass


class Matcher(Protocol):
    """Protocol for a single predicate over a message's attribute set.

    Anything with a compatible ``matches`` method can be used, which keeps
    the query language pluggable and makes test doubles trivial.
    """

    def matches(self, values: Values) -> bool:
        """Return whether the values satisfy this predicate.

        Raises:
            FilterException: If the predicate cannot be evaluated.
        """
        ...


class Filters:
    """An ordered collection of matchers forming one subscription filter.

    The collection matches when any of its matchers matches. An empty
    collection matches everything.
    """

    def __init__(self, matchers: Optional[Iterable[Matcher]] = None):
        """Initialize a new filter collection.

        Args:
            matchers: Matchers to evaluate, in order. If None, an empty
                    list will be used.
        """
        self.matchers: List[Matcher] = list(matchers or [])

    def add_matcher(self, matcher: Matcher) -> None:
        """Add a matcher to the end of the collection."""
        self.matchers.append(matcher)

    def matches(self, values: Values) -> bool:
        """Evaluate the matchers against the values.

        Matchers are evaluated in order and evaluation stops at the first
        match.

        Args:
            values: The attribute set of a message.

        Returns:
            True if any matcher matches or there are no matchers.

        Raises:
            FilterException: If a matcher fails to evaluate.
        """
        if not self.matchers:
            return True

        for matcher in self.matchers:
            try:
                if matcher.matches(values):
                    return True
            except FilterException:
                raise
            except Exception as e:
                raise FilterException(f"Error evaluating {matcher!r}: {e}") from e

        logger.debug(f"No matcher matched values: {values}")
        return False

    def __len__(self) -> int:
        return len(self.matchers)

    def __repr__(self) -> str:
        return f"Filters({self.matchers!r})"
