import re

from tx_router.filters.base import FilterException, Values


class EqualityMatcher:
    """
    Matches a single attribute against a literal value.

    Accepts expressions of the form ``key = 'value'`` or ``key != 'value'``.
    This only covers plain comparisons; richer query languages are plugged in
    by providing another object with a ``matches`` method.
    """

    EXPRESSION = re.compile(r"^\s*(?P<key>[\w.\-]+)\s*(?P<op>!=|=)\s*'(?P<value>[^']*)'\s*$")

    def __init__(self, key: str, value: str, negate: bool = False):
        self.key = key
        self.value = value
        self.negate = negate

    @classmethod
    def parse(cls, expression: str) -> "EqualityMatcher":
        """
        Build a matcher from an expression string.

        Args:
            expression: The expression, e.g. ``message.action = '/cosmos.bank.v1beta1.MsgSend'``.

        Returns:
            EqualityMatcher: The parsed matcher.

        Raises:
            FilterException: If the expression cannot be parsed.
        """
        match = cls.EXPRESSION.match(expression)
        if not match:
            raise FilterException(f"Invalid filter expression: {expression!r}")

        return cls(
            key=match.group("key"),
            value=match.group("value"),
            negate=match.group("op") == "!=",
        )

    def matches(self, values: Values) -> bool:
        if self.key not in values:
            raise FilterException(f"Attribute {self.key!r} not present in message")

        equal = values[self.key] == self.value
        return not equal if self.negate else equal

    def __repr__(self) -> str:
        op = "!=" if self.negate else "="
        return f"{self.key} {op} '{self.value}'"
