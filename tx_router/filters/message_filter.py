import dataclasses
from typing import List, Optional, TYPE_CHECKING

from tx_router.filters.base import FilterException
from tx_router.metrics.manager import MetricsManager
from tx_router.types.messages import (
    Message,
    MessageVisitor,
    ParsedMessage,
    UnparsedMessage,
    UnsupportedMessage,
)
from tx_router.utils.logger import logger

if TYPE_CHECKING:
    from tx_router.config.types import Subscription


class MessageFilter:
    """
    Decides, per message, whether it is kept, dropped or kept with pruned
    nested messages for a given subscription.

    Top-level messages are always checked against the subscription filters.
    Nested messages are only checked when the subscription sets
    ``filter_internal_messages``. A filter that fails to evaluate lets the
    message through.
    """

    def __init__(self, metrics: Optional[MetricsManager] = None) -> None:
        self.metrics = metrics or MetricsManager()

    def filter_message(
        self, message: Message, subscription: "Subscription", internal: bool
    ) -> Optional[Message]:
        """
        Filter a message and, recursively, the messages nested in it.

        Args:
            message: The message to filter.
            subscription: The subscription whose flags and filters apply.
            internal: Whether the message is nested inside another message.

        Returns:
            The message, a copy of it with pruned nested messages, or None
            if it should not be delivered. The input is never modified.
        """
        return message.accept(_FilterVisitor(self, subscription, internal))

    def filter_messages(
        self, messages: List[Message], subscription: "Subscription", internal: bool
    ) -> List[Message]:
        """Filter a list of messages, keeping survivors in their original order."""
        filtered = []
        for message in messages:
            result = self.filter_message(message, subscription, internal)
            if result is not None:
                filtered.append(result)
        return filtered


class _FilterVisitor(MessageVisitor):
    """Applies one subscription's policy to a single message."""

    def __init__(
        self,
        message_filter: MessageFilter,
        subscription: "Subscription",
        internal: bool,
    ) -> None:
        self.message_filter = message_filter
        self.subscription = subscription
        self.internal = internal

    def visit_unsupported(self, message: UnsupportedMessage) -> Optional[Message]:
        if self.subscription.log_unknown_messages:
            logger.error(f"Unsupported message type: {message.msg_type}")
            return message

        logger.debug(f"Unsupported message type: {message.msg_type}, skipping")
        return None

    def visit_unparsed(self, message: UnparsedMessage) -> Optional[Message]:
        if self.subscription.log_unparsed_messages:
            logger.error(f"Error parsing message of type {message.msg_type}: {message.error}")
            return message

        logger.debug(
            f"Not logging unparsed messages, skipping {message.msg_type}: {message.error}"
        )
        return None

    def visit_parsed(self, message: ParsedMessage) -> Optional[Message]:
        if not self.internal or self.subscription.filter_internal_messages:
            if not self._matches(message):
                return None

        if message.is_leaf():
            return message

        children = message.get_messages()
        nested = self.message_filter.filter_messages(
            children, self.subscription, internal=True
        )

        if not nested:
            logger.debug(
                f"Message {message.msg_type} has 0 messages inside after filtering, skipping"
            )
            return None

        if len(nested) == len(children) and all(
            kept is child for kept, child in zip(nested, children)
        ):
            return message

        # Pruned containers are rebuilt; the incoming tree is never mutated
        return dataclasses.replace(message, messages=nested)

    def _matches(self, message: ParsedMessage) -> bool:
        values = message.get_values()
        try:
            matches = self.subscription.filters.matches(values)
        except FilterException as e:
            logger.error(f"Error checking if message {message.msg_type} matches filters: {e}")
            self.message_filter.metrics.log_filter_error(
                self.subscription.reporter, message.msg_type
            )
            return True

        logger.debug(
            f"Matching {message.msg_type} values={values} "
            f"filters={self.subscription.filters} matches={matches}"
        )

        if not matches:
            logger.debug(f"Message {message.msg_type} is ignored by filters")
        return matches
