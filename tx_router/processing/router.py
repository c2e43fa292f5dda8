import dataclasses
import re
from typing import Dict, List, Optional, Protocol

from tx_router.config.types import Chain, Chains, Subscription
from tx_router.filters.message_filter import MessageFilter
from tx_router.metrics.manager import MetricsManager
from tx_router.state.guard import OrderingGuard
from tx_router.types.report import Report
from tx_router.types.reportables import (
    NodeConnectError,
    Reportable,
    Transaction,
    TransactionError,
)
from tx_router.utils.exceptions import HeightParseError
from tx_router.utils.logger import logger


HEIGHT_PATTERN = re.compile(r"[+-]?[0-9]+")
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class DestinationPolicy(Protocol):
    """Protocol deciding how routed reports are collected per destination."""

    def record(self, reports: Dict[str, Report], destination: str, report: Report) -> None:
        ...


class LastWriteWinsPolicy:
    """
    Keeps one report per destination per routing pass.

    When several subscriptions route to the same destination, the report of
    the subscription declared last replaces the earlier ones.
    """

    def record(self, reports: Dict[str, Report], destination: str, report: Report) -> None:
        previous = reports.get(destination)
        if previous is not None and previous.subscription is not None:
            logger.debug(
                f"Report for {destination} from subscription "
                f"{previous.subscription.name} superseded by "
                f"{report.subscription.name if report.subscription else None}"
            )
        reports[destination] = report


class Filterer:
    """
    Routes reports to reporters according to subscriptions.

    For every incoming report, each subscription is evaluated in declaration
    order. A subscription whose chain cannot be resolved is skipped. Node and
    fetch errors pass only when the subscription asks for them; transactions
    go through the failed-transaction policy, the per-chain ordering guard and
    the recursive message filter.
    """

    def __init__(
        self,
        chains: Chains,
        subscriptions: List[Subscription],
        metrics: Optional[MetricsManager] = None,
        guard: Optional[OrderingGuard] = None,
        policy: Optional[DestinationPolicy] = None,
    ) -> None:
        """
        Initialize the Filterer.

        Args:
            chains: Configured chains, used to resolve subscription chains.
            subscriptions: Subscriptions, in the order they are evaluated.
            metrics: Counter sink for matched and filtered outcomes.
            guard: Ordering guard, shared by every subscription.
            policy: How reports are collected per destination.
        """
        self.chains = chains
        self.subscriptions = subscriptions
        self.metrics = metrics or MetricsManager()
        self.guard = guard or OrderingGuard()
        self.policy = policy or LastWriteWinsPolicy()
        self.message_filter = MessageFilter(self.metrics)

    def get_reportables_for_reporters(self, report: Report) -> Dict[str, Report]:
        """
        Route a report to every subscription it matches.

        Args:
            report: The incoming report.

        Returns:
            Dict[str, Report]: Routed reports keyed by reporter name.

        Raises:
            HeightParseError: If a transaction height is not an integer.
        """
        reportables: Dict[str, Report] = {}

        for subscription in self.subscriptions:
            chain = self.chains.find_by_name(subscription.chain)
            if chain is None:
                logger.warning(
                    f"Chain {subscription.chain} for subscription "
                    f"{subscription.name} not found, skipping"
                )
                continue

            filtered = self.filter_for_subscription(
                report.reportable, chain, subscription
            )
            if filtered is None:
                continue

            logger.info(
                f"Got report of type {report.reportable.type()} "
                f"for subscription {subscription.name}"
            )
            self.policy.record(
                reportables,
                subscription.reporter,
                Report(
                    chain=report.chain,
                    node=report.node,
                    reportable=filtered,
                    subscription=subscription,
                ),
            )

        return reportables

    def filter_for_subscription(
        self,
        reportable: Reportable,
        chain: Chain,
        subscription: Subscription,
    ) -> Optional[Reportable]:
        """
        Apply one subscription's policy to a reportable.

        Returns:
            The reportable to deliver, or None if it is filtered out.
        """
        if isinstance(reportable, TransactionError):
            return self._filter_node_error(
                reportable,
                subscription,
                "Got transaction error, skipping as node errors logging is disabled",
            )

        if isinstance(reportable, NodeConnectError):
            return self._filter_node_error(
                reportable,
                subscription,
                "Got node error, skipping as node errors logging is disabled",
            )

        if isinstance(reportable, Transaction):
            return self._filter_transaction(reportable, chain, subscription)

        logger.error(f"Unsupported reportable type {reportable.type()}, ignoring")
        self.metrics.log_filtered_event(subscription.reporter, reportable.type())
        return None

    def _filter_node_error(
        self,
        reportable: Reportable,
        subscription: Subscription,
        skip_message: str,
    ) -> Optional[Reportable]:
        if not subscription.log_node_errors:
            logger.debug(skip_message)
            self.metrics.log_filtered_event(subscription.reporter, reportable.type())
            return None

        self.metrics.log_matched_event(subscription.reporter, reportable.type())
        return reportable

    def _filter_transaction(
        self,
        tx: Transaction,
        chain: Chain,
        subscription: Subscription,
    ) -> Optional[Reportable]:
        if not subscription.log_failed_transactions and tx.failed:
            logger.debug(f"Transaction {tx.get_hash()} is failed, skipping")
            self.metrics.log_filtered_event(subscription.reporter, tx.type())
            return None

        height = parse_height(tx)

        if not self.guard.admit(chain.name, height):
            logger.debug(
                f"Transaction {tx.get_hash()} at height {height} is older than "
                f"the last one received on {chain.name}, skipping"
            )
            self.metrics.log_filtered_event(subscription.reporter, tx.type())
            return None

        messages = self.message_filter.filter_messages(
            tx.messages, subscription, internal=False
        )

        if not messages:
            logger.debug(
                f"All messages in transaction {tx.get_hash()} were filtered out, skipping"
            )
            self.metrics.log_filtered_event(subscription.reporter, tx.type())
            return None

        self.metrics.log_matched_event(subscription.reporter, tx.type())
        # Subscriptions share the incoming tree, so the pruned list goes on a copy
        return dataclasses.replace(tx, messages=messages)


def parse_height(tx: Transaction) -> int:
    """
    Read a transaction height as a signed 64-bit integer.

    Only an optional sign followed by ASCII digits is accepted. Whitespace,
    digit separators and other Unicode digits are rejected.

    Raises:
        HeightParseError: If the height is not a base-10 int64.
    """
    height = tx.height
    if not isinstance(height, str) or HEIGHT_PATTERN.fullmatch(height) is None:
        reason = "not a base-10 integer"
    else:
        value = int(height, 10)
        if INT64_MIN <= value <= INT64_MAX:
            return value
        reason = "out of int64 range"

    logger.critical(f"Error converting height {height!r} of {tx.get_hash()} to int: {reason}")
    raise HeightParseError(f"Invalid height {height!r} for transaction {tx.get_hash()}: {reason}")
