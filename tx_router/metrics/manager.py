from collections import Counter
from threading import Lock
from typing import Dict

from tx_router.utils.logger import logger


class MetricsManager:
    """
    In-process counters for routing outcomes.

    ``matched`` and ``filtered`` are keyed by ``(destination, reportable
    type)``, e.g. ``("sqs", "Transaction")``. ``filter_errors`` is keyed by
    ``(destination, message type)``, e.g. ``("sqs",
    "/cosmos.bank.v1beta1.MsgSend")``, since evaluation fails per message.
    Counters are kept in memory only and exposed through ``get_stats``.
    """

    def __init__(self) -> None:
        self.matched: Counter = Counter()
        self.filtered: Counter = Counter()
        self.filter_errors: Counter = Counter()
        self._lock = Lock()

    def log_matched_event(self, destination: str, event_type: str) -> None:
        with self._lock:
            self.matched[(destination, event_type)] += 1
        logger.debug(f"Matched {event_type} for {destination}")

    def log_filtered_event(self, destination: str, event_type: str) -> None:
        with self._lock:
            self.filtered[(destination, event_type)] += 1
        logger.debug(f"Filtered {event_type} for {destination}")

    def log_filter_error(self, destination: str, message_type: str) -> None:
        with self._lock:
            self.filter_errors[(destination, message_type)] += 1

    def get_matched(self, destination: str, event_type: str) -> int:
        return self.matched[(destination, event_type)]

    def get_filtered(self, destination: str, event_type: str) -> int:
        return self.filtered[(destination, event_type)]

    def get_stats(self) -> Dict[str, Dict[str, int]]:
        """
        Get current counter values.

        Returns:
            Dictionary of counter name to ``"destination:type"`` counts.
        """

        def flatten(counter: Counter) -> Dict[str, int]:
            return {f"{key[0]}:{key[1]}": value for key, value in counter.items()}

        with self._lock:
            return {
                "matched": flatten(self.matched),
                "filtered": flatten(self.filtered),
                "filter_errors": flatten(self.filter_errors),
            }

