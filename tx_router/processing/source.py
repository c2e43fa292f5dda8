from abc import ABC, abstractmethod
from queue import Empty, Queue
from typing import Iterator, Optional

from tx_router.types.report import Report
from tx_router.utils.logger import logger


class ReportSource(ABC):
    """
    Base abstract class for everything that feeds reports into the router.

    Sources wrap the data-fetching layer, which polls chain nodes and decodes
    transactions into the report model. The router never talks to nodes
    directly.
    """

    @abstractmethod
    def connect(self) -> None:
        """
        Prepare the source for listening.

        Raises:
            ProcessingError: If the source cannot be started.
        """
        pass

    @abstractmethod
    def listen(self) -> Iterator[Report]:
        """
        Yield the reports currently available.

        The iterator is exhausted once no more reports are ready; callers
        call ``listen`` again on their next cycle.

        Yields:
            Report: Reports in the order they were produced.
        """
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release any resources held by the source."""
        pass

    @abstractmethod
    def get_source_id(self) -> str:
        """
        Get the unique identifier for this source instance.

        Returns:
            str: A string uniquely identifying this source, usually the chain name.
        """
        pass


class QueueReportSource(ReportSource):
    """
    Thread-safe in-memory source.

    Fetchers push reports with ``put`` from their own threads, and a single
    worker drains them with ``listen``.
    """

    def __init__(self, source_id: str, maxsize: int = 0) -> None:
        self.source_id = source_id
        self._queue: "Queue[Report]" = Queue(maxsize=maxsize)
        self._connected = False

    def connect(self) -> None:
        self._connected = True
        logger.debug(f"Report source {self.source_id} connected")

    def put(self, report: Report, timeout: Optional[float] = None) -> None:
        self._queue.put(report, timeout=timeout)

    def listen(self) -> Iterator[Report]:
        while self._connected:
            try:
                yield self._queue.get_nowait()
            except Empty:
                return

    def disconnect(self) -> None:
        self._connected = False
        logger.debug(f"Report source {self.source_id} disconnected")

    def get_source_id(self) -> str:
        return self.source_id

    def pending(self) -> int:
        return self._queue.qsize()
