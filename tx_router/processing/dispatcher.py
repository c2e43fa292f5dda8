from typing import Dict, Mapping

from tx_router.processing.router import Filterer
from tx_router.processing.source import ReportSource
from tx_router.reporters.base import Reporter
from tx_router.types.report import Report
from tx_router.utils.exceptions import HeightParseError, ProcessingError
from tx_router.utils.logger import logger


class Dispatcher:
    """
    Dispatcher moves reports from a source through the Filterer to reporters.

    Each routed report goes to the reporter whose name is its destination
    key. A failing reporter does not prevent delivery to the others.
    """

    def __init__(
        self,
        source: ReportSource,
        filterer: Filterer,
        reporters: Mapping[str, Reporter],
    ) -> None:
        """
        Initialize the Dispatcher.

        Args:
            source: The source to read reports from
            filterer: The router deciding who receives each report
            reporters: Reporters keyed by name
        """
        self.source = source
        self.filterer = filterer
        self.reporters: Dict[str, Reporter] = dict(reporters)

    def start(self) -> None:
        """
        Connect the source.

        Reporters are shared between dispatchers, so their lifecycle is owned
        by the caller.
        """
        try:
            self.source.connect()
            logger.info(f"Connected to report source {self.source.get_source_id()}")
        except Exception as e:
            error_msg = f"Failed to start dispatcher: {str(e)}"
            logger.error(error_msg)
            raise ProcessingError(error_msg)

    def process_next(self) -> bool:
        """
        Route every report currently available from the source.

        Returns:
            bool: True if any report was processed, False otherwise

        Raises:
            HeightParseError: If a report carries a non-numeric height.
            ProcessingError: If routing fails unexpectedly.
        """
        processed = 0
        try:
            for report in self.source.listen():
                self.dispatch(report)
                processed += 1
        except HeightParseError:
            raise
        except Exception as e:
            error_msg = f"Error processing reports: {str(e)}"
            logger.error(error_msg)
            raise ProcessingError(error_msg)

        return processed > 0

    def dispatch(self, report: Report) -> Dict[str, Report]:
        """Route one report and hand the results to reporters."""
        routed = self.filterer.get_reportables_for_reporters(report)

        for destination, routed_report in routed.items():
            reporter = self.reporters.get(destination)
            if reporter is None:
                logger.error(f"No reporter named {destination}, dropping report")
                continue

            if not reporter.enabled():
                logger.debug(f"Reporter {destination} is disabled, dropping report")
                continue

            try:
                reporter.send(routed_report)
            except Exception as e:
                logger.error(f"Error sending report to {destination}: {e}")

        return routed

    def stop(self) -> None:
        """Disconnect the source."""
        logger.debug("Stopping dispatcher")
        try:
            self.source.disconnect()
        except Exception as e:
            logger.error(f"Error disconnecting source: {e}")

        logger.info("Dispatcher stopped")
