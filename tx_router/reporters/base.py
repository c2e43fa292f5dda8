from abc import ABC, abstractmethod

from tx_router.types.report import Report


class Reporter(ABC):
    """
    Base abstract class for all reporter implementations.

    Reporters deliver routed reports to their final destination (a chat, a
    queue, a webhook). Formatting and transport belong to the reporter; the
    router only decides which reporter receives what.
    """

    @abstractmethod
    def init(self) -> None:
        """
        Prepare the reporter for sending, e.g. open clients.

        Raises:
            ReporterError: If the reporter cannot be initialised.
        """
        pass

    @abstractmethod
    def name(self) -> str:
        """Return the name subscriptions use to address this reporter."""
        pass

    @abstractmethod
    def enabled(self) -> bool:
        """Return whether the reporter is configured to send."""
        pass

    @abstractmethod
    def send(self, report: Report) -> None:
        """
        Deliver a routed report.

        Args:
            report (Report): The report to deliver.

        Raises:
            ReporterError: If the send operation fails.
        """
        pass

    def close(self) -> None:
        """
        Close any open connections or resources.

        Reporters holding no resources can rely on this default.
        """
        pass
