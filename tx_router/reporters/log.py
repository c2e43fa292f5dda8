from tx_router.reporters.base import Reporter
from tx_router.types.report import Report
from tx_router.utils.logger import logger


class LogReporter(Reporter):
    """Writes a one-line summary of every report to the application log."""

    def __init__(self, name: str = "log", enabled: bool = True) -> None:
        self._name = name
        self._enabled = enabled
        self.sent = 0

    def init(self) -> None:
        pass

    def name(self) -> str:
        return self._name

    def enabled(self) -> bool:
        return self._enabled

    def send(self, report: Report) -> None:
        reportable = report.reportable
        subscription = report.subscription.name if report.subscription else "-"
        messages = ", ".join(message.type() for message in reportable.get_messages())
        logger.info(
            f"[{self._name}] {report.chain} {reportable.type()} "
            f"{reportable.get_hash()} subscription={subscription} "
            f"messages=[{messages}]"
        )
        self.sent += 1
