import signal
from typing import Any, Dict, List

from dotenv import load_dotenv

from tx_router.config.loader import AppConfig, RouterConfig, load_config
from tx_router.metrics.manager import MetricsManager
from tx_router.processing.dispatcher import Dispatcher
from tx_router.processing.router import Filterer
from tx_router.processing.source import QueueReportSource
from tx_router.processing.worker import Worker, WorkerPool
from tx_router.reporters import ReporterFactory
from tx_router.reporters.base import Reporter
from tx_router.state import InMemoryHeightStore, OrderingGuard
from tx_router.types.report import Report
from tx_router.utils.exceptions import ConfigurationError
from tx_router.utils.logger import Logger, logger


class Application:
    """
    Wires configuration into running workers.

    One report source and one worker are created per chain. The data-fetching
    layer hands reports in through ``submit``.
    """

    def __init__(self, router_config: RouterConfig, idle_sleep: float = 0.1) -> None:
        self.router_config = router_config
        self.metrics = MetricsManager()
        self.guard = OrderingGuard(InMemoryHeightStore())
        self.reporters = self._create_reporters()
        self.filterer = Filterer(
            chains=router_config.chains,
            subscriptions=router_config.subscriptions,
            metrics=self.metrics,
            guard=self.guard,
        )

        self.sources: Dict[str, QueueReportSource] = {}
        workers: List[Worker] = []
        for chain in router_config.chains:
            source = QueueReportSource(chain.name)
            self.sources[chain.name] = source
            dispatcher = Dispatcher(source, self.filterer, self.reporters)
            workers.append(Worker(dispatcher, idle_sleep_time=idle_sleep))

        self.pool = WorkerPool(workers)

    def _create_reporters(self) -> Dict[str, Reporter]:
        reporters: Dict[str, Reporter] = {}
        for reporter_config in self.router_config.reporters:
            reporters[reporter_config.name] = ReporterFactory.create(
                reporter_config.type, name=reporter_config.name, **reporter_config.options
            )
        return reporters

    def submit(self, report: Report) -> None:
        """
        Queue a report for the worker of its chain.

        Raises:
            ConfigurationError: If the report's chain is not configured.
        """
        source = self.sources.get(report.chain)
        if source is None:
            raise ConfigurationError(f"Chain {report.chain} is not configured")
        source.put(report)

    def start_reporters(self) -> None:
        """Initialise every enabled reporter once, before any worker sends."""
        for name, reporter in self.reporters.items():
            if reporter.enabled():
                reporter.init()
                logger.info(f"Reporter {name} initialised")
            else:
                logger.info(f"Reporter {name} is disabled")

    def close_reporters(self) -> None:
        """Close every reporter once, after all workers have stopped."""
        for name, reporter in self.reporters.items():
            try:
                reporter.close()
            except Exception as e:
                logger.error(f"Error closing reporter {name}: {e}")

    def run(self) -> None:
        """
        Run all workers until they stop.

        Reporters are initialised before the first worker starts and closed
        only after every worker has finished.
        """
        self.start_reporters()
        try:
            self.pool.start()
            self.pool.join()
        finally:
            self.close_reporters()

    def stop(self) -> None:
        self.pool.stop()


def main() -> None:
    """
    Main entry point for the tx-router application.

    This function loads configuration, sets up the logger, creates the
    reporters, router and per-chain workers, and starts them. It also sets up
    signal handlers for graceful shutdown.
    """
    load_dotenv()

    app_config = AppConfig.load()
    Logger.configure(app_config.log_level, json_output=app_config.log_json)

    router_config = load_config(app_config.config_path)
    app = Application(router_config, idle_sleep=app_config.idle_sleep)

    def signal_handler(sig: Any, _frame: Any) -> None:
        logger.info("Shutdown signal received")
        app.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    app.run()
    logger.info(f"Routing stats: {app.metrics.get_stats()}")


if __name__ == "__main__":
    main()
