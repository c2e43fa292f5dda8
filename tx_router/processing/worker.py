import time
from threading import Thread
from typing import List, Optional

from tx_router.utils.logger import logger
from tx_router.processing.dispatcher import Dispatcher
from tx_router.utils.exceptions import HeightParseError, ProcessingError


class Worker:
    """
    Sequential worker that drives one dispatcher.

    One worker runs per chain, so reports from one chain are routed in
    order. Every report still passes through every subscription, so workers
    for different chains can update the same ordering floor; the guard's
    per-chain locks serialise those updates.
    """

    def __init__(self, dispatcher: Dispatcher, idle_sleep_time: float = 0.1) -> None:
        """
        Initialize the worker with a dispatcher.

        Args:
            dispatcher: The dispatcher responsible for routing reports
            idle_sleep_time: Base sleep between empty polls, in seconds
        """
        self.dispatcher = dispatcher
        self.idle_sleep_time = idle_sleep_time
        self.running = True
        self._stopping = False

    def run(self) -> None:
        """
        Run the worker until it is stopped.

        Raises:
            HeightParseError: If a report carries a non-numeric height.
            ProcessingError: If processing fails.
        """
        if not self.dispatcher:
            raise ProcessingError("No dispatcher provided")

        try:
            logger.info("Worker started")
            self.dispatcher.start()

            idle_count = 0
            max_idle_count = 10

            while self.running:
                reports_processed = self.dispatcher.process_next()

                if not reports_processed:
                    idle_count += 1
                    if idle_count >= max_idle_count:
                        # Exponential backoff with a cap
                        sleep_time = min(
                            self.idle_sleep_time
                            * (1.5 ** min(idle_count - max_idle_count, 10)),
                            5,
                        )
                        time.sleep(sleep_time)
                else:
                    idle_count = 0

        except HeightParseError:
            logger.critical("Invalid transaction height received, stopping worker")
            raise
        except Exception as e:
            logger.error(f"Worker error: {e}")
            raise ProcessingError(f"Processing failed: {str(e)}")
        finally:
            self._stopping = True
            self._stop_dispatcher()
            logger.info("Worker stopped gracefully")

    def _stop_dispatcher(self) -> None:
        """Stop the dispatcher safely."""
        if self.dispatcher:
            try:
                self.dispatcher.stop()
            except Exception as e:
                logger.error(f"Error stopping dispatcher: {e}")

    def stop(self) -> None:
        """
        Stop the worker gracefully.

        This method signals the worker to stop processing.
        """
        if self._stopping:
            logger.debug("Stop already in progress, ignoring duplicate call")
            return

        logger.info("Stop signal received")
        self._stopping = True
        self.running = False


class WorkerPool:
    """Runs one worker per chain, each on its own thread."""

    def __init__(self, workers: List[Worker]) -> None:
        self.workers = workers
        self.threads: List[Thread] = []
        self.errors: List[BaseException] = []

    def _run_worker(self, worker: Worker) -> None:
        try:
            worker.run()
        except Exception as e:
            self.errors.append(e)
            self.stop()

    def start(self) -> None:
        for index, worker in enumerate(self.workers):
            thread = Thread(
                target=self._run_worker, args=(worker,), name=f"worker-{index}"
            )
            thread.start()
            self.threads.append(thread)

    def join(self, timeout: Optional[float] = None) -> None:
        for thread in self.threads:
            thread.join(timeout)

        if self.errors:
            raise self.errors[0]

    def stop(self) -> None:
        for worker in self.workers:
            worker.stop()
