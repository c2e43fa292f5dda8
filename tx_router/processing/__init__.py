from tx_router.processing.router import Filterer, LastWriteWinsPolicy
from tx_router.processing.source import ReportSource, QueueReportSource
from tx_router.processing.dispatcher import Dispatcher
from tx_router.processing.worker import Worker, WorkerPool

__all__ = [
    "Filterer",
    "LastWriteWinsPolicy",
    "ReportSource",
    "QueueReportSource",
    "Dispatcher",
    "Worker",
    "WorkerPool",
]
