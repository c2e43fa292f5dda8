from tx_router.reporters.base import Reporter
from tx_router.reporters.factory import ReporterFactory
from tx_router.reporters.log import LogReporter
from tx_router.reporters.sqs import SQSReporter

# Register the built-in reporters with the factory
ReporterFactory.register_reporter("log", LogReporter)
ReporterFactory.register_reporter("sqs", SQSReporter)

__all__ = [
    "Reporter",
    "ReporterFactory",
    "LogReporter",
    "SQSReporter",
]
