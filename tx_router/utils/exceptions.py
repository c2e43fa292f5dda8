class TxRouterError(Exception):
    """Base exception for all tx-router related errors."""

    pass


class ConfigurationError(TxRouterError):
    """Raised when there is an issue with configuration settings."""

    pass


class UnsupportedTypeError(TxRouterError):
    """Raised when an unsupported type is requested from a factory."""

    pass


class HeightParseError(TxRouterError):
    """Raised when a transaction height cannot be read as an integer.

    This is a data-integrity violation: ordering decisions depend on the
    height, so it is never guessed or defaulted.
    """

    pass


class ProcessingError(TxRouterError):
    """Raised when there is an issue with report processing."""

    pass


class ReporterError(TxRouterError):
    """Raised when a reporter fails to deliver a report."""

    pass

