from tx_router.metrics.manager import MetricsManager

__all__ = ["MetricsManager"]
