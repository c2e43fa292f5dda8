from tx_router.config.types import Chain, Chains, Explorer, Link, Subscription
from tx_router.config.loader import AppConfig, ReporterConfig, RouterConfig, load_config, parse_config

__all__ = [
    "Chain",
    "Chains",
    "Explorer",
    "Link",
    "Subscription",
    "AppConfig",
    "ReporterConfig",
    "RouterConfig",
    "load_config",
    "parse_config",
]
