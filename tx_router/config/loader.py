from dataclasses import dataclass, field
import json
import os
from typing import Any, Dict, List

from tx_router.config.types import Chain, Chains, Explorer, Subscription
from tx_router.filters.base import FilterException
from tx_router.filters.factory import FilterFactory
from tx_router.utils.exceptions import ConfigurationError
from tx_router.utils.logger import logger


TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class AppConfig(object):
    """
    Process-wide settings.

    This class represents settings read from the environment: logging,
    where to find the routing configuration, and worker pacing.
    """

    log_level: str
    log_json: bool
    config_path: str
    idle_sleep: float

    @classmethod
    def load(cls) -> "AppConfig":
        """
        Create an AppConfig instance from environment variables.

        Returns:
            AppConfig: Configured instance with values from environment variables
                      or defaults if the environment variables are not set.
        """
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        log_json = os.getenv("LOG_JSON", "false").lower() in TRUE_VALUES
        config_path = os.getenv("CONFIG_PATH", "config.json")
        idle_sleep = float(os.getenv("IDLE_SLEEP", "0.1"))

        logger.info(
            f"Config: log_level={log_level}, log_json={log_json}, "
            f"config_path={config_path}, idle_sleep={idle_sleep}"
        )

        return cls(
            log_level=log_level,
            log_json=log_json,
            config_path=config_path,
            idle_sleep=idle_sleep,
        )


@dataclass
class ReporterConfig:
    """A reporter declared in the routing configuration."""

    name: str
    type: str
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RouterConfig:
    """Chains, subscriptions and reporters the router is built from."""

    chains: Chains
    subscriptions: List[Subscription]
    reporters: List[ReporterConfig]

    def validate(self) -> None:
        """
        Check the configuration is consistent.

        Raises:
            ConfigurationError: If any chain, reporter or subscription is invalid
                or references something that is not configured.
        """
        if not self.chains:
            raise ConfigurationError("no chains provided")

        seen = set()
        for index, chain in enumerate(self.chains):
            try:
                chain.validate()
            except ConfigurationError as e:
                raise ConfigurationError(f"error in chain {index}: {e}")
            if chain.name in seen:
                raise ConfigurationError(f"error in chain {index}: duplicate chain name {chain.name}")
            seen.add(chain.name)

        reporter_names = set()
        for index, reporter in enumerate(self.reporters):
            if not reporter.name or not reporter.type:
                raise ConfigurationError(f"error in reporter {index}: name and type are required")
            if reporter.name in reporter_names:
                raise ConfigurationError(
                    f"error in reporter {index}: duplicate reporter name {reporter.name}"
                )
            reporter_names.add(reporter.name)

        for index, subscription in enumerate(self.subscriptions):
            try:
                subscription.validate()
            except ConfigurationError as e:
                raise ConfigurationError(f"error in subscription {index}: {e}")

            if self.chains.find_by_name(subscription.chain) is None:
                raise ConfigurationError(
                    f"error in subscription {index}: chain {subscription.chain} not found"
                )

            if subscription.reporter not in reporter_names:
                raise ConfigurationError(
                    f"error in subscription {index}: reporter {subscription.reporter} not found"
                )


def _build_chain(data: Dict[str, Any]) -> Chain:
    explorer = None
    if data.get("mintscan_prefix"):
        explorer = Explorer.from_mintscan_prefix(data["mintscan_prefix"])
    elif data.get("explorer"):
        explorer = Explorer(**data["explorer"])

    return Chain(
        name=data.get("name", ""),
        pretty_name=data.get("pretty_name", ""),
        nodes=list(data.get("nodes", [])),
        explorer=explorer,
        base_denom=data.get("base_denom", ""),
        display_denom=data.get("display_denom", ""),
        denom_coefficient=int(data.get("denom_coefficient", 1_000_000)),
    )


def _build_subscription(data: Dict[str, Any]) -> Subscription:
    return Subscription(
        name=data.get("name", ""),
        reporter=data.get("reporter", ""),
        chain=data.get("chain", ""),
        log_node_errors=bool(data.get("log_node_errors", False)),
        log_failed_transactions=bool(data.get("log_failed_transactions", False)),
        log_unknown_messages=bool(data.get("log_unknown_messages", False)),
        log_unparsed_messages=bool(data.get("log_unparsed_messages", True)),
        filter_internal_messages=bool(data.get("filter_internal_messages", False)),
        filters=FilterFactory.from_expressions(data.get("filters", [])),
    )


def _build_reporter(data: Dict[str, Any]) -> ReporterConfig:
    options = {k: v for k, v in data.items() if k not in ("name", "type")}
    return ReporterConfig(name=data.get("name", ""), type=data.get("type", ""), options=options)


def parse_config(data: Dict[str, Any]) -> RouterConfig:
    """
    Build and validate a RouterConfig from a decoded document.

    Raises:
        ConfigurationError: If the document is malformed or inconsistent.
    """
    if not isinstance(data, dict):
        raise ConfigurationError("configuration must be a JSON object")

    try:
        config = RouterConfig(
            chains=Chains(_build_chain(chain) for chain in data.get("chains", [])),
            subscriptions=[
                _build_subscription(subscription)
                for subscription in data.get("subscriptions", [])
            ],
            reporters=[_build_reporter(reporter) for reporter in data.get("reporters", [])],
        )
    except FilterException as e:
        raise ConfigurationError(f"invalid filter: {e}")
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigurationError(f"malformed configuration: {e}")

    config.validate()
    return config


def load_config(path: str) -> RouterConfig:
    """
    Read the routing configuration from a JSON file.

    Args:
        path: Path to the configuration file.

    Returns:
        RouterConfig: The validated configuration.

    Raises:
        ConfigurationError: If the file cannot be read or is invalid.
    """
    try:
        with open(path, "r", encoding="utf-8") as config_file:
            data = json.load(config_file)
    except OSError as e:
        raise ConfigurationError(f"cannot read config file {path}: {e}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"invalid JSON in config file {path}: {e}")

    config = parse_config(data)
    logger.info(
        f"Loaded {len(config.chains)} chains, {len(config.subscriptions)} subscriptions "
        f"and {len(config.reporters)} reporters from {path}"
    )
    return config
