from dataclasses import dataclass, field
from typing import List, Optional

from tx_router.filters.base import Filters
from tx_router.utils.exceptions import ConfigurationError


MINTSCAN_URL = "https://mintscan.io"


@dataclass
class Link:
    value: str
    href: str = ""
    title: str = ""


@dataclass
class Explorer:
    """Link patterns for a block explorer. Each pattern contains one ``%s``."""

    wallet_link_pattern: str = ""
    validator_link_pattern: str = ""
    proposal_link_pattern: str = ""
    transaction_link_pattern: str = ""
    block_link_pattern: str = ""

    @classmethod
    def from_mintscan_prefix(cls, prefix: str) -> "Explorer":
        base = f"{MINTSCAN_URL}/{prefix}"
        return cls(
            wallet_link_pattern=f"{base}/account/%s",
            validator_link_pattern=f"{base}/validators/%s",
            proposal_link_pattern=f"{base}/proposals/%s",
            transaction_link_pattern=f"{base}/txs/%s",
            block_link_pattern=f"{base}/blocks/%s",
        )


@dataclass
class Chain:
    """
    A chain the router knows about.

    Chains are owned by configuration and are read-only to the router.
    """

    name: str
    pretty_name: str = ""
    nodes: List[str] = field(default_factory=list)
    explorer: Optional[Explorer] = None
    base_denom: str = ""
    display_denom: str = ""
    denom_coefficient: int = 1_000_000

    def validate(self) -> None:
        """
        Check the chain is usable.

        Raises:
            ConfigurationError: If the name is empty or no nodes are configured.
        """
        if not self.name:
            raise ConfigurationError("empty chain name")

        if not self.nodes:
            raise ConfigurationError(f"no nodes provided for chain {self.name}")

    def get_name(self) -> str:
        return self.pretty_name or self.name

    def _link(self, value: str, pattern_name: str) -> Link:
        pattern = getattr(self.explorer, pattern_name, "") if self.explorer else ""
        if not pattern:
            return Link(value=value)
        return Link(value=value, href=pattern % value)

    def get_wallet_link(self, address: str) -> Link:
        return self._link(address, "wallet_link_pattern")

    def get_validator_link(self, address: str) -> Link:
        return self._link(address, "validator_link_pattern")

    def get_proposal_link(self, proposal_id: str) -> Link:
        return self._link(proposal_id, "proposal_link_pattern")

    def get_transaction_link(self, tx_hash: str) -> Link:
        return self._link(tx_hash, "transaction_link_pattern")

    def get_block_link(self, height: int) -> Link:
        return self._link(str(height), "block_link_pattern")


class Chains(list):
    """List of chains with lookup by name."""

    def find_by_name(self, name: str) -> Optional[Chain]:
        for chain in self:
            if chain.name == name:
                return chain
        return None


@dataclass
class Subscription:
    """
    Binds a chain to a reporter with delivery policy flags and filters.

    Attributes:
        name: Subscription name, used in logs.
        reporter: Destination identifier; routed reports are keyed by it.
        chain: Name of the chain this subscription listens to.
        log_node_errors: Deliver node and transaction-fetch errors.
        log_failed_transactions: Deliver transactions with a non-zero code.
        log_unknown_messages: Deliver messages of unknown type.
        log_unparsed_messages: Deliver messages that failed to decode.
        filter_internal_messages: Apply filters to nested messages too.
        filters: Predicate over a message's attribute set.
    """

    name: str
    reporter: str
    chain: str
    log_node_errors: bool = False
    log_failed_transactions: bool = False
    log_unknown_messages: bool = False
    log_unparsed_messages: bool = True
    filter_internal_messages: bool = False
    filters: Filters = field(default_factory=Filters)

    def validate(self) -> None:
        if not self.name:
            raise ConfigurationError("empty subscription name")

        if not self.reporter:
            raise ConfigurationError(f"no reporter set for subscription {self.name}")

        if not self.chain:
            raise ConfigurationError(f"no chain set for subscription {self.name}")
