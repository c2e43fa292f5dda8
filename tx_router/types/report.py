from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from tx_router.types.reportables import Reportable

if TYPE_CHECKING:
    from tx_router.config.types import Subscription


@dataclass
class Report:
    """A reportable together with where it came from and who it is for.

    Attributes:
        chain: Name of the chain the reportable was observed on.
        node: Node the reportable was fetched from.
        reportable: The payload, possibly pruned by filtering.
        subscription: The subscription that matched, set once routed.
    """

    chain: str
    node: str
    reportable: Reportable
    subscription: Optional["Subscription"] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chain": self.chain,
            "node": self.node,
            "subscription": self.subscription.name if self.subscription else None,
            "reportable": self.reportable.to_dict(),
        }
