from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List

from tx_router.types.messages import Message


class Reportable(ABC):
    """Base class for everything that can enter the router."""

    @abstractmethod
    def type(self) -> str:
        pass

    @abstractmethod
    def get_hash(self) -> str:
        pass

    def get_messages(self) -> List[Message]:
        return []

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        pass


@dataclass
class Transaction(Reportable):
    """A transaction observed on a chain.

    Attributes:
        hash: Transaction hash.
        height: Block height in the chain's native string form.
        code: Execution status code, 0 on success.
        messages: Top-level messages in their original order.
        memo: Optional transaction memo.
    """

    hash: str
    height: str
    code: int = 0
    messages: List[Message] = field(default_factory=list)
    memo: str = ""

    def type(self) -> str:
        return "Transaction"

    def get_hash(self) -> str:
        return self.hash

    def get_messages(self) -> List[Message]:
        return self.messages

    @property
    def failed(self) -> bool:
        return self.code > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type(),
            "hash": self.hash,
            "height": self.height,
            "code": self.code,
            "memo": self.memo,
            "messages": [message.to_dict() for message in self.messages],
        }


@dataclass
class TransactionError(Reportable):
    """Wraps an error raised while fetching or parsing transactions."""

    error: Exception

    def type(self) -> str:
        return "TransactionError"

    def get_hash(self) -> str:
        return "TransactionError"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type(), "error": str(self.error)}


@dataclass
class NodeConnectError(Reportable):
    """Wraps a failure to connect to a chain node."""

    chain: str
    node: str
    error: Exception

    def type(self) -> str:
        return "NodeConnectError"

    def get_hash(self) -> str:
        return "NodeConnectError"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type(),
            "chain": self.chain,
            "node": self.node,
            "error": str(self.error),
        }
