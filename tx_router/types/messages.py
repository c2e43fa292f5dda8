"""Messages carried inside a transaction.

A message is one logical operation of a transaction. It comes in three
shapes, and consumers handle them through ``MessageVisitor`` so that every
shape has an explicit branch:

- UnsupportedMessage: the wire type is not known to the decoder
- UnparsedMessage: the type is known but decoding failed
- ParsedMessage: fully decoded, with a flat attribute set and optional
  nested messages (for container operations such as an exec or a batch)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List


class MessageVisitor(ABC):
    """Handles each message shape. Subclasses must implement all three."""

    @abstractmethod
    def visit_unsupported(self, message: "UnsupportedMessage") -> Any:
        pass

    @abstractmethod
    def visit_unparsed(self, message: "UnparsedMessage") -> Any:
        pass

    @abstractmethod
    def visit_parsed(self, message: "ParsedMessage") -> Any:
        pass


class Message(ABC):
    """Base class for all message shapes."""

    msg_type: str

    @abstractmethod
    def accept(self, visitor: MessageVisitor) -> Any:
        """Dispatch to the visitor method matching this shape."""
        pass

    def type(self) -> str:
        return self.msg_type

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        pass


@dataclass
class UnsupportedMessage(Message):
    msg_type: str

    def accept(self, visitor: MessageVisitor) -> Any:
        return visitor.visit_unsupported(self)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.msg_type, "unsupported": True}


@dataclass
class UnparsedMessage(Message):
    msg_type: str
    error: Exception

    def accept(self, visitor: MessageVisitor) -> Any:
        return visitor.visit_unparsed(self)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.msg_type, "error": str(self.error)}


@dataclass
class ParsedMessage(Message):
    """A decoded message.

    Attributes:
        msg_type: The message type URL, e.g. ``/cosmos.bank.v1beta1.MsgSend``.
        attributes: Flat key/value pairs used for filter evaluation.
        messages: Nested messages; empty for a leaf.
    """

    msg_type: str
    attributes: Dict[str, str] = field(default_factory=dict)
    messages: List[Message] = field(default_factory=list)

    def accept(self, visitor: MessageVisitor) -> Any:
        return visitor.visit_parsed(self)

    def get_values(self) -> Dict[str, str]:
        values = dict(self.attributes)
        values.setdefault("message.action", self.msg_type)
        return values

    def get_messages(self) -> List[Message]:
        return self.messages

    def is_leaf(self) -> bool:
        return not self.messages

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.msg_type,
            "attributes": dict(self.attributes),
            "messages": [message.to_dict() for message in self.messages],
        }
