"""Event model shared by every part of the router.

Key components:
- Reportable: base for Transaction, TransactionError and NodeConnectError
- Message: base for UnsupportedMessage, UnparsedMessage and ParsedMessage
- MessageVisitor: one handler per message shape
- Report: a reportable addressed to a chain, a node and a subscription
"""

from tx_router.types.messages import (
    Message,
    MessageVisitor,
    ParsedMessage,
    UnparsedMessage,
    UnsupportedMessage,
)
from tx_router.types.reportables import (
    NodeConnectError,
    Reportable,
    Transaction,
    TransactionError,
)
from tx_router.types.report import Report

__all__ = [
    "Message",
    "MessageVisitor",
    "ParsedMessage",
    "UnparsedMessage",
    "UnsupportedMessage",
    "NodeConnectError",
    "Reportable",
    "Transaction",
    "TransactionError",
    "Report",
]
