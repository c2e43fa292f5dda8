from tx_router.state.base import HeightStore
from tx_router.state.memory import InMemoryHeightStore
from tx_router.state.guard import OrderingGuard

__all__ = ["HeightStore", "InMemoryHeightStore", "OrderingGuard"]
