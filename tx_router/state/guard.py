from threading import Lock
from typing import Dict, Optional

from tx_router.state.base import HeightStore
from tx_router.state.memory import InMemoryHeightStore
from tx_router.utils.logger import logger


class OrderingGuard:
    """
    Per-chain high-water mark of accepted transaction heights.

    A transaction is rejected only when a strictly higher height was already
    accepted for its chain, so several transactions from the same block all
    pass. The floor is shared by every subscription on a chain.

    Each chain has its own lock; the registry lock is only held while a
    chain's lock is looked up or created.
    """

    def __init__(self, store: Optional[HeightStore] = None) -> None:
        self.store = store if store is not None else InMemoryHeightStore()
        self._locks: Dict[str, Lock] = {}
        self._registry_lock = Lock()

    def _lock_for(self, chain: str) -> Lock:
        with self._registry_lock:
            lock = self._locks.get(chain)
            if lock is None:
                lock = Lock()
                self._locks[chain] = lock
            return lock

    def admit(self, chain: str, height: int) -> bool:
        """
        Check a height against the chain's floor and raise the floor if needed.

        Args:
            chain: Chain name.
            height: Height of the incoming transaction.

        Returns:
            bool: False if the height is lower than the last accepted one.
        """
        with self._lock_for(chain):
            last_height = self.store.get(chain)

            if last_height is not None and last_height > height:
                logger.debug(
                    f"Height {height} on {chain} is less than the last one "
                    f"received ({last_height}), skipping"
                )
                return False

            if last_height is None or last_height < height:
                self.store.set(chain, height)

            return True

    def last_height(self, chain: str) -> Optional[int]:
        return self.store.get(chain)
