from typing import Dict, Optional

from tx_router.state.base import HeightStore


class InMemoryHeightStore(HeightStore):
    """
    Process-local height store.

    Heights are lost on restart, which resets ordering for every chain.
    """

    def __init__(self) -> None:
        self._heights: Dict[str, int] = {}

    def get(self, chain: str) -> Optional[int]:
        return self._heights.get(chain)

    def set(self, chain: str, height: int) -> None:
        self._heights[chain] = height

    def __len__(self) -> int:
        return len(self._heights)
