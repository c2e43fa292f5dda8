from abc import ABC, abstractmethod
from typing import Optional


class HeightStore(ABC):
    """Holds the highest accepted transaction height per chain."""

    @abstractmethod
    def get(self, chain: str) -> Optional[int]:
        pass

    @abstractmethod
    def set(self, chain: str, height: int) -> None:
        pass
