from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable


class Store(ABC):
    """Logical file tree addressed by POSIX-like relative paths."""

    @abstractmethod
    def exists(self, path: str) -> bool: ...

    @abstractmethod
    def list(self, prefix: str = "") -> Iterable[str]: ...

    @abstractmethod
    def delete(self, path: str) -> bool: ...
