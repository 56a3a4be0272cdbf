from abc import ABC, abstractmethod
from typing import Any


class DBInterface(ABC):
    @abstractmethod
    def connect(self) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    @abstractmethod
    def execute(self, query: str, params: tuple | None = None) -> None:
        pass

    @abstractmethod
    def execute_and_fetchone(
        self, query: str, params: tuple | None = None
    ) -> dict[str, Any] | None:
        pass

    @abstractmethod
    def commit(self) -> None:
        pass
