from abc import ABC, abstractmethod


class CredentialRepositoryInterface(ABC):
    """Local key-value store holding at most one remembered credential per key."""

    @abstractmethod
    def get_value(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set_value(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete_value(self, key: str) -> None:
        pass
