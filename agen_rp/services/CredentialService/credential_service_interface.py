from abc import ABC, abstractmethod
from collections.abc import Callable

# A provider either yields a candidate credential or nothing
CredentialProvider = Callable[[], str | None]


class CredentialResolverInterface(ABC):
    @abstractmethod
    def resolve(self, explicit_override: str | None = None) -> str:
        """
        Return the first non-blank credential, trimmed.

        Raises:
            MissingCredentialError: If no source yields a usable value.
        """


class CredentialStoreInterface(ABC):
    @property
    @abstractmethod
    def session_value(self) -> str | None:
        """Value entered by the user during the current session."""

    @property
    @abstractmethod
    def persisted_value(self) -> str | None:
        """Value restored from the local store when the session started."""

    @abstractmethod
    def set(self, value: str, remember: bool = True) -> None:
        """Set the session credential, optionally writing it to the local store."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the session credential and delete the remembered one."""
