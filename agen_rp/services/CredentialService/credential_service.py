"""
Credential resolution for the Gemini client.

The resolver never reaches out to storage or the environment on its own.
Each source is wrapped in a provider and handed to the resolver in priority
order, so resolution stays pure for a fixed set of source values.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping, Sequence

from agen_rp.entities.errors import MissingCredentialError
from agen_rp.repositories.credential_repository.credential_repository_interface import (
    CredentialRepositoryInterface,
)
from agen_rp.services.CredentialService.credential_service_interface import (
    CredentialProvider,
    CredentialResolverInterface,
    CredentialStoreInterface,
)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def static_provider(value: str | None) -> CredentialProvider:
    """Provider for a value fixed at construction time (build/deploy key)."""

    def provide() -> str | None:
        return value

    return provide


def environment_provider(
    variable_names: Iterable[str],
    environ: Mapping[str, str] | None = None,
) -> CredentialProvider:
    """Provider yielding the first non-blank variable among ``variable_names``."""
    names = list(variable_names)

    def provide() -> str | None:
        source = os.environ if environ is None else environ
        for name in names:
            candidate = _clean(source.get(name))
            if candidate:
                return candidate
        return None

    return provide


class CredentialStore(CredentialStoreInterface):
    """
    Process-wide credential state.

    Reads the local store once at construction. Afterwards the value only
    changes through ``set`` and ``clear``.
    """

    def __init__(
        self,
        repository: CredentialRepositoryInterface,
        storage_key: str,
        logger: logging.Logger,
    ) -> None:
        self.repository = repository
        self.storage_key = storage_key
        self.logger = logger
        self._session_value: str | None = None
        self._persisted_value: str | None = _clean(repository.get_value(storage_key))

        if self._persisted_value:
            self.logger.info("Restored remembered API key from local store")

    @property
    def session_value(self) -> str | None:
        return self._session_value

    @property
    def persisted_value(self) -> str | None:
        return self._persisted_value

    def set(self, value: str, remember: bool = True) -> None:
        cleaned = _clean(value)
        if cleaned is None:
            self.clear()
            return

        self._session_value = cleaned
        if remember:
            self.repository.set_value(self.storage_key, cleaned)
            self._persisted_value = cleaned
            self.logger.info("API key saved to local store")

    def clear(self) -> None:
        self._session_value = None
        self._persisted_value = None
        self.repository.delete_value(self.storage_key)
        self.logger.info("API key cleared")

    def session_provider(self) -> CredentialProvider:
        return lambda: self._session_value

    def persisted_provider(self) -> CredentialProvider:
        return lambda: self._persisted_value


class CredentialResolver(CredentialResolverInterface):
    """
    Picks the first usable credential from an ordered provider list.

    The explicit override passed to ``resolve`` always takes precedence over
    every provider.
    """

    def __init__(self, providers: Sequence[CredentialProvider]) -> None:
        self.providers: list[CredentialProvider] = list(providers)

    def resolve(self, explicit_override: str | None = None) -> str:
        candidate = _clean(explicit_override)
        if candidate:
            return candidate

        for provider in self.providers:
            candidate = _clean(provider())
            if candidate:
                return candidate

        raise MissingCredentialError()
