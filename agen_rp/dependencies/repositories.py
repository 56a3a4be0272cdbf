from agen_rp.bootstrap.components import Components
from agen_rp.components.database.db_interface import DBInterface
from agen_rp.repositories.credential_repository.credential_repository_interface import (
    CredentialRepositoryInterface,
)
from agen_rp.repositories.credential_repository.sqlite_credential_repository import (
    SqliteCredentialRepository,
)


def get_credential_repository(components: Components) -> CredentialRepositoryInterface:
    return SqliteCredentialRepository(components.get_component(DBInterface))
