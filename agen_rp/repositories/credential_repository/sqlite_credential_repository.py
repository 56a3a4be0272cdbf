from agen_rp.components.database.db_interface import DBInterface
from agen_rp.repositories.credential_repository.credential_repository_interface import (
    CredentialRepositoryInterface,
)


class SqliteCredentialRepository(CredentialRepositoryInterface):
    def __init__(self, db: DBInterface):
        self.db = db
        self._init_table()

    def _init_table(self):
        query = """
        CREATE TABLE IF NOT EXISTS key_value_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );
        """
        self.db.execute(query)
        self.db.commit()

    def get_value(self, key: str) -> str | None:
        query = "SELECT value FROM key_value_store WHERE key = ?"
        result = self.db.execute_and_fetchone(query, (key,))
        if result:
            return result["value"]
        return None

    def set_value(self, key: str, value: str) -> None:
        query = """
        INSERT INTO key_value_store (key, value)
        VALUES (?, ?)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value;
        """
        self.db.execute(query, (key, value))
        self.db.commit()

    def delete_value(self, key: str) -> None:
        self.db.execute("DELETE FROM key_value_store WHERE key = ?", (key,))
        self.db.commit()
