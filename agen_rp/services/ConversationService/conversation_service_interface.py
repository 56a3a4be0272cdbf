from abc import ABC, abstractmethod
from collections.abc import Sequence

from agen_rp.entities.document import Document, UploadedFile
from agen_rp.entities.message import Message


class ConversationServiceInterface(ABC):
    messages: list[Message]
    documents: list[Document]

    @property
    @abstractmethod
    def is_busy(self) -> bool:
        """True while a question is waiting for the model."""

    @abstractmethod
    def add_documents(self, uploads: Sequence[UploadedFile]) -> list[Document]:
        """Ingest uploads into the corpus. Rejects the whole batch on any bad file."""

    @abstractmethod
    def remove_document(self, document_id: str) -> Document:
        """Remove a document from the corpus by id."""

    @abstractmethod
    async def send(
        self,
        text: str,
        image: str | None = None,
        api_key: str | None = None,
    ) -> Message:
        """
        Record the user's question, ask the model and record the reply.

        Raises:
            EncodingError: If ``image`` is not a valid data URI. Nothing is
                recorded.
        """

    @abstractmethod
    def transcript(self) -> str:
        """Plain-text transcript of the conversation, without SYSTEM notes."""
