from abc import ABC, abstractmethod
from collections.abc import Sequence

from google.genai import types

from agen_rp.entities.attachment import InlineAttachment
from agen_rp.entities.document import Document
from agen_rp.entities.message import Message


class HistoryServiceInterface(ABC):
    @abstractmethod
    def transcode(self, messages: Sequence[Message]) -> list[types.Content]:
        """
        Convert the message log into Gemini turns, dropping SYSTEM messages.
        """

    @abstractmethod
    def inject_reference_documents(
        self,
        opaque_documents: Sequence[Document],
        turns: Sequence[types.Content],
    ) -> list[types.Content]:
        """Prepend one synthetic user turn carrying the PDF documents."""

    @abstractmethod
    def build_parts(
        self, text: str, attachment: InlineAttachment | str | None = None
    ) -> list[types.Part]:
        """
        Build the parts of a single turn: image first, then text.

        Raises:
            EncodingError: If ``attachment`` is a malformed data URI.
        """
