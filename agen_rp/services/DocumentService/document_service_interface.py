from abc import ABC, abstractmethod
from collections.abc import Sequence

from agen_rp.entities.document import Document, DocumentPartition


class DocumentServiceInterface(ABC):
    @abstractmethod
    def ingest(self, name: str, mime_type: str, content: str | bytes) -> Document:
        """
        Turn an upload into a Document.

        Raises:
            UnsupportedMediaTypeError: If the upload is neither text nor PDF.
            EncodingError: If a text upload is not valid UTF-8, or a PDF
                handed over as a string is not valid base64.
        """

    @abstractmethod
    def partition(self, documents: Sequence[Document]) -> DocumentPartition:
        """Split documents into textual and opaque groups, keeping their order."""
