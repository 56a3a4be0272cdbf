import logging
from collections.abc import Sequence

from agen_rp.entities.attachment import decode_base64_payload, encode_data_uri
from agen_rp.entities.document import (
    PDF_MIME_TYPE,
    TEXT_MIME_TYPE,
    Document,
    DocumentPartition,
)
from agen_rp.entities.errors import EncodingError, UnsupportedMediaTypeError
from agen_rp.services.DocumentService.document_service_interface import (
    DocumentServiceInterface,
)

_TEXT_MIME_TYPES = {TEXT_MIME_TYPE, "text/markdown", "text/x-markdown"}
_TEXT_EXTENSIONS = (".txt", ".md")


class DocumentService(DocumentServiceInterface):
    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def ingest(self, name: str, mime_type: str, content: str | bytes) -> Document:
        declared = (mime_type or "").split(";", 1)[0].strip().lower()

        if declared == PDF_MIME_TYPE:
            if isinstance(content, bytes):
                content = encode_data_uri(PDF_MIME_TYPE, content)
            else:
                try:
                    decode_base64_payload(content)
                except EncodingError as e:
                    raise EncodingError(
                        f"'{name}' is not a valid PDF payload: {e}"
                    ) from e
            document = Document(name=name, mime_type=PDF_MIME_TYPE, content=content)

        elif declared in _TEXT_MIME_TYPES or name.lower().endswith(_TEXT_EXTENSIONS):
            if isinstance(content, bytes):
                try:
                    content = content.decode("utf-8")
                except UnicodeDecodeError as e:
                    raise EncodingError(f"'{name}' is not valid UTF-8 text") from e
            document = Document(name=name, mime_type=TEXT_MIME_TYPE, content=content)

        else:
            self.logger.info("Rejected upload '%s' with type %s", name, mime_type)
            raise UnsupportedMediaTypeError(name, mime_type)

        self.logger.info(
            "Ingested document '%s' as %s (id=%s)",
            document.name,
            document.mime_type,
            document.id,
        )
        return document

    def partition(self, documents: Sequence[Document]) -> DocumentPartition:
        textual: list[Document] = []
        opaque: list[Document] = []

        for document in documents:
            if document.is_textual:
                textual.append(document)
            elif document.is_opaque:
                opaque.append(document)
            else:
                raise UnsupportedMediaTypeError(document.name, document.mime_type)

        return DocumentPartition(textual=textual, opaque=opaque)
