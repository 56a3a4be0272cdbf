from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import NamedTuple

TEXT_MIME_TYPE = "text/plain"
PDF_MIME_TYPE = "application/pdf"

SUPPORTED_DOCUMENT_TYPES = frozenset({TEXT_MIME_TYPE, PDF_MIME_TYPE})


@dataclass(frozen=True)
class Document:
    """
    Uploaded reference document.

    ``content`` is raw text for ``text/plain`` documents and a data URI for
    ``application/pdf`` documents. The media type is fixed at ingestion.
    """

    name: str
    mime_type: str
    content: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def is_textual(self) -> bool:
        return self.mime_type == TEXT_MIME_TYPE

    @property
    def is_opaque(self) -> bool:
        return self.mime_type == PDF_MIME_TYPE


class DocumentPartition(NamedTuple):
    textual: list[Document]
    opaque: list[Document]


class UploadedFile(NamedTuple):
    """Raw upload handed over by the front-end before ingestion."""

    name: str
    mime_type: str
    content: str | bytes
