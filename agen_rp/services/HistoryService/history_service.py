from __future__ import annotations

import logging
from collections.abc import Sequence

from google.genai import types

from agen_rp.entities.attachment import (
    InlineAttachment,
    decode_base64_payload,
    decode_data_uri,
)
from agen_rp.entities.document import PDF_MIME_TYPE, Document
from agen_rp.entities.errors import EncodingError
from agen_rp.entities.message import Message, Role
from agen_rp.services.HistoryService.history_service_interface import (
    HistoryServiceInterface,
)

REFERENCE_FILES_NOTE = (
    "Berikut adalah fail-fail rujukan Rancangan Pemajuan (PDF) yang perlu anda "
    "rujuk ({count} fail). Sila gunakan maklumat visual dan teks daripada "
    "fail-fail ini untuk menjawab soalan."
)

_TURN_ROLES = {Role.USER: "user", Role.MODEL: "model"}


class HistoryService(HistoryServiceInterface):
    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def build_parts(
        self, text: str, attachment: InlineAttachment | str | None = None
    ) -> list[types.Part]:
        parts: list[types.Part] = []

        if isinstance(attachment, str):
            attachment = decode_data_uri(attachment) if attachment else None

        if attachment is not None:
            parts.append(
                types.Part.from_bytes(
                    data=attachment.data, mime_type=attachment.mime_type
                )
            )

        parts.append(types.Part.from_text(text=text))
        return parts

    def transcode(self, messages: Sequence[Message]) -> list[types.Content]:
        turns: list[types.Content] = []

        for message in messages:
            # SYSTEM messages are UI annotations only
            if message.role == Role.SYSTEM:
                continue

            parts = self.build_parts(message.content, message.attachment)
            turns.append(types.Content(role=_TURN_ROLES[message.role], parts=parts))

        return turns

    def inject_reference_documents(
        self,
        opaque_documents: Sequence[Document],
        turns: Sequence[types.Content],
    ) -> list[types.Content]:
        if not opaque_documents:
            return list(turns)

        parts: list[types.Part] = [
            types.Part.from_text(
                text=REFERENCE_FILES_NOTE.format(count=len(opaque_documents))
            )
        ]
        for document in opaque_documents:
            parts.append(
                types.Part.from_bytes(
                    data=self._decode_document(document), mime_type=PDF_MIME_TYPE
                )
            )

        self.logger.debug(
            "Prepending %d reference document(s) to %d turn(s)",
            len(opaque_documents),
            len(turns),
        )
        return [types.Content(role="user", parts=parts), *turns]

    @staticmethod
    def _decode_document(document: Document) -> bytes:
        try:
            return decode_base64_payload(document.content)
        except EncodingError as e:
            raise EncodingError(f"Document '{document.name}': {e}") from e
