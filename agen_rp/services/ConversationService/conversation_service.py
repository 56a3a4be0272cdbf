from __future__ import annotations

import logging
from collections.abc import Sequence

from agen_rp.entities.attachment import decode_data_uri
from agen_rp.entities.document import Document, UploadedFile
from agen_rp.entities.errors import UnsupportedMediaTypeError
from agen_rp.entities.message import Message, Role
from agen_rp.services.AssistantService.assistant_service_interface import (
    AssistantServiceInterface,
)
from agen_rp.services.ConversationService.conversation_service_interface import (
    ConversationServiceInterface,
)
from agen_rp.services.DocumentService.document_service_interface import (
    DocumentServiceInterface,
)

WELCOME_MESSAGE = (
    "Selamat datang ke Agen RP Maya. Saya boleh membantu menjawab soalan "
    "berkaitan Rancangan Pemajuan berdasarkan dokumen rujukan yang dimuat naik. "
    "Apa yang ingin anda ketahui?"
)
DOCUMENTS_ADDED_NOTE = (
    "{added} dokumen telah ditambah. Jumlah dokumen aktif: {total}."
)
TRANSCRIPT_SEPARATOR = "\n\n------------------------\n\n"
IMAGE_MARKER = "[Gambar dilampirkan]\n"
_SENDER_NAMES = {Role.USER: "Pengguna", Role.MODEL: "Agen RP Maya"}


class ConversationBusyError(RuntimeError):
    """Raised when a question is sent while the previous one is still pending."""


class ConversationService(ConversationServiceInterface):
    """
    In-memory conversation session.

    Holds the message log and the document corpus for one user session and
    guarantees at most one in-flight request to the model.
    """

    def __init__(
        self,
        assistant: AssistantServiceInterface,
        document_service: DocumentServiceInterface,
        logger: logging.Logger,
        welcome_message: str = WELCOME_MESSAGE,
    ) -> None:
        self.assistant = assistant
        self.document_service = document_service
        self.logger = logger
        self.messages: list[Message] = [Message(role=Role.MODEL, content=welcome_message)]
        self.documents: list[Document] = []
        self._busy = False

    @property
    def is_busy(self) -> bool:
        return self._busy

    def add_documents(self, uploads: Sequence[UploadedFile]) -> list[Document]:
        added = [
            self.document_service.ingest(upload.name, upload.mime_type, upload.content)
            for upload in uploads
        ]
        if not added:
            return []

        self.documents.extend(added)
        self.messages.append(
            Message(
                role=Role.SYSTEM,
                content=DOCUMENTS_ADDED_NOTE.format(
                    added=len(added), total=len(self.documents)
                ),
            )
        )
        self.logger.info(
            "Added %d document(s), %d active", len(added), len(self.documents)
        )
        return added

    def remove_document(self, document_id: str) -> Document:
        for index, document in enumerate(self.documents):
            if document.id == document_id:
                self.logger.info("Removed document '%s'", document.name)
                return self.documents.pop(index)
        raise KeyError(document_id)

    async def send(
        self,
        text: str,
        image: str | None = None,
        api_key: str | None = None,
    ) -> Message:
        if not text.strip() and not image:
            raise ValueError("A question or an image is required")

        if self._busy:
            raise ConversationBusyError("A previous question is still pending")

        attachment = decode_data_uri(image) if image else None
        if attachment is not None and not attachment.mime_type.startswith("image/"):
            raise UnsupportedMediaTypeError("image", attachment.mime_type)

        self._busy = True
        try:
            history = list(self.messages)
            documents = list(self.documents)
            self.messages.append(
                Message(role=Role.USER, content=text, attachment=attachment)
            )

            answer = await self.assistant.get_response(
                history=history,
                message=text,
                documents=documents,
                image=attachment,
                api_key=api_key,
            )

            reply = Message(role=Role.MODEL, content=answer)
            self.messages.append(reply)
            return reply
        finally:
            self._busy = False

    def transcript(self) -> str:
        if len(self.messages) <= 1:
            return ""

        entries = []
        for message in self.messages:
            if message.role == Role.SYSTEM:
                continue
            time = message.timestamp.astimezone().strftime("%H:%M")
            attachment = IMAGE_MARKER if message.attachment else ""
            entries.append(
                f"[{time}] {_SENDER_NAMES[message.role]}:\n{attachment}{message.content}"
            )
        return TRANSCRIPT_SEPARATOR.join(entries)
