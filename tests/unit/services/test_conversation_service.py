"""
Unit tests for the in-memory conversation session.
"""

import asyncio
import logging
import os
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from agen_rp.entities.attachment import (
    InlineAttachment,
    decode_data_uri,
    encode_data_uri,
)
from agen_rp.entities.document import UploadedFile
from agen_rp.entities.errors import EncodingError, UnsupportedMediaTypeError
from agen_rp.entities.message import Message, Role
from agen_rp.services.ConversationService.conversation_service import (
    WELCOME_MESSAGE,
    ConversationBusyError,
    ConversationService,
)
from agen_rp.services.DocumentService.document_service import DocumentService


@pytest.fixture
def assistant() -> AsyncMock:
    assistant = AsyncMock()
    assistant.get_response.return_value = "Jawapan model"
    return assistant


@pytest.fixture
def conversation(assistant: AsyncMock) -> ConversationService:
    logger = logging.getLogger("ConversationServiceTest")
    return ConversationService(
        assistant=assistant,
        document_service=DocumentService(logger),
        logger=logger,
    )


@contextmanager
def local_timezone(tz: str):
    previous = os.environ.get("TZ")
    os.environ["TZ"] = tz
    time.tzset()
    try:
        yield
    finally:
        if previous is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = previous
        time.tzset()


class TestDocuments:
    def test_add_documents_appends_system_note(
        self, conversation: ConversationService
    ) -> None:
        added = conversation.add_documents(
            [
                UploadedFile("plan.pdf", "application/pdf", b"%PDF-1.4"),
                UploadedFile("nota.txt", "text/plain", b"Nota"),
            ]
        )

        assert [doc.name for doc in added] == ["plan.pdf", "nota.txt"]
        assert len(conversation.documents) == 2
        note = conversation.messages[-1]
        assert note.role is Role.SYSTEM
        assert note.content == "2 dokumen telah ditambah. Jumlah dokumen aktif: 2."

    def test_unsupported_upload_rejects_batch(
        self, conversation: ConversationService
    ) -> None:
        with pytest.raises(UnsupportedMediaTypeError):
            conversation.add_documents(
                [
                    UploadedFile("nota.txt", "text/plain", "Nota"),
                    UploadedFile("peta.png", "image/png", b"\x89PNG"),
                ]
            )

        assert conversation.documents == []
        assert len(conversation.messages) == 1

    def test_remove_document(self, conversation: ConversationService) -> None:
        (document,) = conversation.add_documents(
            [UploadedFile("nota.txt", "text/plain", "Nota")]
        )

        removed = conversation.remove_document(document.id)

        assert removed == document
        assert conversation.documents == []

    def test_remove_unknown_document_raises(
        self, conversation: ConversationService
    ) -> None:
        with pytest.raises(KeyError):
            conversation.remove_document("missing")


class TestSend:
    @pytest.mark.asyncio
    async def test_send_records_question_and_answer(
        self, conversation: ConversationService, assistant: AsyncMock
    ) -> None:
        reply = await conversation.send("Apa itu zon perumahan?")

        assert reply.role is Role.MODEL
        assert reply.content == "Jawapan model"
        assert [m.role for m in conversation.messages] == [
            Role.MODEL,
            Role.USER,
            Role.MODEL,
        ]
        assert not conversation.is_busy

    @pytest.mark.asyncio
    async def test_history_excludes_current_question(
        self, conversation: ConversationService, assistant: AsyncMock
    ) -> None:
        await conversation.send("Soalan pertama", api_key="k")

        call_kwargs = assistant.get_response.call_args[1]
        assert [m.content for m in call_kwargs["history"]] == [WELCOME_MESSAGE]
        assert call_kwargs["message"] == "Soalan pertama"
        assert call_kwargs["api_key"] == "k"

    @pytest.mark.asyncio
    async def test_image_only_question_allowed(
        self, conversation: ConversationService, image_data_uri: str
    ) -> None:
        await conversation.send("", image=image_data_uri)

        assert conversation.messages[1].attachment == decode_data_uri(image_data_uri)

    @pytest.mark.asyncio
    async def test_image_decoded_once_and_passed_structured(
        self,
        conversation: ConversationService,
        assistant: AsyncMock,
        image_data_uri: str,
    ) -> None:
        await conversation.send("Lihat peta", image=image_data_uri)

        image = assistant.get_response.call_args[1]["image"]
        assert isinstance(image, InlineAttachment)
        assert image.mime_type == "image/png"
        assert image is conversation.messages[1].attachment

    @pytest.mark.asyncio
    async def test_malformed_image_rejected_before_recording(
        self, conversation: ConversationService, assistant: AsyncMock
    ) -> None:
        with pytest.raises(EncodingError):
            await conversation.send("Soalan", image="data:image/png;base64iVBORw0KGgo")

        assistant.get_response.assert_not_called()
        assert len(conversation.messages) == 1
        assert not conversation.is_busy

    @pytest.mark.asyncio
    async def test_blank_question_rejected(
        self, conversation: ConversationService, assistant: AsyncMock
    ) -> None:
        with pytest.raises(ValueError):
            await conversation.send("   ")

        assistant.get_response.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_image_attachment_rejected(
        self, conversation: ConversationService
    ) -> None:
        with pytest.raises(UnsupportedMediaTypeError):
            await conversation.send(
                "Soalan", image=encode_data_uri("application/pdf", b"%PDF")
            )

    @pytest.mark.asyncio
    async def test_second_call_while_pending_rejected(
        self, conversation: ConversationService, assistant: AsyncMock
    ) -> None:
        release = asyncio.Event()

        async def slow_response(**kwargs):
            await release.wait()
            return "Lambat"

        assistant.get_response.side_effect = slow_response

        first = asyncio.create_task(conversation.send("Pertama"))
        await asyncio.sleep(0)
        assert conversation.is_busy

        with pytest.raises(ConversationBusyError):
            await conversation.send("Kedua")

        release.set()
        reply = await first
        assert reply.content == "Lambat"
        assert not conversation.is_busy

    @pytest.mark.asyncio
    async def test_busy_flag_cleared_after_error(
        self, conversation: ConversationService, assistant: AsyncMock
    ) -> None:
        assistant.get_response.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await conversation.send("Soalan")

        assert not conversation.is_busy


class TestTranscript:
    def test_empty_when_only_welcome(self, conversation: ConversationService) -> None:
        assert conversation.transcript() == ""

    def test_formats_messages_and_skips_system(
        self, conversation: ConversationService
    ) -> None:
        at = datetime(2026, 10, 19, 9, 5, tzinfo=timezone.utc)
        conversation.messages = [
            Message(role=Role.MODEL, content="Selamat datang", timestamp=at),
            Message(role=Role.SYSTEM, content="1 dokumen telah ditambah.", timestamp=at),
            Message(
                role=Role.USER,
                content="Lihat peta",
                attachment=InlineAttachment(mime_type="image/png", data=b"\x00"),
                timestamp=at,
            ),
        ]

        with local_timezone("UTC0"):
            transcript = conversation.transcript()

        assert transcript == (
            "[09:05] Agen RP Maya:\nSelamat datang"
            "\n\n------------------------\n\n"
            "[09:05] Pengguna:\n[Gambar dilampirkan]\nLihat peta"
        )

    def test_times_shown_in_local_timezone(
        self, conversation: ConversationService
    ) -> None:
        at = datetime(2026, 10, 19, 1, 5, tzinfo=timezone.utc)
        conversation.messages = [
            Message(role=Role.MODEL, content="Selamat datang", timestamp=at),
            Message(role=Role.USER, content="Soalan", timestamp=at),
        ]

        # Malaysia time, UTC+8
        with local_timezone("MYT-8"):
            transcript = conversation.transcript()

        assert "[09:05] Agen RP Maya:" in transcript
        assert "[09:05] Pengguna:" in transcript
        assert "[01:05]" not in transcript
