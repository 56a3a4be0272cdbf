"""
Unit tests for HistoryService: message transcoding and reference document
injection.
"""

import logging

import pytest

from agen_rp.entities.attachment import InlineAttachment, decode_data_uri
from agen_rp.entities.document import Document
from agen_rp.entities.errors import EncodingError
from agen_rp.entities.message import Message, Role
from agen_rp.services.HistoryService.history_service import HistoryService


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("HistoryServiceTest")


@pytest.fixture
def history_service(logger: logging.Logger) -> HistoryService:
    return HistoryService(logger=logger)


def binary_parts(content) -> list:
    return [part for part in content.parts if part.inline_data is not None]


class TestTranscode:
    def test_maps_roles_and_keeps_order(self, history_service: HistoryService) -> None:
        messages = [
            Message(role=Role.MODEL, content="Selamat datang"),
            Message(role=Role.USER, content="Apa itu zon perumahan?"),
            Message(role=Role.MODEL, content="Zon perumahan ialah..."),
        ]

        turns = history_service.transcode(messages)

        assert [turn.role for turn in turns] == ["model", "user", "model"]
        assert [turn.parts[0].text for turn in turns] == [
            "Selamat datang",
            "Apa itu zon perumahan?",
            "Zon perumahan ialah...",
        ]

    def test_skips_system_messages(self, history_service: HistoryService) -> None:
        messages = [
            Message(role=Role.USER, content="Soalan"),
            Message(role=Role.SYSTEM, content="2 dokumen telah ditambah."),
            Message(role=Role.MODEL, content="Jawapan"),
        ]

        turns = history_service.transcode(messages)

        assert len(turns) == 2
        assert all("dokumen telah ditambah" not in turn.parts[-1].text for turn in turns)

    def test_image_part_precedes_text(
        self, history_service: HistoryService, image_data_uri: str
    ) -> None:
        message = Message(
            role=Role.USER,
            content="Lihat peta ini",
            attachment=decode_data_uri(image_data_uri),
        )

        (turn,) = history_service.transcode([message])

        assert len(turn.parts) == 2
        image_part, text_part = turn.parts
        expected = decode_data_uri(image_data_uri)
        assert image_part.inline_data.mime_type == "image/png"
        assert image_part.inline_data.data == expected.data
        assert text_part.text == "Lihat peta ini"

    def test_empty_text_still_emits_text_part(
        self, history_service: HistoryService, image_data_uri: str
    ) -> None:
        message = Message(
            role=Role.USER, content="", attachment=decode_data_uri(image_data_uri)
        )

        (turn,) = history_service.transcode([message])

        assert turn.parts[-1].text == ""

    def test_every_turn_has_a_part(self, history_service: HistoryService) -> None:
        turns = history_service.transcode([Message(role=Role.MODEL, content="")])
        assert len(turns[0].parts) == 1

    def test_structured_attachment_used_without_reparsing(
        self, history_service: HistoryService
    ) -> None:
        attachment = InlineAttachment(mime_type="image/jpeg", data=b"\xff\xd8\xff")
        message = Message(role=Role.USER, content="Foto tapak", attachment=attachment)

        (turn,) = history_service.transcode([message])

        assert turn.parts[0].inline_data.mime_type == "image/jpeg"
        assert turn.parts[0].inline_data.data == b"\xff\xd8\xff"

    def test_empty_history(self, history_service: HistoryService) -> None:
        assert history_service.transcode([]) == []


class TestInjectReferenceDocuments:
    def test_no_documents_returns_turns_unchanged(
        self, history_service: HistoryService
    ) -> None:
        turns = history_service.transcode([Message(role=Role.USER, content="Hai")])

        result = history_service.inject_reference_documents([], turns)

        assert result == turns

    def test_synthetic_turn_prepended(
        self, history_service: HistoryService, pdf_document: Document
    ) -> None:
        turns = history_service.transcode(
            [
                Message(role=Role.USER, content="Soalan"),
                Message(role=Role.MODEL, content="Jawapan"),
            ]
        )

        result = history_service.inject_reference_documents([pdf_document], turns)

        assert len(result) == 3
        assert result[0].role == "user"
        assert result[1:] == turns

    def test_one_binary_part_per_document(
        self, history_service: HistoryService, pdf_document: Document
    ) -> None:
        raw = Document(name="b.pdf", mime_type="application/pdf", content="JVBERi0xLjc=")

        result = history_service.inject_reference_documents([pdf_document, raw], [])

        synthetic = result[0]
        parts = binary_parts(synthetic)
        assert len(parts) == 2
        assert all(part.inline_data.mime_type == "application/pdf" for part in parts)
        assert parts[0].inline_data.data == decode_data_uri(pdf_document.content).data
        assert parts[1].inline_data.data == b"%PDF-1.7"
        assert "(2 fail)" in synthetic.parts[0].text

    def test_does_not_mutate_input_turns(
        self, history_service: HistoryService, pdf_document: Document
    ) -> None:
        turns = history_service.transcode([Message(role=Role.USER, content="Hai")])
        snapshot = list(turns)

        history_service.inject_reference_documents([pdf_document], turns)

        assert turns == snapshot

    def test_invalid_document_payload_raises(
        self, history_service: HistoryService
    ) -> None:
        broken = Document(name="x.pdf", mime_type="application/pdf", content="@@@")

        with pytest.raises(EncodingError):
            history_service.inject_reference_documents([broken], [])


class TestBuildParts:
    def test_text_only(self, history_service: HistoryService) -> None:
        parts = history_service.build_parts("Hai")
        assert len(parts) == 1 and parts[0].text == "Hai"

    def test_malformed_image_raises(self, history_service: HistoryService) -> None:
        with pytest.raises(EncodingError):
            history_service.build_parts("Hai", "not-a-data-uri")

    def test_current_image_data_uri_decoded(
        self, history_service: HistoryService, image_data_uri: str
    ) -> None:
        image_part, text_part = history_service.build_parts("Hai", image_data_uri)

        assert image_part.inline_data.mime_type == "image/png"
        assert text_part.text == "Hai"
