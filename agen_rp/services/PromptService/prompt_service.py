"""
System instruction assembly.

The preamble is the persona text, a banner naming every uploaded document
and the full content of the textual documents. PDF documents only appear by
name here; their bytes travel as a separate content part.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from agen_rp.entities.document import Document, DocumentPartition
from agen_rp.services.DocumentService.document_service_interface import (
    DocumentServiceInterface,
)
from agen_rp.services.PromptService.prompt_service_interface import (
    PromptServiceInterface,
)


# Used when the persona prompt file is not available
DEFAULT_PERSONA = """Anda ialah "Agen RP Maya", pembantu maya yang menjawab soalan orang awam berkaitan Rancangan Pemajuan (RP) seperti Rancangan Tempatan dan Rancangan Kawasan Khas.

PERATURAN:
1. Jawab hanya berdasarkan dokumen rujukan yang dimuat naik. Jangan reka maklumat.
2. Nyatakan nama dokumen dan bahagian yang dirujuk apabila memberi jawapan.
3. Jika maklumat tiada dalam dokumen, nyatakan dengan jelas bahawa ia tidak dapat disahkan dan cadangkan pengguna merujuk Pihak Berkuasa Perancang Tempatan.
4. Jika pengguna menghantar gambar peta atau pelan, huraikan apa yang kelihatan dan kaitkan dengan dokumen rujukan.
5. Gunakan Bahasa Melayu yang mudah difahami melainkan pengguna menulis dalam bahasa lain.
"""

BANNER_RULE = "=" * 60
BANNER_TITLE = "📂 STATUS DOKUMEN RUJUKAN"
DOCUMENTS_PRESENT = "Dokumen berikut telah dimuat naik untuk rujukan: {names}"
NO_DOCUMENTS_DIRECTIVE = (
    "[TIADA DOKUMEN DIMUAT NAIK. "
    "JAWAB BAHAWA MAKLUMAT TIDAK DAPAT DISAHKAN TANPA DOKUMEN.]"
)
TEXT_CONTENT_START = "--- KANDUNGAN TEKS DOKUMEN RUJUKAN ---"
TEXT_CONTENT_END = "--- TAMAT KANDUNGAN TEKS ---"
DOCUMENT_LABEL = "DOKUMEN {index}: {name}"


def build_preamble(
    persona: str,
    documents: Sequence[Document],
    partition: DocumentPartition,
) -> str:
    """
    Assemble the system instruction in a fixed order.

    Args:
        persona: Behavioural instructions placed first
        documents: Every uploaded document, named in the status banner
        partition: The same documents split by media type; only the textual
            group is inlined

    Returns:
        The preamble text
    """
    sections = [persona.rstrip(), "", BANNER_RULE, BANNER_TITLE, BANNER_RULE]

    if documents:
        names = ", ".join(document.name for document in documents)
        sections.append(DOCUMENTS_PRESENT.format(names=names))
    else:
        sections.append(NO_DOCUMENTS_DIRECTIVE)

    if partition.textual:
        sections.extend(["", TEXT_CONTENT_START])
        for index, document in enumerate(partition.textual, start=1):
            sections.extend(
                [
                    "",
                    DOCUMENT_LABEL.format(index=index, name=document.name),
                    document.content,
                ]
            )
        sections.extend(["", TEXT_CONTENT_END])

    return "\n".join(sections)


def load_persona(prompt_path: str | Path, logger: logging.Logger) -> str:
    """
    Load the persona prompt from ``prompt_path``.

    Returns:
        The file content, or DEFAULT_PERSONA if the file cannot be read.
    """
    path = Path(prompt_path)
    try:
        persona = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning("Persona prompt file not found at %s, using default", path)
        return DEFAULT_PERSONA
    except OSError as e:
        logger.error("Error loading persona prompt: %s, using default", e)
        return DEFAULT_PERSONA

    if not persona.strip():
        logger.warning("Persona prompt file %s is empty, using default", path)
        return DEFAULT_PERSONA
    return persona


class PromptService(PromptServiceInterface):
    def __init__(
        self,
        persona: str,
        document_service: DocumentServiceInterface,
    ) -> None:
        self.persona = persona
        self.document_service = document_service

    def build_preamble(self, documents: Sequence[Document]) -> str:
        partition = self.document_service.partition(documents)
        return build_preamble(self.persona, documents, partition)
