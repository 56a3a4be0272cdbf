"""
Pytest configuration and shared fixtures.

Langfuse tracing is disabled before any test module imports it, so the
``@observe()`` decorated dispatch never sends traces during test runs.
"""

import os
import logging

import pytest

os.environ["LANGFUSE_TRACING_ENABLED"] = "false"

_langfuse_logger = logging.getLogger("langfuse")
_langfuse_logger.setLevel(logging.CRITICAL)
_langfuse_logger.propagate = False

from agen_rp.entities.attachment import encode_data_uri  # noqa: E402
from agen_rp.entities.document import Document  # noqa: E402

PDF_BYTES = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\nfake plan\n%%EOF"
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


@pytest.fixture
def pdf_document() -> Document:
    return Document(
        name="plan.pdf",
        mime_type="application/pdf",
        content=encode_data_uri("application/pdf", PDF_BYTES),
    )


@pytest.fixture
def text_document() -> Document:
    return Document(
        name="zon.txt",
        mime_type="text/plain",
        content="Zon perumahan: kepadatan maksimum 40 unit seekar.",
    )


@pytest.fixture
def image_data_uri() -> str:
    return encode_data_uri("image/png", PNG_BYTES)
