"""
AssistantService: assembles one Gemini chat request and normalises the reply.

Each call walks IDLE -> ASSEMBLING -> DISPATCHED -> SUCCEEDED | FAILED.
Credential and encoding problems surface while ASSEMBLING, so no request is
sent for them. The chat call is the only network operation; there is no
retry.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from google import genai
from google.genai import types
from langfuse import observe

from agen_rp.entities.attachment import InlineAttachment
from agen_rp.entities.document import Document
from agen_rp.entities.errors import AssistantError
from agen_rp.entities.message import Message
from agen_rp.services.AssistantService.assistant_service_interface import (
    AssistantServiceInterface,
)
from agen_rp.services.AssistantService.failure_classifier import classify_failure
from agen_rp.services.CredentialService.credential_service_interface import (
    CredentialResolverInterface,
)
from agen_rp.services.DocumentService.document_service_interface import (
    DocumentServiceInterface,
)
from agen_rp.services.HistoryService.history_service_interface import (
    HistoryServiceInterface,
)
from agen_rp.services.PromptService.prompt_service_interface import (
    PromptServiceInterface,
)

EMPTY_ANSWER_FALLBACK = "Maaf, saya tidak dapat menjana jawapan pada masa ini."
CREDENTIAL_GUIDANCE = (
    "RALAT API KEY: Sila masukkan API Key yang sah di butang Tetapan "
    "atau tetapkan GEMINI_API_KEY dalam persekitaran aplikasi."
)
TECHNICAL_GUIDANCE = (
    "Maaf, terdapat masalah teknikal. "
    "Sila semak sambungan internet atau API Key anda."
)


class DispatchState(str, Enum):
    IDLE = "idle"
    ASSEMBLING = "assembling"
    DISPATCHED = "dispatched"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ConversationRequest:
    preamble: str
    history: list[types.Content]
    parts: list[types.Part]


@dataclass(frozen=True)
class DispatchOutcome:
    state: DispatchState
    text: str
    error: AssistantError | None = None


class AssistantService(AssistantServiceInterface):
    """
    Dispatch and response normalisation for the Gemini chat endpoint.

    The Gemini client is created per call from the resolved credential, so a
    key entered mid-session takes effect on the next question.
    """

    def __init__(
        self,
        model_name: str,
        temperature: float,
        credential_resolver: CredentialResolverInterface,
        document_service: DocumentServiceInterface,
        prompt_service: PromptServiceInterface,
        history_service: HistoryServiceInterface,
        logger: logging.Logger,
        client_factory: Callable[[str], genai.Client] | None = None,
    ) -> None:
        """
        Args:
            model_name: Gemini model identifier
            temperature: Sampling temperature, kept low for consistent answers
            credential_resolver: Resolves the API key for each call
            document_service: Splits the corpus into text and PDF documents
            prompt_service: Builds the system instruction
            history_service: Converts messages into Gemini turns
            logger: Logger instance
            client_factory: Builds a client from an API key
        """
        self.model_name = model_name
        self.temperature = temperature
        self.credential_resolver = credential_resolver
        self.document_service = document_service
        self.prompt_service = prompt_service
        self.history_service = history_service
        self.logger = logger
        self.client_factory = client_factory or (
            lambda api_key: genai.Client(api_key=api_key)
        )

        self.logger.info(
            "AssistantService initialized. Model: %s, Temperature: %s",
            self.model_name,
            self.temperature,
        )

    def _transition(self, state: DispatchState) -> DispatchState:
        self.logger.debug("Dispatch state -> %s", state.value)
        return state

    def build_request(
        self,
        history: Sequence[Message],
        message: str,
        documents: Sequence[Document],
        image: InlineAttachment | str | None = None,
    ) -> ConversationRequest:
        """
        Assemble the payload for one call.

        Raises:
            EncodingError: If the current image is not a valid data URI or a
                PDF document is not valid base64.
            UnsupportedMediaTypeError: If a document has an unknown type.
        """
        partition = self.document_service.partition(documents)
        preamble = self.prompt_service.build_preamble(documents)

        turns = self.history_service.transcode(history)
        turns = self.history_service.inject_reference_documents(
            partition.opaque, turns
        )

        parts = self.history_service.build_parts(message, image)
        return ConversationRequest(preamble=preamble, history=turns, parts=parts)

    async def dispatch(
        self,
        history: Sequence[Message],
        message: str,
        documents: Sequence[Document],
        image: InlineAttachment | str | None = None,
        api_key: str | None = None,
    ) -> DispatchOutcome:
        state = self._transition(DispatchState.IDLE)
        try:
            state = self._transition(DispatchState.ASSEMBLING)
            credential = self.credential_resolver.resolve(api_key)
            request = self.build_request(history, message, documents, image)

            client = self.client_factory(credential)
            chat = client.aio.chats.create(
                model=self.model_name,
                config=types.GenerateContentConfig(
                    system_instruction=request.preamble,
                    temperature=self.temperature,
                ),
                history=request.history,
            )

            state = self._transition(DispatchState.DISPATCHED)
            self.logger.info(
                "Sending message with %d history turn(s) and %d document(s) to %s",
                len(request.history),
                len(documents),
                self.model_name,
            )
            response = await chat.send_message(request.parts)
            answer = response.text if response is not None else None

        except Exception as e:
            failure = classify_failure(e)
            self.logger.error(
                "Request failed while %s: %s (%s)",
                state.value,
                type(failure).__name__,
                failure,
                exc_info=True,
            )
            self._transition(DispatchState.FAILED)
            guidance = (
                CREDENTIAL_GUIDANCE
                if failure.is_credential_failure
                else TECHNICAL_GUIDANCE
            )
            return DispatchOutcome(DispatchState.FAILED, guidance, failure)

        if not answer:
            self.logger.warning("Model returned an empty answer")
            answer = EMPTY_ANSWER_FALLBACK

        return DispatchOutcome(self._transition(DispatchState.SUCCEEDED), answer)

    @observe()
    async def get_response(
        self,
        history: Sequence[Message],
        message: str,
        documents: Sequence[Document],
        image: InlineAttachment | str | None = None,
        api_key: str | None = None,
    ) -> str:
        outcome = await self.dispatch(history, message, documents, image, api_key)
        return outcome.text
