from __future__ import annotations

import httpx
from google.genai import errors as genai_errors

from agen_rp.entities.errors import (
    AssistantError,
    ProviderRejectedError,
    TransportFailureError,
    UnknownFailureError,
)

_CREDENTIAL_CODES = {401, 403, 429}
_CREDENTIAL_STATUSES = {"UNAUTHENTICATED", "PERMISSION_DENIED", "RESOURCE_EXHAUSTED"}
_CREDENTIAL_MARKERS = ("api key", "api_key", "quota")


def _is_credential_rejection(error: genai_errors.APIError) -> bool:
    if error.code in _CREDENTIAL_CODES:
        return True
    if (error.status or "").upper() in _CREDENTIAL_STATUSES:
        return True
    message = (error.message or str(error)).lower()
    return any(marker in message for marker in _CREDENTIAL_MARKERS)


def classify_failure(error: BaseException) -> AssistantError:
    """Map any exception raised by the pipeline onto the failure taxonomy."""
    if isinstance(error, AssistantError):
        return error

    if isinstance(error, genai_errors.APIError):
        if _is_credential_rejection(error):
            return ProviderRejectedError(str(error))
        return UnknownFailureError(str(error))

    if isinstance(error, (httpx.TransportError, ConnectionError, TimeoutError)):
        return TransportFailureError(str(error) or type(error).__name__)

    return UnknownFailureError(str(error) or type(error).__name__)
