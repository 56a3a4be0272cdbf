"""
Failure taxonomy for the assistant pipeline.

Errors raised before dispatch (missing credential, bad encoding) stop the
request from being sent. Everything raised during or after dispatch is
classified into one of these types and turned into a guidance string by
the assistant service.
"""


class AssistantError(Exception):
    """Base error for the prompt-assembly and dispatch pipeline."""

    is_credential_failure: bool = False


class MissingCredentialError(AssistantError):
    is_credential_failure = True

    def __init__(self, message: str = "API Key tidak dijumpai.") -> None:
        super().__init__(message)


class UnsupportedMediaTypeError(AssistantError):
    def __init__(self, name: str, mime_type: str | None) -> None:
        self.name = name
        self.mime_type = mime_type
        super().__init__(f"Unsupported media type for '{name}': {mime_type}")


class EncodingError(AssistantError):
    """Raised when a data URI or an uploaded payload cannot be decoded."""


class TransportFailureError(AssistantError):
    """Network-level failure reaching the model backend."""


class ProviderRejectedError(AssistantError):
    """The backend rejected the credential or the quota is exhausted."""

    is_credential_failure = True


class UnknownFailureError(AssistantError):
    """Any failure that does not fit another category."""
