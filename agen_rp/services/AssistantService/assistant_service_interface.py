from abc import ABC, abstractmethod
from collections.abc import Sequence

from agen_rp.entities.attachment import InlineAttachment
from agen_rp.entities.document import Document
from agen_rp.entities.message import Message


class AssistantServiceInterface(ABC):
    @abstractmethod
    async def get_response(
        self,
        history: Sequence[Message],
        message: str,
        documents: Sequence[Document],
        image: InlineAttachment | str | None = None,
        api_key: str | None = None,
    ) -> str:
        """
        Return the model's answer for ``message``.

        Never raises. Failures come back as one of two guidance strings: one
        for credential problems, one for everything else.
        """
