from abc import ABC, abstractmethod
from collections.abc import Sequence

from agen_rp.entities.document import Document


class PromptServiceInterface(ABC):
    persona: str

    @abstractmethod
    def build_preamble(self, documents: Sequence[Document]) -> str:
        """Return the system instruction for the given document corpus."""
