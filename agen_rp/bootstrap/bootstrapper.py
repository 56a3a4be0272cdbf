from dataclasses import dataclass

from agen_rp.dependencies.components import get_components
from agen_rp.dependencies.services import (
    get_conversation_service,
    get_credential_store,
)
from agen_rp.services.ConversationService.conversation_service_interface import (
    ConversationServiceInterface,
)
from agen_rp.services.CredentialService.credential_service_interface import (
    CredentialStoreInterface,
)


@dataclass
class AssistantSession:
    conversation: ConversationServiceInterface
    credentials: CredentialStoreInterface


def bootstrap_session(
    env: str = "development",
    config_path: str = "configuration",
) -> AssistantSession:
    components = get_components(env=env, config_path=config_path)
    credentials = get_credential_store(components)

    conversation = get_conversation_service(components, credentials)
    return AssistantSession(conversation=conversation, credentials=credentials)
