from agen_rp.bootstrap.components import Components
from agen_rp.components.configuration.settings import AgenRPSettings
from agen_rp.components.logger.logger import Logger
from agen_rp.dependencies.repositories import get_credential_repository
from agen_rp.services.AssistantService.assistant_service import AssistantService
from agen_rp.services.AssistantService.assistant_service_interface import (
    AssistantServiceInterface,
)
from agen_rp.services.ConversationService.conversation_service import (
    ConversationService,
)
from agen_rp.services.ConversationService.conversation_service_interface import (
    ConversationServiceInterface,
)
from agen_rp.services.CredentialService.credential_service import (
    CredentialResolver,
    CredentialStore,
    environment_provider,
    static_provider,
)
from agen_rp.services.DocumentService.document_service import DocumentService
from agen_rp.services.DocumentService.document_service_interface import (
    DocumentServiceInterface,
)
from agen_rp.services.HistoryService.history_service import HistoryService
from agen_rp.services.PromptService.prompt_service import PromptService, load_persona


def get_credential_store(components: Components) -> CredentialStore:
    """
    Create the session credential store, restoring the remembered key once.
    """
    settings = components.get_component(AgenRPSettings)
    return CredentialStore(
        repository=get_credential_repository(components),
        storage_key=settings.credential_storage_key,
        logger=components.get_component(Logger).get_logger("CredentialStore"),
    )


def get_credential_resolver(
    components: Components, credential_store: CredentialStore
) -> CredentialResolver:
    """
    Providers in priority order after the per-call override:
    session value, remembered value, build-time key, hosting environment.
    """
    settings = components.get_component(AgenRPSettings)
    return CredentialResolver(
        providers=[
            credential_store.session_provider(),
            credential_store.persisted_provider(),
            static_provider(settings.build_api_key),
            environment_provider(settings.credential_env_vars),
        ]
    )


def get_document_service(components: Components) -> DocumentServiceInterface:
    return DocumentService(
        logger=components.get_component(Logger).get_logger("DocumentService")
    )


def get_assistant_service(
    components: Components, credential_store: CredentialStore
) -> AssistantServiceInterface:
    settings = components.get_component(AgenRPSettings)
    logger = components.get_component(Logger)
    document_service = get_document_service(components)

    persona = load_persona(
        settings.persona_prompt_path, logger.get_logger("PromptService")
    )

    return AssistantService(
        model_name=settings.model_name,
        temperature=settings.temperature,
        credential_resolver=get_credential_resolver(components, credential_store),
        document_service=document_service,
        prompt_service=PromptService(
            persona=persona, document_service=document_service
        ),
        history_service=HistoryService(logger=logger.get_logger("HistoryService")),
        logger=logger.get_logger("AssistantService"),
    )


def get_conversation_service(
    components: Components, credential_store: CredentialStore
) -> ConversationServiceInterface:
    return ConversationService(
        assistant=get_assistant_service(components, credential_store),
        document_service=get_document_service(components),
        logger=components.get_component(Logger).get_logger("ConversationService"),
    )
