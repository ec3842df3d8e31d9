"""Centralized dependency injection container.

The process-wide context: settings, the store handle and the model gateway are
built once here and injected into services; business logic never reads them
as globals.
"""
from __future__ import annotations

import structlog
from dependency_injector import containers, providers

from core.settings import SETTINGS
from infra.llm_gateway import ModelGateway
from infra.resources import DatabaseResource


logger = structlog.get_logger("chat")


class InfrastructureContainer(containers.DeclarativeContainer):
    config = providers.Configuration()
    settings = providers.Object(SETTINGS)
    logger = providers.Object(logger)

    # Database
    database = providers.Resource(
        DatabaseResource,
        database_url=str(SETTINGS.DATABASE.DATABASE_URL),
        connect_retries=SETTINGS.DATABASE.DB_CONNECT_RETRIES,
        backoff_seconds=SETTINGS.DATABASE.DB_CONNECT_BACKOFF_SECONDS,
    )

    # Chat-completion provider
    model_gateway = providers.Singleton(
        ModelGateway,
        provider_url=SETTINGS.LLM.LLM_PROVIDER_URL,
        model=SETTINGS.LLM.LLM_MODEL,
        api_key=SETTINGS.LLM.LLM_API_KEY.get_secret_value(),
        timeout=SETTINGS.LLM.LLM_REQUEST_TIMEOUT,
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Application services - depends on infrastructure."""

    infrastructure = providers.DependenciesContainer()

    user_service = providers.Factory(
        "api.features.users.service.UserService",
    )

    conversation_service = providers.Factory(
        "api.features.conversation.service.ConversationService",
        model_gateway=infrastructure.model_gateway,
    )


class ControllerContainer(containers.DeclarativeContainer):
    """Controller-specific dependencies."""

    services = providers.DependenciesContainer()

    user_controller = providers.Factory(
        "api.features.users.controller.UserController",
        user_service=services.user_service,
    )

    conversation_controller = providers.Factory(
        "api.features.conversation.controller.ConversationController",
        conversation_service=services.conversation_service,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Main application container composing all sub-containers."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "api.shared.db",
            "api.features.users.router",
            "api.features.conversation.router",
        ]
    )

    infrastructure = providers.Container(InfrastructureContainer)
    services = providers.Container(ServiceContainer, infrastructure=infrastructure)
    controllers = providers.Container(ControllerContainer, services=services)
