"""Lifecycle hooks for startup diagnostics."""

from __future__ import annotations

from cvchat.core.container import AppContainer
from cvchat.infra.observability.logger import describe_secret, get_logger

logger = get_logger(__name__)


def on_startup(container: AppContainer) -> None:
    config = container.assistants_client.config
    logger.info(
        "Assistant service: endpoint=%s api_version=%s api_key=%s",
        config.base_url,
        config.api_version,
        describe_secret(config.api_key),
    )
    logger.info(
        "Assistant definition: name=%s model=%s vector_stores=%s",
        container.definition.name,
        container.definition.model,
        ",".join(container.definition.vector_store_ids),
    )
    if not config.enabled:
        logger.warning("AZURE_OPENAI_API_KEY is not set; chat requests will fail until it is.")


def on_shutdown() -> None:
    logger.info("CV assistant API shutdown complete.")
