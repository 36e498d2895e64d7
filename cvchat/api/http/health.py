"""HTTP API layer: health and readiness endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from cvchat.api.deps import get_container
from cvchat.core.container import AppContainer

router = APIRouter(tags=["health"])


@router.get("/health")
def health(container: AppContainer = Depends(get_container)) -> dict:
    config = container.assistants_client.config
    return {
        "status": "ok",
        "env": container.settings.env,
        "assistant_service": {
            "configured": config.enabled,
            "endpoint": config.base_url,
            "api_version": config.api_version,
        },
    }
