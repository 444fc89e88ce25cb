"""Shared dependencies for the split API."""

from typing import Optional

from fastapi import Request

from csvninja.settings import Settings
from csvninja.splitter.errors import StorageDisabledError
from csvninja.storage import ArtifactStore


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_optional_store(request: Request) -> Optional[ArtifactStore]:
    return request.app.state.store


def require_store(request: Request) -> ArtifactStore:
    """Artifact store; only available when the app runs in disk storage mode."""
    store = request.app.state.store
    if store is None:
        raise StorageDisabledError()
    return store
