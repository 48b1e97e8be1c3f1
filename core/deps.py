from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from core.providers import providers_from_request
from items.tasks import ItemTaskManager
from providers.factory import Providers
from s3file.metadata import MetadataResolver
from s3file.upload import UploadAuthorizer


# -----------------------------
# Canonical provider access
# -----------------------------

def get_providers(request: Request) -> Providers:
    """
    Canonical runtime provider resolver.

    Source of truth: request.app.state.providers
    """
    return providers_from_request(request)


ProvidersDep = Annotated[Providers, Depends(get_providers)]


# -----------------------------
# Canonical service deps
# -----------------------------

def get_items(request: Request) -> ItemTaskManager:
    """
    Item task system (create/get/update/copy/delete with lifecycle hooks).
    """
    return get_providers(request).items


ItemsDep = Annotated[ItemTaskManager, Depends(get_items)]


def get_uploads(request: Request) -> UploadAuthorizer:
    return get_providers(request).uploads


UploadsDep = Annotated[UploadAuthorizer, Depends(get_uploads)]


def get_metadata_resolver(request: Request) -> MetadataResolver:
    return get_providers(request).metadata


MetadataDep = Annotated[MetadataResolver, Depends(get_metadata_resolver)]
