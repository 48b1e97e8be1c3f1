from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.settings import Settings, get_settings
from core.storage_validation import validate_storage_config
from items.memory import InMemoryItemTaskManager
from items.tasks import ItemTaskManager
from providers.impl.storage_minio import MinioObjectStore
from providers.impl.storage_s3 import S3ObjectStore
from providers.storage import ObjectStoreClient
from s3file.hooks import LifecycleSynchronizer
from s3file.metadata import MetadataResolver
from s3file.upload import UploadAuthorizer


@dataclass(frozen=True)
class Providers:
    """
    Central container for runtime collaborators.

    Built once during app startup and attached to app.state.providers.
    """
    settings: Settings
    storage: ObjectStoreClient
    items: ItemTaskManager
    uploads: UploadAuthorizer
    synchronizer: LifecycleSynchronizer
    metadata: MetadataResolver


def build_object_store(settings: Settings) -> ObjectStoreClient:
    s = settings.storage
    if s.provider == "minio":
        return MinioObjectStore.from_settings(s)
    return S3ObjectStore.from_settings(s)


def build_providers(
    settings: Optional[Settings] = None,
    storage: Optional[ObjectStoreClient] = None,
    items: Optional[ItemTaskManager] = None,
) -> Providers:
    """
    Composition root. Passing `storage` skips config validation so tests and
    alternate stores can be injected without S3 credentials.
    """
    settings = settings or get_settings()
    if storage is None:
        validate_storage_config(settings.storage)
        storage = build_object_store(settings)
    items = items or InMemoryItemTaskManager()

    synchronizer = LifecycleSynchronizer(storage)
    synchronizer.register(items)

    return Providers(
        settings=settings,
        storage=storage,
        items=items,
        uploads=UploadAuthorizer(storage, settings.storage.upload_expiration_seconds),
        synchronizer=synchronizer,
        metadata=MetadataResolver(storage, items),
    )
