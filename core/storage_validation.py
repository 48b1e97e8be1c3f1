from __future__ import annotations

import logging
from typing import Optional

from core.settings import StorageSettings, get_settings

log = logging.getLogger(__name__)


class StorageConfigError(RuntimeError):
    pass


def validate_storage_config(settings: Optional[StorageSettings] = None) -> None:
    """
    Validate object store configuration at startup.

    - s3: region, bucket and both credentials are mandatory
    - minio: endpoint, bucket and both credentials are mandatory
    """
    s = settings or get_settings().storage

    missing = []
    if s.provider == "minio":
        if not s.endpoint_url:
            missing.append("S3_ENDPOINT_URL")
    elif not s.region:
        missing.append("S3_REGION")
    if not s.bucket:
        missing.append("S3_BUCKET")
    if not s.access_key_id:
        missing.append("S3_ACCESS_KEY_ID")
    if not s.secret_access_key:
        missing.append("S3_SECRET_ACCESS_KEY")

    if missing:
        raise StorageConfigError(
            f"s3-file-item: mandatory options missing: {', '.join(missing)}"
        )

    if s.use_accelerate_endpoint and s.endpoint_url:
        log.warning("S3_USE_ACCELERATE_ENDPOINT ignored because S3_ENDPOINT_URL is set")

    log.info("Storage provider: %s (bucket=%s)", s.provider, s.bucket)
