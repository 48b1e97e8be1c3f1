from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else str(v)


def _env_int(name: str, default: int) -> int:
    raw = _env(name, "")
    if not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = _env(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


# ---------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class StorageSettings:
    """
    Object store configuration.

    provider:
      - "s3"     -> S3ObjectStore (boto3)
      - "minio"  -> MinioObjectStore (S3-compatible local stack)

    cache_control is deliberately unset unless configured; copies only carry
    a Cache-Control header when an operator asks for one.
    """
    provider: str
    region: str = ""
    bucket: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""
    use_accelerate_endpoint: bool = False
    endpoint_url: str = ""
    upload_expiration_seconds: int = 60
    cache_control: Optional[str] = None


@dataclass(frozen=True)
class FileItemSettings:
    filename_truncate_limit: int = 100


@dataclass(frozen=True)
class AuthSettings:
    issuer: str
    jwks_url: str
    audience: str


@dataclass(frozen=True)
class Settings:
    storage: StorageSettings
    file_item: FileItemSettings
    auth: AuthSettings
    log_level: str = "INFO"


# ---------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------

def _normalize_storage_provider(raw: str) -> str:
    v = (raw or "").strip().lower()
    if v in ("minio", "local"):
        return "minio"
    return "s3"


def _load_storage_settings() -> StorageSettings:
    provider = _normalize_storage_provider(_env("STORAGE_PROVIDER", "s3"))

    region = (_env("S3_REGION", "") or _env("AWS_REGION", "") or _env("AWS_DEFAULT_REGION", "")).strip()
    bucket = _env("S3_BUCKET", "").strip()
    access_key_id = _env("S3_ACCESS_KEY_ID", "").strip()
    secret_access_key = _env("S3_SECRET_ACCESS_KEY", "").strip()
    endpoint_url = _env("S3_ENDPOINT_URL", "").strip().rstrip("/")

    expiration = _env_int("S3_UPLOAD_EXPIRATION_SECONDS", 60)
    if expiration <= 0:
        expiration = 60

    cache_control = _env("S3_CACHE_CONTROL", "").strip() or None

    return StorageSettings(
        provider=provider,
        region=region,
        bucket=bucket,
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        use_accelerate_endpoint=_env_bool("S3_USE_ACCELERATE_ENDPOINT", False),
        endpoint_url=endpoint_url,
        upload_expiration_seconds=expiration,
        cache_control=cache_control,
    )


def _load_file_item_settings() -> FileItemSettings:
    limit = _env_int("FILENAME_TRUNCATE_LIMIT", 100)
    return FileItemSettings(filename_truncate_limit=max(1, limit))


def _load_auth_settings() -> AuthSettings:
    return AuthSettings(
        issuer=_env("AUTH_ISSUER", "").strip().rstrip("/"),
        jwks_url=_env("AUTH_JWKS_URL", "").strip(),
        audience=_env("AUTH_AUDIENCE", "").strip(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        storage=_load_storage_settings(),
        file_item=_load_file_item_settings(),
        auth=_load_auth_settings(),
        log_level=(_env("LOG_LEVEL", "INFO").strip().upper() or "INFO"),
    )
