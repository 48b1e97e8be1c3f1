from __future__ import annotations

from fastapi import APIRouter

from core.deps import ProvidersDep

router = APIRouter(tags=["health"])


@router.get("/health")
def health(providers: ProvidersDep):
    # Keep this super simple and always unauthenticated
    return {
        "ok": True,
        "storageProvider": providers.settings.storage.provider,
        "pendingObjectDeletes": providers.synchronizer.pending,
    }
