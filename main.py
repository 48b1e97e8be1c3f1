# main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.providers import init_providers
from core.settings import get_settings
from health.router import router as health_router
from items.errors import ItemTaskError
from items.router import router as items_router
from providers.factory import Providers
from providers.storage import ObjectStoreError
from s3file.errors import S3FileItemError, S3ObjectOperationFailed
from s3file.router import router as s3file_router

log = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    # no-op when the host (uvicorn, pytest) already installed root handlers
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------
# Error rendering
# ---------------------------------------------------------------------

async def _s3_file_item_error(request: Request, exc: S3FileItemError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _object_store_error(request: Request, exc: ObjectStoreError) -> JSONResponse:
    err = S3ObjectOperationFailed(data={"operation": exc.operation, "key": exc.key})
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


async def _item_task_error(request: Request, exc: ItemTaskError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


# ---------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------

def create_app(providers: Optional[Providers] = None) -> FastAPI:
    """
    Build the app. Providers are created during lifespan startup unless
    supplied; a missing store configuration aborts startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        p = init_providers(app, providers)
        configure_logging(p.settings.log_level)
        log.info("providers ready (storage=%s)", type(p.storage).__name__)
        yield
        # let detached object deletions finish before the loop goes away
        await p.synchronizer.drain()

    app = FastAPI(title="S3 File Item Service", lifespan=lifespan)

    app.add_exception_handler(S3FileItemError, _s3_file_item_error)
    app.add_exception_handler(ObjectStoreError, _object_store_error)
    app.add_exception_handler(ItemTaskError, _item_task_error)

    app.include_router(health_router)
    app.include_router(items_router)
    app.include_router(s3file_router)
    return app


app = create_app()


# ---------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------

if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
    )
