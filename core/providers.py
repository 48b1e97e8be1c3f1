from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request

from providers.factory import Providers, build_providers


def init_providers(app: FastAPI, providers: Optional[Providers] = None) -> Providers:
    """
    Canonical provider initialization.
    Called once during app startup/lifespan. Attaches Providers onto app.state.
    """
    app.state.providers = providers or build_providers()
    return app.state.providers


def providers_from_request(request: Request) -> Providers:
    """
    Canonical provider accessor for ALL routers.

    Routers never reach for a module-level client; providers are attached
    once during app startup as request.app.state.providers.
    """
    try:
        return request.app.state.providers
    except Exception as exc:
        raise RuntimeError("Providers not initialized on app.state (startup/lifespan not executed).") from exc
