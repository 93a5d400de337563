"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from stockroom.application.dashboard import StoreDashboard
from stockroom.domain.exceptions import ConfigurationError
from stockroom.domain.repository.auth_gateway import AuthGateway
from stockroom.domain.repository.invoice_repository import InvoiceRepository
from stockroom.domain.repository.product_repository import ProductRepository
from stockroom.infrastructure.auth.local_auth_gateway import LocalAuthGateway
from stockroom.infrastructure.auth.session_store import FileSessionStore
from stockroom.infrastructure.auth.supabase_auth_gateway import SupabaseAuthGateway
from stockroom.infrastructure.config import Settings
from stockroom.infrastructure.persistence.json_invoice_repository import (
    JsonInvoiceRepository,
)
from stockroom.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from stockroom.infrastructure.persistence.supabase_invoice_repository import (
    SupabaseInvoiceRepository,
)
from stockroom.infrastructure.persistence.supabase_product_repository import (
    SupabaseProductRepository,
)
from stockroom.infrastructure.supabase_client import SupabaseClient


@dataclass
class Backend:
    auth_gateway: AuthGateway
    product_repo: ProductRepository
    invoice_repo: InvoiceRepository
    client: SupabaseClient | None = None

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()


def session_store(settings: Settings) -> FileSessionStore:
    return FileSessionStore(settings.data_dir / "session.json")


def local_auth_gateway(settings: Settings) -> LocalAuthGateway:
    if settings.backend != "json":
        raise ConfigurationError(
            "Local users exist only for the json backend; "
            "manage hosted users in the Supabase dashboard"
        )
    return LocalAuthGateway(settings.data_dir / "users.json", session_store(settings))


def build_backend(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Backend:
    if settings.backend == "json":
        return Backend(
            auth_gateway=local_auth_gateway(settings),
            product_repo=JsonProductRepository(settings.data_dir / "products.json"),
            invoice_repo=JsonInvoiceRepository(settings.data_dir / "invoices.json"),
        )

    settings.validate()
    store = session_store(settings)
    client = SupabaseClient(
        base_url=settings.supabase_url,  # type: ignore[arg-type]
        anon_key=settings.supabase_anon_key,  # type: ignore[arg-type]
        timeout=settings.http_timeout,
        token_provider=store.access_token,
        transport=transport,
    )
    return Backend(
        auth_gateway=SupabaseAuthGateway(client, store),
        product_repo=SupabaseProductRepository(client),
        invoice_repo=SupabaseInvoiceRepository(client),
        client=client,
    )


@asynccontextmanager
async def open_dashboard(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[StoreDashboard]:
    """Yield a dashboard with any active session resumed."""
    backend = build_backend(settings or Settings.from_env(), transport)
    try:
        dashboard = StoreDashboard(
            auth_gateway=backend.auth_gateway,
            product_repo=backend.product_repo,
            invoice_repo=backend.invoice_repo,
        )
        await dashboard.open()
        yield dashboard
    finally:
        await backend.aclose()
