"""Tests for the hosted backend, served by httpx.MockTransport."""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from stockroom.domain.exceptions import AuthError, EntityNotFoundError, PersistenceError
from stockroom.domain.model.invoice import InvoiceDraft
from stockroom.domain.model.product import ProductInput
from stockroom.domain.model.session import Session, User
from stockroom.domain.model.value_objects import Money
from stockroom.infrastructure.auth.session_store import FileSessionStore
from stockroom.infrastructure.auth.supabase_auth_gateway import SupabaseAuthGateway
from stockroom.infrastructure.persistence.supabase_invoice_repository import (
    SupabaseInvoiceRepository,
)
from stockroom.infrastructure.persistence.supabase_product_repository import (
    SupabaseProductRepository,
)
from stockroom.infrastructure.supabase_client import SupabaseClient

ROW = {
    "id": "7d1f",
    "name": "Yogurt",
    "category": "Dairy",
    "price": 2.5,
    "stock": 4,
    "min_stock": 6,
    "sku": "YOG-1",
    "created_at": "2026-10-01T08:00:00+00:00",
    "updated_at": "2026-10-01T08:00:00+00:00",
}


class Recorder:
    """Collects requests and answers them from a handler function."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []
        self._handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


def _client(handler, token=None) -> tuple[SupabaseClient, Recorder]:
    recorder = Recorder(handler)
    client = SupabaseClient(
        "https://project.supabase.test/",
        "anon-key",
        token_provider=lambda: token,
        transport=httpx.MockTransport(recorder),
    )
    return client, recorder


class TestSupabaseProductRepository:

    @pytest.mark.asyncio
    async def test_list_orders_by_creation_descending(self):
        client, recorder = _client(lambda request: httpx.Response(200, json=[ROW]))
        [product] = await SupabaseProductRepository(client).list_all()

        request = recorder.requests[0]
        assert request.url.path == "/rest/v1/products"
        assert request.url.params["order"] == "created_at.desc"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer anon-key"
        assert product.min_stock == 6
        assert product.price == Money.of("2.5")
        assert product.is_low_stock

    @pytest.mark.asyncio
    async def test_signed_in_requests_carry_access_token(self):
        client, recorder = _client(lambda request: httpx.Response(200, json=[]), token="jwt")
        await SupabaseProductRepository(client).list_all()
        assert recorder.requests[0].headers["Authorization"] == "Bearer jwt"

    @pytest.mark.asyncio
    async def test_insert_sends_snake_case_row(self):
        client, recorder = _client(lambda request: httpx.Response(201, json=[ROW]))
        data = ProductInput.parse(
            name="Yogurt", category="Dairy", price="2.50",
            stock="4", min_stock="6", sku="YOG-1",
        )
        product = await SupabaseProductRepository(client).insert(data.provided())

        request = recorder.requests[0]
        body = json.loads(request.content)
        assert request.method == "POST"
        assert request.headers["Prefer"] == "return=representation"
        assert body == [{
            "name": "Yogurt", "category": "Dairy", "price": "2.50",
            "stock": 4, "min_stock": 6, "sku": "YOG-1",
        }]
        assert product.id == "7d1f"

    @pytest.mark.asyncio
    async def test_update_filters_by_id(self):
        client, recorder = _client(
            lambda request: httpx.Response(200, json=[{**ROW, "stock": 10}])
        )
        product = await SupabaseProductRepository(client).update("7d1f", {"stock": 10})
        request = recorder.requests[0]
        assert request.method == "PATCH"
        assert request.url.params["id"] == "eq.7d1f"
        assert product.stock == 10

    @pytest.mark.asyncio
    async def test_update_with_no_matching_row_is_not_found(self):
        client, _ = _client(lambda request: httpx.Response(200, json=[]))
        with pytest.raises(EntityNotFoundError):
            await SupabaseProductRepository(client).update("gone", {"stock": 1})

    @pytest.mark.asyncio
    async def test_delete(self):
        client, recorder = _client(lambda request: httpx.Response(204))
        await SupabaseProductRepository(client).delete("7d1f")
        assert recorder.requests[0].method == "DELETE"
        assert recorder.requests[0].url.params["id"] == "eq.7d1f"

    @pytest.mark.asyncio
    async def test_backend_error_message_is_surfaced(self):
        client, _ = _client(
            lambda request: httpx.Response(409, json={"message": "duplicate key value"})
        )
        with pytest.raises(PersistenceError, match="duplicate key value"):
            await SupabaseProductRepository(client).insert({"name": "x"})

    @pytest.mark.asyncio
    async def test_network_failure_is_a_persistence_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = _client(handler)
        with pytest.raises(PersistenceError, match="unreachable"):
            await SupabaseProductRepository(client).list_all()


class TestSupabaseInvoiceRepository:

    @pytest.mark.asyncio
    async def test_save_writes_header_then_items(self):
        def handler(request):
            if request.url.path.endswith("/invoices"):
                return httpx.Response(201, json=[{"id": "inv-1"}])
            return httpx.Response(201)

        client, recorder = _client(handler)
        draft = InvoiceDraft(customer_name="Asha")
        draft.add_line().set_price("10")
        draft.add_line().set_price("5")
        await SupabaseInvoiceRepository(client).save(draft.to_record())

        header, items = recorder.requests
        assert json.loads(header.content)[0]["customer_name"] == "Asha"
        item_rows = json.loads(items.content)
        assert [row["invoice_id"] for row in item_rows] == ["inv-1", "inv-1"]
        assert item_rows[0]["product_id"] is None

    @pytest.mark.asyncio
    async def test_list_since_embeds_items(self):
        row = {
            "id": "inv-1",
            "invoice_number": "INV-20261002-ABCDEF",
            "customer_name": "Asha",
            "customer_phone": None,
            "subtotal": 10,
            "tax": 0.8,
            "total": 10.8,
            "created_at": "2026-10-02T10:00:00+00:00",
            "invoice_items": [{
                "product_id": "p1", "product_name": "Tea", "product_sku": "TEA",
                "price": 10, "quantity": 1, "total": 10,
            }],
        }
        client, recorder = _client(lambda request: httpx.Response(200, json=[row]))
        [record] = await SupabaseInvoiceRepository(client).list_since(
            datetime(2026, 10, 1, tzinfo=timezone.utc)
        )
        assert recorder.requests[0].url.params["created_at"].startswith("gte.2026-10-01")
        assert record.total == Money.of("10.8")
        assert record.items[0].product_name == "Tea"


class TestSupabaseAuthGateway:

    TOKEN_BODY = {
        "access_token": "jwt",
        "refresh_token": "refresh",
        "expires_in": 3600,
        "user": {"id": "u1", "email": "owner@store.test", "user_metadata": {"full_name": "Owner"}},
    }

    @pytest.mark.asyncio
    async def test_sign_in_stores_session(self, tmp_path):
        client, recorder = _client(lambda request: httpx.Response(200, json=self.TOKEN_BODY))
        store = FileSessionStore(tmp_path / "session.json")
        session = await SupabaseAuthGateway(client, store).sign_in("owner@store.test", "pw")

        request = recorder.requests[0]
        assert request.url.path == "/auth/v1/token"
        assert request.url.params["grant_type"] == "password"
        assert session.user.display_name == "Owner"
        assert store.access_token() == "jwt"

    @pytest.mark.asyncio
    async def test_rejected_credentials(self, tmp_path):
        client, _ = _client(lambda request: httpx.Response(
            400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"}
        ))
        store = FileSessionStore(tmp_path / "session.json")
        with pytest.raises(AuthError, match="Invalid login credentials"):
            await SupabaseAuthGateway(client, store).sign_in("owner@store.test", "bad")
        assert store.load() is None

    @pytest.mark.asyncio
    async def test_sign_out_revokes_and_forgets(self, tmp_path):
        client, recorder = _client(lambda request: httpx.Response(204))
        store = FileSessionStore(tmp_path / "session.json")
        store.save(Session(user=User(id="u1", email="a@b.c"), access_token="jwt"))
        await SupabaseAuthGateway(client, store).sign_out()
        assert recorder.requests[0].headers["Authorization"] == "Bearer jwt"
        assert store.load() is None

    @pytest.mark.asyncio
    async def test_expired_session_is_refreshed(self, tmp_path):
        client, recorder = _client(lambda request: httpx.Response(200, json=self.TOKEN_BODY))
        store = FileSessionStore(tmp_path / "session.json")
        store.save(Session(
            user=User(id="u1", email="owner@store.test"),
            access_token="old",
            refresh_token="refresh",
            expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
        ))
        session = await SupabaseAuthGateway(client, store).current_session()
        assert recorder.requests[0].url.params["grant_type"] == "refresh_token"
        assert session.access_token == "jwt"

    @pytest.mark.asyncio
    async def test_failed_refresh_drops_session(self, tmp_path):
        client, _ = _client(lambda request: httpx.Response(401, json={"msg": "expired"}))
        store = FileSessionStore(tmp_path / "session.json")
        store.save(Session(
            user=User(id="u1", email="owner@store.test"),
            access_token="old",
            refresh_token="refresh",
            expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
        ))
        assert await SupabaseAuthGateway(client, store).current_session() is None
        assert store.load() is None
