"""Tests de integración del endpoint POST /api/v1/magento2/order-status."""

import pytest
from fastapi.testclient import TestClient

from app.api.v1.endpoints.order_status import get_status_sync_orchestrator
from app.main import app
from app.utils.error_handler import Magento2TransportError

ENDPOINT = "/api/v1/magento2/order-status"


@pytest.fixture
def api(make_orchestrator, make_client):
    """TestClient con el orquestador reemplazado por uno con cliente falso."""

    def install(outcomes=None, **kwargs):
        client = make_client(outcomes)
        orchestrator = make_orchestrator(client, **kwargs)
        app.dependency_overrides[get_status_sync_orchestrator] = lambda: orchestrator
        return client

    yield TestClient(app), install
    app.dependency_overrides.clear()


def request_body(cached_input, cover_response, **extra):
    body = {
        "cached_input": cached_input,
        "cover_response": cover_response,
        "shop_url": "https://shop.example.com/",
        "shop_auth_token": "secret-token",
    }
    body.update(extra)
    return body


class TestOrderStatusEndpoint:
    """Tests del endpoint de sincronización de estado."""

    def test_success(self, api, cached_input, cover_response_ok):
        """Debe devolver success cuando Magento2 acepta el comentario."""
        http, install = api
        client = install([True])

        response = http.post(ENDPOINT, json=request_body(cached_input, cover_response_ok))

        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "success"
        assert payload["data"] == {
            "order_id_unique": "1000245",
            "delivered": True,
            "upsert_failed": True,
            "attempts": 1,
            "error": None,
        }
        assert client.calls[0]["url"] == "https://shop.example.com/rest/V1/orders/1000245/comments"

    def test_degraded_when_delivery_is_suppressed(self, api, cached_input, cover_response_error):
        """Fallas de entrega agotadas no deben producir error HTTP."""
        http, install = api
        failure = Magento2TransportError("HTTP 500 from Magento2", status_code=500, status_text="Internal Server Error")
        client = install([failure, failure, failure])

        response = http.post(ENDPOINT, json=request_body(cached_input, cover_response_error))

        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "degraded"
        assert payload["data"]["delivered"] is False
        assert payload["data"]["upsert_failed"] is False
        assert payload["data"]["attempts"] == 3
        assert "MAGENTO2_API_ERROR" in payload["data"]["error"]
        assert len(client.calls) == 3

    def test_missing_order_id_returns_422(self, api, cover_response_ok):
        """Un input sin order_id_unique debe responder 422 sin llamar a Magento2."""
        http, install = api
        client = install()

        response = http.post(ENDPOINT, json=request_body({"order": {}}, cover_response_ok))

        assert response.status_code == 422
        payload = response.json()
        assert payload["error_code"] == "MISSING_REQUIRED_FIELD"
        assert payload["field"] == "order.order_id_unique"
        assert client.calls == []

    def test_malformed_error_code_returns_422(self, api, cached_input):
        """Un error_code no numérico debe responder 422."""
        http, install = api
        client = install()
        cover_response = {"order": {"error": {"error_code": "abc", "error_msg": "x"}}}

        response = http.post(ENDPOINT, json=request_body(cached_input, cover_response))

        assert response.status_code == 422
        assert response.json()["field"] == "order.error.error_code"
        assert client.calls == []

    def test_invalid_request_body_returns_422(self, api):
        """Un request sin cover_response debe fallar en la validación de FastAPI."""
        http, install = api
        install()

        response = http.post(ENDPOINT, json={"cached_input": {}})

        assert response.status_code == 422


class TestRootEndpoints:
    """Tests de endpoints raíz."""

    def test_ping(self):
        """Debe responder pong."""
        response = TestClient(app).get("/ping")

        assert response.status_code == 200
        assert response.json()["message"] == "pong"
