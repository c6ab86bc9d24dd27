"""Tests unitarios para el value object StatusUpdate y PipelineState."""

import json

import pytest

from app.domain.models import PipelineState
from app.domain.value_objects import StatusUpdate
from app.utils.retry_handler import DeliveryResult


class TestStatusUpdate:
    """Tests para StatusUpdate."""

    def test_defaults(self):
        """Debe usar los valores constantes de Magento2 por defecto."""
        update = StatusUpdate(created_at="2025-01-15T10:30:00.000Z", comment="ok")

        assert update.entry_id == 0
        assert update.status == "complete"
        assert update.is_customer_notified == 0

    def test_to_json_field_order_and_names(self):
        """Debe serializar con los nombres y el orden del contrato."""
        update = StatusUpdate(created_at="2025-01-15T10:30:00.000Z", comment="<b>x</b>")

        assert update.to_json() == (
            '{"entry_id":0,"created_at":"2025-01-15T10:30:00.000Z","comment":"<b>x</b>",'
            '"status":"complete","is_customer_notified":0}'
        )

    def test_non_ascii_is_kept(self):
        """Debe mantener caracteres no ASCII sin escapar."""
        update = StatusUpdate(created_at="2025-01-15T10:30:00.000Z", comment="verfügbar")
        assert "verfügbar" in update.to_json()

    def test_from_json_accepts_status_history_envelope(self):
        """Debe aceptar el envoltorio statusHistory."""
        update = StatusUpdate(created_at="2025-01-15T10:30:00.000Z", comment="ok")
        wrapped = json.dumps({"statusHistory": update.to_dict()})

        assert StatusUpdate.from_json(wrapped) == update

    def test_is_immutable(self):
        """Debe ser inmutable."""
        update = StatusUpdate(created_at="2025-01-15T10:30:00.000Z", comment="ok")
        with pytest.raises(AttributeError):
            update.status = "canceled"


class TestPipelineState:
    """Tests para PipelineState."""

    def _state(self, **kwargs):
        defaults = {
            "cached_input": {},
            "cover_response": {},
            "shop_url": "https://shop.example.com/",
            "shop_auth_token": "token",
        }
        defaults.update(kwargs)
        return PipelineState(**defaults)

    def test_upsert_failed_defaults_to_true(self):
        """upsert_failed debe iniciar en True."""
        state = self._state()

        assert state.upsert_failed is True
        assert state.delivered is False

    def test_comments_url(self):
        """Debe componer la URL del endpoint de comentarios sin doble barra."""
        state = self._state(order_id_unique="1000245")
        assert state.comments_url == "https://shop.example.com/rest/V1/orders/1000245/comments"

    def test_comments_url_escapes_order_id(self):
        """Debe escapar caracteres reservados del id para no cambiar el recurso."""
        state = self._state(order_id_unique="10/2?x y")
        assert state.comments_url == "https://shop.example.com/rest/V1/orders/10%2F2%3Fx%20y/comments"

    def test_comments_url_requires_order_id(self):
        """No debe componer la URL sin order_id_unique."""
        with pytest.raises(ValueError):
            _ = self._state().comments_url

    def test_mark_suppressed(self):
        """Debe registrar la entrega suprimida y poner upsert_failed en False."""
        state = self._state()
        delivery = DeliveryResult(delivered=False, attempts=3, error=RuntimeError("x"))

        state.mark_suppressed(delivery)

        assert state.upsert_failed is False
        assert state.delivery is delivery
        assert state.delivered is False
