"""Tests unitarios para Magento2RestClient."""

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from app.db.magento2_client import Magento2RestClient
from app.utils.error_handler import Magento2ResponseParseError, Magento2TransportError

URL = "https://shop.example.com/rest/V1/orders/1000245/comments"
HEADERS = {"Authorization": "Bearer t", "Content-Type": "application/json;charset=utf-8"}


def mock_session(status=200, reason="OK", text="true"):
    """Sesión aiohttp falsa que devuelve una sola respuesta."""
    response = MagicMock()
    response.status = status
    response.reason = reason
    response.read = AsyncMock(return_value=text if isinstance(text, bytes) else text.encode("utf-8"))

    session = MagicMock()
    session.post.return_value.__aenter__.return_value = response
    session.post.return_value.__aexit__.return_value = False
    session.close = AsyncMock()
    return session


class TestMagento2RestClientPost:
    """Tests para Magento2RestClient.post."""

    @pytest.mark.asyncio
    async def test_success_returns_parsed_json(self):
        """Debe devolver el JSON parseado en respuestas 2xx."""
        session = mock_session(text='{"entity_id": 5}')
        client = Magento2RestClient(session=session)

        result = await client.post(URL, '{"comment":"x"}', HEADERS)

        assert result == {"entity_id": 5}

    @pytest.mark.asyncio
    async def test_body_is_sent_as_utf8(self):
        """Debe enviar el cuerpo codificado en UTF-8 con los headers dados."""
        session = mock_session()
        client = Magento2RestClient(session=session)

        await client.post(URL, '{"comment":"verfügbar"}', HEADERS)

        session.post.assert_called_once_with(URL, data='{"comment":"verfügbar"}'.encode("utf-8"), headers=HEADERS)

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self):
        """Un cuerpo vacío no es un error de parseo."""
        client = Magento2RestClient(session=mock_session(text=""))
        assert await client.post(URL, "{}", HEADERS) is None

    @pytest.mark.asyncio
    async def test_non_2xx_raises_transport_error(self):
        """Debe lanzar Magento2TransportError con código, texto y cuerpo de la respuesta."""
        session = mock_session(status=401, reason="Unauthorized", text='{"message":"Consumer is not authorized"}')
        client = Magento2RestClient(session=session)

        with pytest.raises(Magento2TransportError) as exc_info:
            await client.post(URL, "{}", HEADERS)

        error = exc_info.value
        assert error.api_response_code == 401
        assert error.status_text == "Unauthorized"
        assert error.response_body == '{"message":"Consumer is not authorized"}'
        assert error.endpoint == URL
        assert error.is_retryable is True

    @pytest.mark.asyncio
    async def test_network_error_raises_transport_error(self):
        """Errores de red deben mapearse a Magento2TransportError."""
        session = MagicMock()
        session.post.side_effect = aiohttp.ClientConnectionError("connection refused")
        client = Magento2RestClient(session=session)

        with pytest.raises(Magento2TransportError) as exc_info:
            await client.post(URL, "{}", HEADERS)

        assert "connection refused" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, aiohttp.ClientConnectionError)

    @pytest.mark.asyncio
    async def test_invalid_json_raises_parse_error(self):
        """Una respuesta 2xx con JSON inválido debe lanzar Magento2ResponseParseError."""
        client = Magento2RestClient(session=mock_session(text="<html>maintenance</html>"))

        with pytest.raises(Magento2ResponseParseError) as exc_info:
            await client.post(URL, "{}", HEADERS)

        assert exc_info.value.body == "<html>maintenance</html>"

    @pytest.mark.asyncio
    async def test_non_utf8_body_raises_parse_error(self):
        """Un cuerpo 2xx que no es UTF-8 debe lanzar Magento2ResponseParseError."""
        client = Magento2RestClient(session=mock_session(text=b'\xff\xfe{"x":1}'))

        with pytest.raises(Magento2ResponseParseError) as exc_info:
            await client.post(URL, "{}", HEADERS)

        assert exc_info.value.is_retryable is True
        assert exc_info.value.body.endswith('{"x":1}')
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    @pytest.mark.asyncio
    async def test_non_utf8_error_body_is_kept_in_transport_error(self):
        """Un cuerpo no UTF-8 en una respuesta no-2xx no debe ocultar el error HTTP."""
        client = Magento2RestClient(session=mock_session(status=500, reason="Internal Server Error", text=b"\xffdown"))

        with pytest.raises(Magento2TransportError) as exc_info:
            await client.post(URL, "{}", HEADERS)

        assert exc_info.value.api_response_code == 500
        assert exc_info.value.response_body == "\ufffddown"


class TestMagento2RestClientLifecycle:
    """Tests del ciclo de vida de la sesión."""

    @pytest.mark.asyncio
    async def test_injected_session_is_not_closed(self):
        """No debe cerrar una sesión que no creó."""
        session = mock_session()
        client = Magento2RestClient(session=session)

        await client.close()

        session.close.assert_not_awaited()
        assert client.session is session

    def test_default_timeout_from_settings(self):
        """Debe tomar el timeout de la configuración."""
        client = Magento2RestClient(session=MagicMock())
        assert client.timeout == client.settings.MAGENTO2_REQUEST_TIMEOUT

    def test_explicit_timeout(self):
        """Debe respetar un timeout explícito."""
        assert Magento2RestClient(timeout=5.0, session=MagicMock()).timeout == 5.0
