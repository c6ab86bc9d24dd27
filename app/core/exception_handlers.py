"""
Manejadores de excepciones centralizados para la aplicación FastAPI.

Este módulo define los manejadores de excepciones personalizados y globales,
proporcionando respuestas consistentes y logging apropiado para diferentes tipos de errores.
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.utils.error_handler import (
    AppException,
    MalformedErrorCodeError,
    MissingFieldError,
)

settings = get_settings()
logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Manejador para excepciones personalizadas de la aplicación.

    Args:
        request: Request de FastAPI
        exc: Excepción personalizada de la app

    Returns:
        JSONResponse: Respuesta JSON con error formateado
    """
    logger.error(
        f"App Exception: {exc.message} - "
        f"Code: {exc.error_code.value} - "
        f"URL: {request.url} - "
        f"Details: {exc.details}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "error_type": "application_error",
            "error_code": exc.error_code.value,
            "message": exc.message,
            "details": exc.details if settings.DEBUG else None,
            "path": str(request.url.path),
            "timestamp": _now(),
            "request_id": request.headers.get("X-Request-ID"),
        },
    )


async def data_contract_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Manejador para documentos de entrada mal formados (campo faltante o error_code inválido).

    Args:
        request: Request de FastAPI
        exc: MissingFieldError o MalformedErrorCodeError

    Returns:
        JSONResponse: Respuesta 422 con el campo afectado
    """
    logger.warning(f"Data contract violation: {exc.message} - URL: {request.url}")

    return JSONResponse(
        status_code=422,
        content={
            "error": True,
            "error_type": "validation_error",
            "error_code": exc.error_code.value,
            "message": exc.message,
            "field": exc.details.get("field"),
            "invalid_value": exc.details.get("invalid_value") if settings.DEBUG else None,
            "path": str(request.url.path),
            "timestamp": _now(),
            "request_id": request.headers.get("X-Request-ID"),
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Manejador global para excepciones no capturadas.

    Args:
        request: Request de FastAPI
        exc: Excepción no manejada

    Returns:
        JSONResponse: Respuesta 500 genérica
    """
    logger.exception(f"Unhandled Exception: {type(exc).__name__}: {exc} - URL: {request.url}")

    return JSONResponse(
        status_code=500,
        content={
            "error": True,
            "error_type": "internal_server_error",
            "message": str(exc) if settings.DEBUG else "Internal server error",
            "path": str(request.url.path),
            "timestamp": _now(),
            "request_id": request.headers.get("X-Request-ID"),
        },
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """
    Registra todos los manejadores de excepciones en la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    # Específicos primero
    app.add_exception_handler(MissingFieldError, data_contract_exception_handler)
    app.add_exception_handler(MalformedErrorCodeError, data_contract_exception_handler)
    app.add_exception_handler(AppException, app_exception_handler)

    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("Manejadores de excepciones configurados")
