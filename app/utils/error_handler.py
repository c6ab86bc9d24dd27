"""
Sistema de manejo de errores personalizado.

Este módulo define todas las excepciones personalizadas de la aplicación
y proporciona utilidades para manejo consistente de errores.
"""

import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """
    Códigos de error estandardizados para la aplicación.
    """

    # Errores generales
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Errores de Magento2
    MAGENTO2_API_ERROR = "MAGENTO2_API_ERROR"
    MAGENTO2_RESPONSE_INVALID = "MAGENTO2_RESPONSE_INVALID"

    # Errores de datos
    INVALID_ORDER_DATA = "INVALID_ORDER_DATA"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"


class ErrorSeverity(Enum):
    """
    Niveles de severidad para errores.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AppException(Exception):
    """
    Excepción base para todas las excepciones personalizadas de la aplicación.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        is_retryable: bool = False,
    ):
        """
        Inicializa la excepción.

        Args:
            message: Mensaje de error
            error_code: Código de error estandardizado
            details: Información adicional del error
            status_code: Código HTTP asociado
            severity: Severidad del error
            is_retryable: Si la operación puede reintentarse
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.severity = severity
        self.is_retryable = is_retryable
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convierte la excepción a diccionario.

        Returns:
            Dict: Representación de la excepción
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "details": self.details,
            "status_code": self.status_code,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        """String representation del error."""
        return f"{self.error_code.value}: {self.message}"


class ConfigurationException(AppException):
    """
    Excepción para configuración inválida o incompleta.
    """

    def __init__(self, message: str, setting: str, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.CONFIGURATION_ERROR,
            status_code=500,
            severity=ErrorSeverity.HIGH,
            **kwargs,
        )
        self.setting = setting
        self.details.update({"setting": setting})


class MissingFieldError(AppException):
    """
    Falta un campo obligatorio en un documento de entrada (input cacheado o respuesta de COVER).

    No es reintentable: indica un documento mal formado aguas arriba.
    """

    def __init__(self, field_path: str, document: str = "document", **kwargs):
        """
        Inicializa la excepción de campo faltante.

        Args:
            field_path: Ruta con puntos del campo faltante (ej. ``order.order_id_unique``)
            document: Nombre del documento inspeccionado
            **kwargs: Argumentos adicionales para AppException
        """
        super().__init__(
            message=f"Missing required field '{field_path}' in {document}",
            error_code=ErrorCode.MISSING_REQUIRED_FIELD,
            status_code=422,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.field_path = field_path
        self.document = document
        self.details.update({"field": field_path, "document": document})


class MalformedErrorCodeError(AppException):
    """
    El ``error_code`` de la respuesta de COVER no es numérico.
    """

    def __init__(self, error_code: Any, **kwargs):
        super().__init__(
            message=f"COVER error_code is not numeric: {error_code!r}",
            error_code=ErrorCode.INVALID_ORDER_DATA,
            status_code=422,
            severity=ErrorSeverity.MEDIUM,
            **kwargs,
        )
        self.invalid_value = error_code
        self.details.update({"field": "order.error.error_code", "invalid_value": str(error_code)})


class Magento2TransportError(AppException):
    """
    Excepción para respuestas no-2xx o fallas de red contra la API REST de Magento2.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        status_text: str = "",
        response_body: str = "",
        endpoint: Optional[str] = None,
        **kwargs,
    ):
        """
        Inicializa la excepción de transporte.

        Args:
            message: Mensaje de error
            status_code: Código HTTP devuelto por Magento2 (None si no hubo respuesta)
            status_text: Texto de estado HTTP
            response_body: Cuerpo de la respuesta
            endpoint: URL invocada
            **kwargs: Argumentos adicionales para AppException
        """
        severity = ErrorSeverity.HIGH if status_code and status_code >= 500 else ErrorSeverity.MEDIUM

        super().__init__(
            message=message,
            error_code=ErrorCode.MAGENTO2_API_ERROR,
            status_code=status_code or 503,
            severity=severity,
            is_retryable=True,
            **kwargs,
        )
        self.api_response_code = status_code
        self.status_text = status_text
        self.response_body = response_body
        self.endpoint = endpoint

        self.details.update(
            {
                "api_response_code": status_code,
                "status_text": status_text,
                "response_body": response_body,
                "endpoint": endpoint,
            }
        )


class Magento2ResponseParseError(AppException):
    """
    Excepción para respuestas de Magento2 cuyo cuerpo no es JSON válido.
    """

    def __init__(self, message: str, body: str = "", **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.MAGENTO2_RESPONSE_INVALID,
            status_code=502,
            severity=ErrorSeverity.MEDIUM,
            is_retryable=True,
            **kwargs,
        )
        self.body = body
        self.details.update({"body": body})


# === FUNCIONES DE UTILIDAD ===


def log_error(
    exception: Exception,
    context: Optional[Dict[str, Any]] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Loggea un error de manera consistente.

    Args:
        exception: Excepción a loggear
        context: Contexto adicional
        level: Nivel de logging
    """
    context = context or {}

    log_data = {
        "exception_type": type(exception).__name__,
        "exception_message": str(exception),
        "traceback": traceback.format_exc(),
        **context,
    }

    if isinstance(exception, AppException):
        message = f"{exception.error_code.value}: {exception.message}"
        log_data.update(
            {
                "error_code": exception.error_code.value,
                "severity": exception.severity.value,
                "is_retryable": exception.is_retryable,
            }
        )
    else:
        message = f"Unhandled exception: {type(exception).__name__}: {str(exception)}"

    logger.log(level, message, extra=log_data)


def create_error_response(exception: Exception) -> Dict[str, Any]:
    """
    Crea respuesta de error estandardizada.

    Args:
        exception: Excepción a convertir

    Returns:
        Dict: Respuesta de error
    """
    if isinstance(exception, AppException):
        error_dict = exception.to_dict()
    else:
        error_dict = AppException(
            message=f"{type(exception).__name__}: {exception}",
            details={"original_exception": type(exception).__name__},
        ).to_dict()

    return {"error": True, **error_dict}
