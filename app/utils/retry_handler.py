"""
Sistema de manejo de reintentos (redelivery) con supresión de fallas.

Este módulo implementa la estrategia de reintentos usada para el envío de
comentarios de estado a Magento2: espera fija entre intentos, un contador
independiente por clase de falla y, al agotar los reintentos, un resultado
explícito de falla suprimida en lugar de propagar la excepción.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from app.core.config import get_settings
from app.utils.error_handler import (
    Magento2ResponseParseError,
    Magento2TransportError,
)

logger = logging.getLogger(__name__)


@dataclass
class DeliveryResult:
    """
    Resultado de una entrega supervisada.

    Attributes:
        delivered: True si alguna ejecución terminó sin error
        attempts: Número total de ejecuciones realizadas
        value: Valor devuelto por la ejecución exitosa
        error: Última excepción si la entrega fue suprimida
    """

    delivered: bool
    attempts: int
    value: Any = None
    error: Optional[Exception] = None

    @property
    def suppressed(self) -> bool:
        """La entrega agotó sus reintentos y la falla no se propagó."""
        return not self.delivered


class RedeliveryPolicy:
    """
    Política de reintentos con espera constante.
    """

    def __init__(
        self,
        max_redeliveries: int = 2,
        redelivery_delay_ms: int = 1000,
        retry_on: Optional[List[Type[Exception]]] = None,
    ):
        """
        Inicializa la política de reintentos.

        Args:
            max_redeliveries: Reintentos adicionales permitidos por clase de falla
            redelivery_delay_ms: Espera fija entre intentos, en milisegundos
            retry_on: Clases de falla supervisadas, cada una con su propio contador
        """
        if max_redeliveries < 0:
            raise ValueError(f"max_redeliveries cannot be negative: {max_redeliveries}")
        if redelivery_delay_ms < 0:
            raise ValueError(f"redelivery_delay_ms cannot be negative: {redelivery_delay_ms}")

        self.max_redeliveries = max_redeliveries
        self.redelivery_delay_ms = redelivery_delay_ms
        self.retry_on = retry_on or [Magento2TransportError, Magento2ResponseParseError]

    @classmethod
    def from_settings(cls) -> "RedeliveryPolicy":
        """Crea la política a partir de la configuración de Magento2."""
        settings = get_settings()
        return cls(
            max_redeliveries=settings.MAGENTO2_REDELIVERY_ATTEMPTS,
            redelivery_delay_ms=settings.MAGENTO2_REDELIVERY_DELAY_MS,
        )

    def failure_class(self, exception: Exception) -> Optional[Type[Exception]]:
        """
        Determina la clase de falla supervisada a la que pertenece la excepción.

        Returns:
            La clase de ``retry_on`` que coincide, o None si no está supervisada
        """
        for retry_exc in self.retry_on:
            if isinstance(exception, retry_exc):
                return retry_exc
        return None

    def should_retry(self, failures: int) -> bool:
        """
        Determina si debe reintentar tras ``failures`` fallas de una misma clase.
        """
        return failures <= self.max_redeliveries

    def calculate_delay(self) -> float:
        """Segundos a esperar antes del siguiente intento (sin backoff ni jitter)."""
        return self.redelivery_delay_ms / 1000.0


def describe_failure(exception: Exception) -> str:
    """Texto de diagnóstico para una falla de entrega."""
    if isinstance(exception, Magento2TransportError):
        return f"{exception.api_response_code} - {exception.status_text} - {exception.response_body}"
    if isinstance(exception, Magento2ResponseParseError):
        return f"{exception.message} - {exception.body}"
    return f"{type(exception).__name__}: {exception}"


class RedeliveryHandler:
    """
    Manejador de reintentos que nunca propaga fallas supervisadas.

    Las excepciones fuera de ``retry_on`` se propagan sin reintentar.
    """

    def __init__(
        self,
        name: str,
        policy: Optional[RedeliveryPolicy] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Inicializa el manejador.

        Args:
            name: Nombre identificativo del handler
            policy: Política de reintentos
            sleep: Corutina de espera (inyectable para tests)
        """
        self.name = name
        self.policy = policy or RedeliveryPolicy()
        self._sleep = sleep

        self.metrics = {
            "total_attempts": 0,
            "total_successes": 0,
            "total_failures": 0,
            "total_retries": 0,
            "total_suppressed": 0,
        }

    async def execute(
        self, func: Callable[..., Awaitable[Any]], *args, context: Optional[Dict[str, Any]] = None, **kwargs
    ) -> DeliveryResult:
        """
        Ejecuta una corutina bajo supervisión de reintentos.

        Args:
            func: Corutina a ejecutar
            *args: Argumentos posicionales
            context: Contexto adicional para logging
            **kwargs: Argumentos con nombre

        Returns:
            DeliveryResult: Entrega exitosa o falla suprimida
        """
        context = context or {}
        failures: Dict[Type[Exception], int] = {}
        attempt = 0

        while True:
            attempt += 1
            self.metrics["total_attempts"] += 1

            try:
                logger.debug(f"Executing {self.name} - Attempt {attempt}", extra={"context": context})
                value = await func(*args, **kwargs)

            except Exception as e:
                failure_class = self.policy.failure_class(e)
                if failure_class is None:
                    raise

                self.metrics["total_failures"] += 1
                failures[failure_class] = failures.get(failure_class, 0) + 1

                logger.error(
                    f"{self.name} - Upsert failed - we make Retry: {describe_failure(e)}",
                    extra={"attempt": attempt, "failure_class": failure_class.__name__, "context": context},
                )

                if not self.policy.should_retry(failures[failure_class]):
                    self.metrics["total_suppressed"] += 1
                    logger.error(
                        f"All redelivery attempts exhausted for {self.name} - continuing without delivery",
                        extra={"attempts": attempt, "last_exception": str(e), "context": context},
                    )
                    return DeliveryResult(delivered=False, attempts=attempt, error=e)

                delay = self.policy.calculate_delay()
                self.metrics["total_retries"] += 1
                logger.info(
                    f"Retrying {self.name} in {delay:.2f}s - Attempt {attempt + 1}",
                    extra={"delay": delay, "context": context},
                )
                await self._sleep(delay)
                continue

            self.metrics["total_successes"] += 1
            return DeliveryResult(delivered=True, attempts=attempt, value=value)

    def get_metrics(self) -> Dict[str, Any]:
        """
        Obtiene métricas del handler.

        Returns:
            Dict: Métricas actuales
        """
        return {
            **self.metrics,
            "handler_name": self.name,
            "max_redeliveries": self.policy.max_redeliveries,
            "redelivery_delay_ms": self.policy.redelivery_delay_ms,
        }

    def reset_metrics(self):
        """Reinicia las métricas."""
        for key in self.metrics:
            self.metrics[key] = 0


def create_magento2_redelivery_handler(sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep) -> RedeliveryHandler:
    """
    Crea un handler para el envío de comentarios de estado a Magento2.

    Returns:
        RedeliveryHandler: Handler configurado desde Settings
    """
    return RedeliveryHandler(
        name="magento2_order_status",
        policy=RedeliveryPolicy.from_settings(),
        sleep=sleep,
    )
