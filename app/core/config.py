"""
Configuración centralizada de la aplicación.

Este módulo maneja todas las variables de entorno y configuraciones
de la aplicación usando Pydantic Settings para validación automática.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Configuración de la aplicación usando Pydantic Settings.

    Todas las configuraciones se cargan desde variables de entorno
    con valores por defecto apropiados para desarrollo.
    """

    # === CONFIGURACIÓN BÁSICA DE LA APP ===
    APP_NAME: str = "COVER-Magento2 Status Sync"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=True)

    # === CONFIGURACIÓN DEL SERVIDOR ===
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8080)
    LOG_LEVEL: str = Field(default="INFO")

    # === CONFIGURACIÓN DE MAGENTO2 ===
    MAGENTO2_SHOP_URL: str = Field(default="https://localhost")
    MAGENTO2_ACCESS_TOKEN: str = Field(default="your-access-token")
    # Reintentos adicionales tras el primer intento fallido
    MAGENTO2_REDELIVERY_ATTEMPTS: int = Field(default=2)
    # Espera fija entre intentos, en milisegundos
    MAGENTO2_REDELIVERY_DELAY_MS: int = Field(default=1000)
    # Timeout por request HTTP, en segundos
    MAGENTO2_REQUEST_TIMEOUT: float = Field(default=30.0)
    # Límite total para la etapa de envío (None = sin límite)
    MAGENTO2_SYNC_DEADLINE_SECONDS: Optional[float] = Field(default=None)
    MAGENTO2_WRAP_STATUS_HISTORY: bool = Field(default=False)

    # === CONFIGURACIÓN DE LOGGING ===
    LOG_FILE_PATH: Optional[str] = Field(default="logs/app.log")
    LOG_MAX_SIZE_MB: int = Field(default=10)
    LOG_BACKUP_COUNT: int = Field(default=5)

    # === CONFIGURACIÓN DE DOCUMENTACIÓN ===
    ENABLE_DOCS: bool = Field(default=True)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "allow",
    }

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Valida que el nivel de log sea válido."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL debe ser uno de: {valid_levels}")
        return v.upper()

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Valida que el entorno sea válido."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"ENVIRONMENT debe ser uno de: {valid_envs}")
        return v.lower()

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v):
        """Valida que el puerto esté en rango válido."""
        if not 1 <= v <= 65535:
            raise ValueError("PORT debe estar entre 1 y 65535")
        return v

    @field_validator("MAGENTO2_SHOP_URL")
    @classmethod
    def validate_magento2_url(cls, v):
        """Normaliza la URL de la tienda: agrega esquema y quita la barra final."""
        v = v.strip()
        if not v.startswith("https://") and not v.startswith("http://"):
            v = f"https://{v}"
        return v.rstrip("/")

    @field_validator("MAGENTO2_REDELIVERY_ATTEMPTS", "MAGENTO2_REDELIVERY_DELAY_MS")
    @classmethod
    def validate_non_negative(cls, v):
        """Los reintentos y la espera no pueden ser negativos."""
        if v < 0:
            raise ValueError("El valor de redelivery no puede ser negativo")
        return v

    @field_validator("MAGENTO2_REQUEST_TIMEOUT")
    @classmethod
    def validate_request_timeout(cls, v):
        """El timeout HTTP debe ser positivo."""
        if v <= 0:
            raise ValueError("MAGENTO2_REQUEST_TIMEOUT debe ser mayor que 0")
        return v

    @property
    def is_production(self) -> bool:
        """Verifica si está en entorno de producción."""
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        """Verifica si está en entorno de desarrollo."""
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Obtiene la instancia de configuración (cacheada).

    Returns:
        Settings: Configuración de la aplicación
    """
    return Settings()
