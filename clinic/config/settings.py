from typing import Literal

from pydantic import Field, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from clinic.core.infrastructure.retry import RetryConfig


class Settings(BaseSettings):
    """
    Configuración de los servicios de la clínica utilizando Pydantic BaseSettings.
    Carga automáticamente las variables de entorno (y el archivo .env).

    The same settings class serves both processes; SERVICE_NAME selects which
    routers are mounted.
    """

    # Service Configuration
    SERVICE_NAME: Literal["patients", "appointments"] = Field(
        "appointments", description="Servicio que expone este proceso"
    )
    PROJECT_NAME: str = "Clinic Services"
    PROJECT_DESCRIPTION: str = "Microservicios de pacientes y turnos"
    VERSION: str = "0.1.0"
    API_PREFIX: str = Field("", description="Prefijo opcional para todas las rutas")
    HOST: str = Field("0.0.0.0", description="Host de escucha de uvicorn")
    PORT: int = Field(8002, description="Puerto de escucha de uvicorn")

    # Application Settings
    DEBUG: bool = Field(False, description="Modo de depuración")
    ENVIRONMENT: str = Field("production", description="Entorno de ejecución")

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Nivel de logging")
    LOG_FORMAT: Literal["colored", "json", "plain"] = Field("plain", description="Formato de logs")

    # Sentry Configuration
    SENTRY_DSN: str | None = Field(None, description="Sentry DSN for error tracking")

    # Database Settings
    DATABASE_URL: str = Field(
        "postgresql+asyncpg://postgres@localhost:5432/clinic",
        description="URL asíncrona de SQLAlchemy para el almacenamiento del servicio",
    )
    DB_ECHO: bool = Field(False, description="Log SQL queries (solo para debug)")
    DB_POOL_SIZE: int = Field(10, description="Tamaño del pool de conexiones")
    DB_MAX_OVERFLOW: int = Field(20, description="Máximo overflow del pool")
    DB_POOL_RECYCLE: int = Field(3600, description="Reciclar conexiones cada X segundos")
    DB_CREATE_TABLES: bool = Field(True, description="Crear las tablas al iniciar el servicio")

    # Patients service (consumed by the appointments service)
    PATIENTS_SERVICE_URL: str = Field("http://localhost:8001", description="URL base del servicio de pacientes")
    PATIENTS_LOOKUP_PATH: str = Field(
        "/pacientes/traer/documento/{document}",
        description="Ruta de búsqueda de paciente por documento",
    )
    PATIENTS_REQUEST_TIMEOUT: float = Field(5.0, description="Timeout por request HTTP en segundos")
    PATIENTS_LOOKUP_TIMEOUT: float | None = Field(
        20.0, description="Límite total de la búsqueda (reintentos incluidos); None para deshabilitar"
    )

    # Retry policy for the patients lookup
    PATIENTS_RETRY_MAX_ATTEMPTS: int = Field(3, description="Intentos totales ante fallos transitorios")
    PATIENTS_RETRY_INITIAL_DELAY: float = Field(0.5, description="Espera inicial entre reintentos (s)")
    PATIENTS_RETRY_MAX_DELAY: float = Field(5.0, description="Espera máxima entre reintentos (s)")
    PATIENTS_RETRY_EXPONENTIAL_BASE: float = Field(2.0, description="Base del backoff exponencial")
    PATIENTS_RETRY_JITTER: bool = Field(True, description="Agregar jitter al backoff")

    # Circuit breaker for the patients lookup
    PATIENTS_CB_FAILURE_RATE_THRESHOLD: float = Field(
        50.0, description="Porcentaje de fallos en la ventana que abre el circuito"
    )
    PATIENTS_CB_SLIDING_WINDOW_SIZE: int = Field(10, description="Cantidad de llamadas en la ventana móvil")
    PATIENTS_CB_MINIMUM_CALLS: int = Field(5, description="Llamadas mínimas antes de evaluar la tasa de fallos")
    PATIENTS_CB_WAIT_DURATION_OPEN: float = Field(30.0, description="Segundos en OPEN antes de pasar a HALF_OPEN")
    PATIENTS_CB_HALF_OPEN_CALLS: int = Field(1, description="Llamadas de prueba permitidas en HALF_OPEN")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL inválido: {v}")
        return level

    @field_validator(
        "PATIENTS_RETRY_MAX_ATTEMPTS",
        "PATIENTS_CB_SLIDING_WINDOW_SIZE",
        "PATIENTS_CB_MINIMUM_CALLS",
        "PATIENTS_CB_HALF_OPEN_CALLS",
    )
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("PATIENTS_CB_FAILURE_RATE_THRESHOLD")
    @classmethod
    def validate_failure_rate(cls, v: float) -> float:
        if not 0 < v <= 100:
            raise ValueError("PATIENTS_CB_FAILURE_RATE_THRESHOLD must be in (0, 100]")
        return v

    @field_validator("PATIENTS_LOOKUP_TIMEOUT", mode="before")
    @classmethod
    def parse_lookup_timeout(cls, value):
        if isinstance(value, str) and value.strip().lower() in {"", "none", "null"}:
            return None
        return value

    @model_validator(mode="after")
    def validate_lookup_budget(self) -> "Settings":
        # The budget must leave room for every attempt and every backoff
        if self.PATIENTS_LOOKUP_TIMEOUT is not None and self.PATIENTS_LOOKUP_TIMEOUT <= self.patients_lookup_worst_case:
            raise ValueError(
                f"PATIENTS_LOOKUP_TIMEOUT ({self.PATIENTS_LOOKUP_TIMEOUT}s) must exceed the retry worst case "
                f"({self.patients_lookup_worst_case:.2f}s)"
            )
        return self

    @field_validator("PATIENTS_SERVICE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @computed_field
    @property
    def is_development(self) -> bool:
        """Determina si está en modo desarrollo"""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @property
    def patients_lookup_worst_case(self) -> float:
        """Longest a lookup can take when every attempt times out."""
        retry = RetryConfig(
            max_attempts=self.PATIENTS_RETRY_MAX_ATTEMPTS,
            initial_delay=self.PATIENTS_RETRY_INITIAL_DELAY,
            max_delay=self.PATIENTS_RETRY_MAX_DELAY,
            exponential_base=self.PATIENTS_RETRY_EXPONENTIAL_BASE,
            jitter=self.PATIENTS_RETRY_JITTER,
        )
        return self.PATIENTS_RETRY_MAX_ATTEMPTS * self.PATIENTS_REQUEST_TIMEOUT + retry.max_total_delay()

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


# Singleton para configuración
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """
    Retorna una instancia cacheada de la configuración.
    Esto evita cargar las variables de entorno múltiples veces.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
