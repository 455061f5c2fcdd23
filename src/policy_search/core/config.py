"""
Конфигурация сервиса
"""
from dataclasses import dataclass, field
from typing import Optional, Dict
import os

from .models import Field, FIELD_WEIGHTS


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


@dataclass
class SearchConfig:
    """Настройки поиска"""
    # Результаты
    default_limit: int = 10
    max_limit: int = 200

    # Нечёткий поиск
    fuzzy_max_distance: int = 2
    fuzzy_strategy: str = "scan"  # scan | symspell
    fuzzy_distance_penalty: bool = False

    # Таймаут одного поиска (секунды), None - без ограничения
    search_timeout: Optional[float] = None

    # Веса полей
    field_weights: Dict[Field, float] = field(default_factory=lambda: dict(FIELD_WEIGHTS))


@dataclass
class ApiConfig:
    """Настройки API"""
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS
    cors_origins: list = field(default_factory=lambda: ["*"])


@dataclass
class Config:
    """Главная конфигурация"""
    env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Демо-документы при пустом хранилище
    seed_demo_documents: bool = True

    search: SearchConfig = field(default_factory=SearchConfig)
    api: ApiConfig = field(default_factory=ApiConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Загрузить конфигурацию из переменных окружения"""
        cors = os.getenv("CORS_ORIGINS", "*")

        return cls(
            env=os.getenv("ENV", "development"),
            debug=os.getenv("DEBUG", "true").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            seed_demo_documents=os.getenv("SEED_DEMO_DOCUMENTS", "true").lower() == "true",

            search=SearchConfig(
                default_limit=int(os.getenv("SEARCH_DEFAULT_LIMIT", "10")),
                max_limit=int(os.getenv("SEARCH_MAX_LIMIT", "200")),
                fuzzy_max_distance=int(os.getenv("FUZZY_MAX_DISTANCE", "2")),
                fuzzy_strategy=os.getenv("FUZZY_STRATEGY", "scan").lower(),
                fuzzy_distance_penalty=os.getenv("FUZZY_DISTANCE_PENALTY", "false").lower() == "true",
                search_timeout=_optional_float(os.getenv("SEARCH_TIMEOUT")),
            ),

            api=ApiConfig(
                host=os.getenv("API_HOST", "0.0.0.0"),
                port=int(os.getenv("API_PORT", "8080")),
                cors_origins=[o.strip() for o in cors.split(",") if o.strip()],
            ),
        )


# Глобальный экземпляр конфигурации
config = Config.from_env()
