import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .pagination import DEFAULT_PAGE_SIZE
from .transport import ResourceTransport

load_dotenv()

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}

_ENV_VARS = {
    "mock_api": "STOCKTASK_MOCK_API",
    "api_base_url": "STOCKTASK_API_URL",
    "api_timeout": "STOCKTASK_API_TIMEOUT",
    "api_key": "STOCKTASK_API_KEY",
    "page_size": "STOCKTASK_PAGE_SIZE",
    "host": "STOCKTASK_HOST",
    "port": "STOCKTASK_PORT",
    "log_level": "STOCKTASK_LOG_LEVEL",
}


class ConfigurationError(ValueError):
    """An environment variable holds a value the settings cannot use."""

    def __init__(self, variable: str, message: str):
        super().__init__(f"{variable}: {message}")
        self.variable = variable


class Settings(BaseModel):
    mock_api: bool = True
    api_base_url: str = "http://localhost:8085"
    api_timeout: float = Field(10.0, gt=0)
    api_key: Optional[str] = None
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1)
    host: str = "127.0.0.1"
    port: int = 8085
    log_level: str = "INFO"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def get_settings() -> Settings:
    """Settings from the environment; read fresh on every call."""
    try:
        return Settings(
            mock_api=_env_flag("STOCKTASK_MOCK_API", True),
            api_base_url=os.getenv("STOCKTASK_API_URL", "http://localhost:8085"),
            api_timeout=os.getenv("STOCKTASK_API_TIMEOUT", "10"),
            api_key=os.getenv("STOCKTASK_API_KEY") or None,
            page_size=os.getenv("STOCKTASK_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)),
            host=os.getenv("STOCKTASK_HOST", "127.0.0.1"),
            port=os.getenv("STOCKTASK_PORT", "8085"),
            log_level=os.getenv("STOCKTASK_LOG_LEVEL", "INFO").upper(),
        )
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        name = str(first["loc"][0]) if first.get("loc") else ""
        raise ConfigurationError(_ENV_VARS.get(name, name), first["msg"]) from exc


def build_transport(settings: Optional[Settings] = None) -> ResourceTransport:
    settings = settings or get_settings()
    if settings.mock_api:
        from .endpoint import MockResourceEndpoint
        logger.info("using in-memory mock transport")
        return MockResourceEndpoint.from_fixture()

    from sdk.http_transport import HttpTransport
    logger.info("using HTTP transport at %s", settings.api_base_url)
    return HttpTransport(
        base_url=settings.api_base_url,
            api_key=settings.api_key,
        timeout=settings.api_timeout,
    )
