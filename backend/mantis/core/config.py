"""Runtime configuration.

Values are read from the environment (and an optional ``.env`` file).
Explicit constructor arguments on the client and middleware always take
precedence over anything configured here.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://mantis-backend.onrender.com"


class Settings(BaseSettings):
    """Mantis settings."""

    MANTIS_API_URL: str = Field(
        default=DEFAULT_API_URL,
        description="Base URL of the Mantis collection backend",
    )
    MANTIS_REQUEST_TIMEOUT: float = Field(
        default=5.0,
        gt=0,
        description="Total timeout in seconds for a single metric delivery",
    )
    MANTIS_METRIC_TIMEOUT: float = Field(
        default=5.0,
        gt=0,
        description="Timeout in seconds for a single metric function",
    )
    LOG_LEVEL: str = Field(default="INFO", description="Log level for the mantis logger")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
