import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///users.db"
    api_title: str = "User Management API"
    app_env: str = "development"
    log_level: str = "INFO"
    access_token_expire_minutes: int = 60 * 24
    jwt_secret: str = "secret"
    jwt_algorithm: str = "HS256"
    auth_cookie_name: str = "token"
    bcrypt_rounds: int = 10

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


settings = Settings()


def configure_logging() -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def validate_runtime_config() -> None:
    if settings.is_production and settings.jwt_secret == "secret":
        raise RuntimeError("JWT_SECRET must be set in production.")
