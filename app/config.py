"""Application configuration."""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_JWT_SECRET = "change_me_for_prod"


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        """Initialize settings from environment variables."""
        # API Settings
        self.API_TITLE: str = os.getenv("API_TITLE", "Study Planner API")
        self.API_VERSION: str = os.getenv("API_VERSION", "1.0.0")
        self.DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development").lower()
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # Server Settings
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "8000"))
        self.CORS_ORIGINS: list[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]

        # Database Settings
        self.DB_HOST: str = os.getenv("DB_HOST", "localhost")
        self.DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
        self.DB_USER: str = os.getenv("DB_USER", "postgres")
        self.DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
        self.DB_NAME: str = os.getenv("DB_NAME", "study_planner")
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "")
        self.RUN_MIGRATIONS: bool = (
            os.getenv("RUN_MIGRATIONS", "True").lower() == "true"
        )

        # Auth Settings
        self.JWT_SECRET: str = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
        self.JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRE_HOURS: int = int(os.getenv("JWT_EXPIRE_HOURS", "168"))

        self._validate()

    @property
    def is_production(self) -> bool:
        """Whether the service runs in the production environment."""
        return self.ENVIRONMENT == "production"

    def _validate(self) -> None:
        if self.ENVIRONMENT != "development" and self.JWT_SECRET == DEFAULT_JWT_SECRET:
            raise RuntimeError(
                "JWT_SECRET must be set to a non-default value outside development"
            )


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
