"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with defaults for development."""

    # Database
    database_url: str = "sqlite:///./hotel_backoffice.db"
    database_echo: bool = False
    # Create tables on startup (disable when schema is managed externally)
    auto_create_tables: bool = True

    # JWT Configuration
    jwt_secret: str = "dev-secret-change-me-in-production"
    jwt_issuer: str = "hotel-backoffice"
    jwt_audience: str = "hotel-backoffice-users"
    jwt_access_token_expire_minutes: int = 60 * 24

    # Invitations
    invitation_expire_days: int = 7
    frontend_url: str = "http://localhost:3000"

    # Comma-separated list of allowed origins (empty uses default localhost list)
    allowed_origins: str = ""

    # Server
    rest_api_port: int = 8000

    # Environment
    environment: str = "development"
    debug: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    def validate_production_secrets(self) -> list[str]:
        """
        Validate that secrets are properly configured for production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        weak_secrets = {
            "dev-secret-change-me-in-production",
            "secret",
            "password",
            "changeme",
            "default",
        }

        if self.environment == "production":
            if self.jwt_secret in weak_secrets or len(self.jwt_secret) < 32:
                errors.append(
                    "JWT_SECRET must be at least 32 characters and not a default value in production"
                )

            if self.debug:
                errors.append("DEBUG must be False in production")

            if self.database_url.startswith("sqlite"):
                errors.append("DATABASE_URL must point to a server database in production")

            if not self.allowed_origins:
                errors.append(
                    "ALLOWED_ORIGINS must be set in production (comma-separated list of allowed domains)"
                )

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()

# Direct access to commonly used settings
DATABASE_URL = settings.database_url
JWT_SECRET = settings.jwt_secret
JWT_ISSUER = settings.jwt_issuer
JWT_AUDIENCE = settings.jwt_audience
