"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with GROVE_ prefix.
No YAML files, no file-based config — just env vars (12-factor app style).

Learn: Settings is built exactly once (by create_app() or the CLI) and then
handed to every component through the Container. Nothing imports a global
settings object, so tests can build an app from their own Settings.
"""

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """All app configuration. Set via GROVE_* env vars."""

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3004
    api_prefix: str = "/api/v1"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:3004",
        "http://localhost:3005",
    ]

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    bcrypt_rounds: int = 10

    # Identity store
    store_backend: str = "memory"  # "memory" or "dynamodb"
    dynamodb_region: str = "us-east-1"
    dynamodb_endpoint: Optional[str] = None
    tables_prefix: str = "grove_system_"
    users_email_index: str = "email-index"

    # Redis (rate limiting), optional
    redis_url: Optional[str] = None

    # Rate limiting
    rate_limit_rpm: int = 100  # requests per minute per IP
    rate_limit_auth_rpm: int = 10  # stricter limit for login/register

    # Default admin bootstrap
    admin_default_email: str = "admin@grovesystem.com"
    admin_default_password: str = "Admin123!"
    admin_default_name: str = "Admin User"
    bootstrap_admin: bool = False

    model_config = {"env_prefix": "GROVE_"}

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def users_table(self) -> str:
        return f"{self.tables_prefix}users"

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure sensitive defaults are changed in non-development environments."""
        if (
            self.environment not in ("development", "test")
            and self.jwt_secret == DEFAULT_JWT_SECRET
        ):
            raise ValueError(
                "GROVE_JWT_SECRET must be set to a secure value in "
                "non-development environments. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        if self.bcrypt_rounds < 4 or self.bcrypt_rounds > 31:
            raise ValueError("GROVE_BCRYPT_ROUNDS must be between 4 and 31")
        return self
