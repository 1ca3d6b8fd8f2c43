"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    # Database
    DATABASE_URL: str

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute)
    RATE_LIMIT_API: int = 60  # General API
    RATE_LIMIT_PUBLIC_READ: int = 120  # Public form fetch + validation
    RATE_LIMIT_PUBLIC_SUBMIT: int = 10  # Public form submission
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Collaborator reads (form/contact lookups) retry with backoff; writes never do
    COLLABORATOR_READ_MAX_ATTEMPTS: int = 3
    COLLABORATOR_RETRY_BASE_DELAY: float = 0.5
    COLLABORATOR_RETRY_MAX_DELAY: float = 4.0

    # Submissions
    ANONYMOUS_SUBMITTER_NAME: str = "Anonymous User"
    SUBMISSION_LIST_LIMIT: int = 200

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
