from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Xero OAuth configuration
    XERO_CLIENT_ID: str | None = None
    XERO_CLIENT_SECRET: str | None = None
    XERO_REDIRECT_URI: str | None = None
    XERO_SCOPES: str = (
        "openid profile email accounting.transactions "
        "accounting.settings offline_access"
    )
    JWT_SECRET: str | None = None

    # Token persistence and OAuth flow tuning
    XERO_TOKEN_FILE: str = "tokens.json"
    XERO_CLOCK_TOLERANCE: int = 60  # seconds of JWT clock skew accepted
    XERO_AUTH_COOLDOWN_SECONDS: int = 5
    XERO_AUTH_IN_PROGRESS_SECONDS: int = 10

    # Invoice defaults
    DEFAULT_CURRENCY: str = "USD"
    PAYMENT_TERMS_DAYS: int = 30

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


settings = Settings()
