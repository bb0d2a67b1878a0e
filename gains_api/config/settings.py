from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database - pooled connection for app operations
    # Empty string = ledger disabled (read/admin endpoints answer "Database not available")
    database_url: str = ""
    # Database - direct connection for migrations
    database_url_direct: str = ""

    # Application
    debug: bool = False
    port: int = 3000
    cors_origins: list[str] = ["*"]

    # AI gateways
    claude_api_key: str = ""
    claude_model: str = "claude-sonnet-4-20250514"
    claude_max_tokens: int = 2048
    perplexity_api_key: str = ""
    perplexity_model: str = "sonar"
    perplexity_api_url: str = "https://api.perplexity.ai/chat/completions"

    # RevenueCat webhook - shared secret sent as "Authorization: Bearer <secret>"
    # Empty string = webhook accepts any caller
    revenuecat_webhook_secret: str = ""

    # Admin key for creating influencer codes. Required; startup fails without it.
    # Generate with: python -c "import secrets; print(secrets.token_urlsafe(32))"
    admin_key: str = ""

    @property
    def database_enabled(self) -> bool:
        """Check if the ledger database is configured."""
        return bool(self.database_url)

    @property
    def webhook_auth_enabled(self) -> bool:
        """Check if the RevenueCat webhook requires a bearer secret."""
        return bool(self.revenuecat_webhook_secret)


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing."""


def validate_startup_settings(current: Settings) -> None:
    """Fail fast on configuration the service cannot run without."""
    if not current.admin_key:
        raise ConfigurationError("ADMIN_KEY must be set; refusing to start without an admin secret")


settings = Settings()
