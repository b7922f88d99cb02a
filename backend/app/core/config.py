from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    DATABASE_URL: str = "sqlite:///./heyhr.db"

    # JWT Authentication (access and refresh tokens use separate secrets)
    JWT_SECRET: str = "dev_access_secret_change_me"
    REFRESH_SECRET: str = "dev_refresh_secret_change_me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Refresh cookie
    REFRESH_COOKIE_NAME: str = "heyhr_refresh"
    COOKIE_SECURE: bool = False
    COOKIE_DOMAIN: str = ""

    # Notifications
    NOTIFICATION_QUEUE_SIZE: int = 1000
    NOTIFICATION_WORKERS: int = 2

    # Job autofill uploads
    AUTOFILL_MAX_BYTES: int = 5 * 1024 * 1024

    # Application
    APP_NAME: str = "HeyHR"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: str = (
        "http://localhost:5173,"
        "http://127.0.0.1:5173"
    )


settings = Settings()
