from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./flowershop.db"

    # Auth
    JWT_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    # Email / SMTP
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASS: str = ""
    MAIL_FROM: str = "Flower Shop <no-reply@flowershop.local>"
    MAIL_ENABLED: bool = False

    # Product images
    IMAGES_DIR: str = "./images"

    # Order lifecycle
    ORDER_EDIT_WINDOW_MINUTES: int = 10
    ORDER_DWELL_MINUTES: int = 30
    SCHEDULER_INTERVAL_SECONDS: float = 60
    SCHEDULER_ENABLED: bool = True

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="allow"
    )


settings = Settings()
