from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):

    AWS_REGION: str = "us-east-1"
    AWS_PROFILE: Optional[str] = None
    DYNAMODB_TABLE_NAME: str = "ngohub"
    DYNAMODB_ENDPOINT_URL: Optional[str] = None

    SES_FROM_EMAIL: str = "ngohub@example.com"
    EMAIL_DELIVERY_ENABLED: bool = False
    NOTIFICATION_QUEUE_URL: Optional[str] = None
    SES_CONNECT_TIMEOUT_SECONDS: float = 2.0
    SES_READ_TIMEOUT_SECONDS: float = 3.0
    NOTIFICATION_MAX_DELAY_SECONDS: float = 5.0

    JWT_SECRET: str = "your-secret-key"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_DAYS: int = 7

    PAYMENT_SUCCESS_RATE: float = 0.9
    PAYMENT_DELAY_SECONDS: float = 2.0
    REFUND_DELAY_SECONDS: float = 1.0
    MAX_DONATION_AMOUNT: Optional[float] = None

    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    API_ROOT_PATH: str = ""
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
