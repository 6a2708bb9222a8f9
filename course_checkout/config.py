from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = Field(default="postgresql://postgres:postgres@db:5432/checkout_db")
    rabbitmq_url: str = Field(default="")
    mail_queue: str = Field(default="checkout_mail_queue")
    run_mail_consumer: bool = Field(default=False)

    # Merchant identity
    upi_id: str = Field(default="")
    merchant_id: str = Field(default="")
    merchant_name: str = Field(default="StudyNotion")
    payment_gateway: str = Field(default="example")
    currency_code: str = Field(default="INR")

    # JWT
    jwt_secret: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")

    # Email (SMTP)
    notifications_enabled: bool = Field(default=True)
    mail_host: str = Field(default="smtp.gmail.com")
    mail_port: int = Field(default=587)
    mail_user: str = Field(default="")
    mail_password: str = Field(default="")
    mail_from: str = Field(default="StudyNotion <no-reply@studynotion.dev>")

    # JSON list in the environment, e.g. CORS_ORIGINS='["https://app.example"]'
    cors_origins: List[str] = Field(default=["*"])


@lru_cache()
def get_settings() -> Settings:
    return Settings()
