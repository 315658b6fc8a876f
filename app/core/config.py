from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "PersonalFinanceTracker"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        validation_alias="CORS_ORIGINS",
    )

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1", validation_alias="DYNAMO_REGION")
    DYNAMO_USERS_TABLE: str = Field(default="finance-tracker-users", validation_alias="DYNAMO_TABLE_USERS")
    DYNAMO_CATEGORIES_TABLE: str = Field(
        default="finance-tracker-categories", validation_alias="DYNAMO_TABLE_CATEGORIES"
    )
    DYNAMO_TRANSACTIONS_TABLE: str = Field(
        default="finance-tracker-transactions", validation_alias="DYNAMO_TABLE_TRANSACTIONS"
    )

    # JWT Authentication
    JWT_SECRET_KEY: str = Field(default="change-me-in-production", validation_alias="JWT_SECRET")
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    MIN_PASSWORD_LENGTH: int = 6

    # Home summary
    RECENT_TRANSACTIONS_LIMIT: int = 5

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


settings = Settings()
