from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import FastAPI
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = Field(default="development", alias="APP_ENV")

    database_url: str = Field(alias="DATABASE_URL")

    jwt_secret: str = Field(alias="JWT_SECRET")
    jwt_algo: str = Field(default="HS256", alias="JWT_ALGO")
    access_min: int = Field(default=60, alias="ACCESS_MIN", ge=1)

    frontend_url: str = Field(default="http://localhost:5173", alias="FRONTEND_URL")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        alias="CORS_ORIGINS",
    )

    smtp_host: str = Field(default="localhost", alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_username: str | None = Field(default=None, alias="SMTP_USERNAME")
    smtp_password: str | None = Field(default=None, alias="SMTP_PASSWORD")
    smtp_use_tls: bool = Field(default=True, alias="SMTP_USE_TLS")
    mail_from: str = Field(
        default="noreply@influencer-marketing.jp", alias="MAIL_FROM"
    )

    aws_access_key_id: str | None = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str | None = Field(
        default=None, alias="AWS_SECRET_ACCESS_KEY"
    )
    aws_region: str = Field(default="ap-northeast-1", alias="AWS_REGION")
    aws_s3_bucket: str = Field(
        default="influencer-marketing-documents", alias="AWS_S3_BUCKET"
    )

    rapidapi_key: str | None = Field(default=None, alias="RAPIDAPI_KEY")
    rapidapi_tiktok_host: str = Field(
        default="tiktok-scraper7.p.rapidapi.com", alias="RAPIDAPI_TIKTOK_HOST"
    )
    rapidapi_twitter_host: str = Field(
        default="twitter-api45.p.rapidapi.com", alias="RAPIDAPI_TWITTER_HOST"
    )
    youtube_api_key: str | None = Field(default=None, alias="YOUTUBE_API_KEY")


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore


@asynccontextmanager
async def lifespan(app: FastAPI):
    from app.core.aws import build_s3_client
    from app.core.database import engine

    s3_client = build_s3_client()
    app.state.s3_client = s3_client

    try:
        yield
    finally:
        close_s3 = getattr(s3_client, "close", None)
        if callable(close_s3):
            close_s3()
        engine.dispose()
