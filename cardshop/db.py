from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    database_url: str = Field(alias="DATABASE_URL")

    auth_secret: str = Field(alias="AUTH_SECRET")
    auth_secret_previous: str | None = Field(default=None, alias="AUTH_SECRET_PREVIOUS")
    auth_secrets: str | None = Field(default=None, alias="AUTH_SECRETS")
    access_token_expire_minutes: int = Field(default=480, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    auth_algorithm: str = Field(default="HS256", alias="AUTH_ALGORITHM")
    admin_users: str = Field(default="", alias="ADMIN_USERS")

    # Rows per multi-row INSERT; keeps each statement under the backend's bound-parameter ceiling.
    card_insert_chunk_size: int = Field(default=10, alias="CARD_INSERT_CHUNK_SIZE")

    revalidate_url: str | None = Field(default=None, alias="REVALIDATE_URL")
    revalidate_secret: str | None = Field(default=None, alias="REVALIDATE_SECRET")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def DATABASE_URL(self) -> str:
        return self.database_url

    @property
    def AUTH_SECRET(self) -> str:
        return self.auth_secret

    @property
    def ACCESS_TOKEN_EXPIRE_MINUTES(self) -> int:
        return self.access_token_expire_minutes

    @property
    def AUTH_ALGORITHM(self) -> str:
        return self.auth_algorithm

    @property
    def AUTH_SECRETS_LIST(self) -> list[str]:
        secrets = [self.auth_secret]
        if self.auth_secret_previous:
            secrets.append(self.auth_secret_previous)
        if self.auth_secrets:
            secrets.extend([s.strip() for s in self.auth_secrets.split(",") if s.strip()])
        unique: list[str] = []
        for secret in secrets:
            if secret not in unique:
                unique.append(secret)
        return unique

    @property
    def ADMIN_HANDLES(self) -> frozenset[str]:
        return parse_admin_handles(self.admin_users)

    @field_validator("auth_secret")
    @classmethod
    def validate_auth_secret(cls, value: str) -> str:
        if not value or value == "change-me" or len(value) < 32:
            raise ValueError("AUTH_SECRET must be set and at least 32 chars long")
        return value

    @field_validator("auth_secret_previous")
    @classmethod
    def validate_auth_secret_previous(cls, value: str | None) -> str | None:
        if value is None:
            return value
        if value == "change-me" or len(value) < 32:
            raise ValueError("AUTH_SECRET_PREVIOUS must be at least 32 chars long")
        return value

    @field_validator("auth_secrets")
    @classmethod
    def validate_auth_secrets(cls, value: str | None) -> str | None:
        if value is None:
            return value
        secrets = [s.strip() for s in value.split(",") if s.strip()]
        for secret in secrets:
            if secret == "change-me" or len(secret) < 32:
                raise ValueError("AUTH_SECRETS entries must be at least 32 chars long")
        return value

    @field_validator("card_insert_chunk_size")
    @classmethod
    def validate_card_insert_chunk_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("CARD_INSERT_CHUNK_SIZE must be a positive integer")
        return value


def parse_admin_handles(raw: str | None) -> frozenset[str]:
    return frozenset(item.strip().lower() for item in (raw or "").split(",") if item.strip())


settings = Settings()

engine = create_engine(settings.database_url, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


class Base(DeclarativeBase):
    pass


# Dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_admin_handles() -> frozenset[str]:
    return settings.ADMIN_HANDLES
