import base64
import binascii
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings. The two keys have no defaults; startup fails without them."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./keeper.db"

    # JWT signing
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 180

    # Base64 AES key for stored secrets, decoding to 16, 24 or 32 bytes
    DATA_ENCRYPTION_KEY: str

    COOKIE_NAME: str = "jwt"
    COOKIE_SECURE: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @field_validator("SECRET_KEY")
    @classmethod
    def check_secret_key(cls, v: str) -> str:
        if not v:
            raise ValueError("SECRET_KEY must not be empty")
        return v

    @field_validator("DATA_ENCRYPTION_KEY")
    @classmethod
    def check_data_key(cls, v: str) -> str:
        try:
            key = base64.b64decode(v, validate=True)
        except binascii.Error as exc:
            raise ValueError("DATA_ENCRYPTION_KEY must be base64 encoded") from exc
        if len(key) not in (16, 24, 32):
            raise ValueError(
                f"DATA_ENCRYPTION_KEY must decode to 16, 24 or 32 bytes, got {len(key)}"
            )
        return v

    @property
    def data_key(self) -> bytes:
        return base64.b64decode(self.DATA_ENCRYPTION_KEY)


@lru_cache
def get_settings() -> Settings:
    return Settings()
