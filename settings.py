from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    mongodb_uri: str
    db_name: str | None = None
    port: int = 5000
    cors_origins: str = "*"
    jwt_secret: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        extra="ignore",
    )

    def cors_origin_list(self) -> list[str]:
        origins = [o.strip() for o in (self.cors_origins or "").split(",") if o.strip()]
        return origins or ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
