from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Reality Bracket"
    debug: bool = False

    # Database
    database_url: str = "postgresql://localhost:5432/reality_bracket"

    # JWT
    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # Admin registration key (season, contestant and activity management)
    admin_key: str = "changeme"

    # League invite codes
    invite_code_length: int = 6
    invite_code_attempts: int = 10

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache()
def get_settings() -> Settings:
    return Settings()
