from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Tuple
from pathlib import Path


class Settings(BaseSettings):
    """Application settings - reads from environment variables"""

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_key: str = ""
    db_schema: str = "public"  # staging uses its own schema

    # HTTP
    host: str = "0.0.0.0"
    port: int = 8080
    allowed_origin: str = "*"

    # Environment
    env: str = "development"
    debug: bool = False

    @field_validator('allowed_origin', mode='before')
    @classmethod
    def default_origin(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return "*"
        return v.strip()

    def supabase_credentials(self) -> Tuple[str, str]:
        """URL and key; the service key wins over the anon key"""
        return self.supabase_url, self.supabase_service_key or self.supabase_key

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,  # SUPABASE_URL == supabase_url
    )


# Create settings instance
settings = Settings()
