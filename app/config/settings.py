# app/config/settings.py
from pydantic_settings import BaseSettings
from typing import Optional
import os

class Settings(BaseSettings):
    # App Info
    app_name: str = "UrbanBack API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./urbanback.db")
    # sslmode de libpq para PostgreSQL (require, verify-full...); None no lo envía
    db_sslmode: Optional[str] = os.getenv("DB_SSLMODE")

    # Security - los tokens se emiten aguas arriba, aquí solo se verifican
    secret_key: str = os.getenv("SECRET_KEY", "change-in-production")
    algorithm: str = "HS256"

    # Server
    host: str = "0.0.0.0"
    port: int = int(os.getenv("PORT", 10000))
    cors_origins: Optional[str] = None

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = 'ignore'

settings = Settings()
