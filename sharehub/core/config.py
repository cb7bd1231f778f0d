from functools import lru_cache
from typing import List

from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Configurações básicas
    PROJECT_NAME: str = "Sharehub API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # Configurações do banco de dados
    DATABASE_URL: str = "sqlite:///./sharehub.db"

    # Configurações de segurança
    SECRET_KEY: str = "change-me-sharehub-secret"  # Em produção, use uma chave secreta segura
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    # Arquivos enviados (servidos em /uploads)
    UPLOAD_DIR: str = "uploads"

    # Servidor
    CORS_ORIGINS: List[str] = ["*"]
    HOST: str = "0.0.0.0"
    PORT: int = 4000
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        case_sensitive=True, env_file=".env", extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def get_app_settings(request: Request) -> Settings:
    """Configurações com que a aplicação foi criada."""
    return request.app.state.settings
