from typing import List

from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    PROJECT_NAME: str = "CRM Backend"

    DATABASE_URL: str = "sqlite:///./crm.db"
    DB_ECHO: bool = False

    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS_STR: str = "http://localhost:3000"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS_STR.split(',') if origin.strip()]


    def model_post_init(self, __context) -> None:
        if self.API_PREFIX and not self.API_PREFIX.startswith("/"):
            raise ValueError("API_PREFIX must start with '/'")


    class Config:
        env_file = ".env"

@lru_cache()
def get_settings():
    return Settings()
