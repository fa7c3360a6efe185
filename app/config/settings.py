# app/config/settings.py

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    ENV: str = "development"
    DATABASE_URL: str = "sqlite:///./topic_bidding.db"  # override in .env or environment
    TEAM_BUILDER_URL: str = "http://localhost:8080/match_topics"
    TEAM_BUILDER_TIMEOUT: float = 30.0
    MAX_TEAM_SIZE_DEFAULT: int = 4
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
