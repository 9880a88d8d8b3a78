# app/core/config.py
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    SECRET_KEY: str = "your-super-secret-jwt-key-change-in-prod"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080  # 7 days

    DATABASE_URL: str = "sqlite:///./academic.db"

    CORS_ORIGINS: List[str] = [
        "http://localhost",
        "http://127.0.0.1",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    LOG_LEVEL: str = "INFO"

    # Шкала итоговых оценок (проценты)
    GRADE_EXCELLENT_MIN: float = 87
    GRADE_GOOD_MIN: float = 74
    GRADE_SATISFACTORY_MIN: float = 61

    # Пороги посещаемости для статистики
    ATTENDANCE_EXCELLENT_MIN: float = 90
    ATTENDANCE_GOOD_MIN: float = 75

    class Config:
        env_file = ".env"

# Экземпляр создаётся ОДИН РАЗ
settings = Settings()
