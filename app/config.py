import os
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings:
    @staticmethod
    def _get_int(name: str, default: int) -> int:
        return int(os.getenv(name, str(default)))

    @property
    def BASE_URL(self) -> str:
        return os.getenv("BASE_URL", "http://localhost:8000")

    @property
    def DATABASE_URL(self) -> str:
        database_url = os.getenv("DATABASE_URL", "").strip()
        if not database_url:
            raise ValueError("DATABASE_URL is required")
        return database_url

    @property
    def LOG_LEVEL(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def DB_CONNECT_RETRIES(self) -> int:
        return self._get_int("DB_CONNECT_RETRIES", 5)

    @property
    def DB_CONNECT_RETRY_DELAY_SECONDS(self) -> int:
        return self._get_int("DB_CONNECT_RETRY_DELAY_SECONDS", 2)

    @property
    def DEFAULT_TITLE_VALUE(self) -> int:
        return self._get_int("DEFAULT_TITLE_VALUE", 5)

    @property
    def BASE_TITLES_SEED_COUNT(self) -> int:
        return self._get_int("BASE_TITLES_SEED_COUNT", 0)

    @property
    def S3_BUCKET(self) -> str:
        return os.getenv("S3_BUCKET", "")

    @property
    def S3_REGION(self) -> str:
        return os.getenv("S3_REGION", "us-east-1")

    @property
    def S3_ENDPOINT_URL(self) -> str:
        return os.getenv("S3_ENDPOINT_URL", "")

    @property
    def S3_PUBLIC_BASE_URL(self) -> str:
        return os.getenv("S3_PUBLIC_BASE_URL", "")

    @property
    def S3_KEY_PREFIX(self) -> str:
        return os.getenv("S3_KEY_PREFIX", "editions")

    @property
    def CORS_ORIGINS(self) -> str:
        return os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")


settings = Settings()
