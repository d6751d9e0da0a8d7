# app/core/config.py
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    APP_NAME: str = os.getenv("APP_NAME", "Expense Approval API")
    ENV: str = os.getenv("ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # DB
    DATABASE_URL: str = os.getenv("DATABASE_URL")
    DB_HOST: str = os.getenv("DB_HOST")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    DB_NAME: str = os.getenv("DB_NAME")
    DB_USER: str = os.getenv("DB_USER")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
    DB_SSLMODE: str = os.getenv("DB_SSLMODE", "require")

    # AUTH
    JWT_SECRET: str = os.getenv("JWT_SECRET")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # BOOTSTRAP
    SEED_DEMO_DATA: bool = _as_bool(os.getenv("SEED_DEMO_DATA", "true"))

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if self.DB_HOST:
            # URL-encode password to handle special characters like @ $ !
            encoded_password = quote_plus(self.DB_PASSWORD)
            return (
                f"postgresql+psycopg2://{self.DB_USER}:"
                f"{encoded_password}@"
                f"{self.DB_HOST}:"
                f"{self.DB_PORT}/"
                f"{self.DB_NAME}"
                f"?sslmode={self.DB_SSLMODE}"
            )

        return "sqlite:///./expense-tracker.db"


settings = Settings()
