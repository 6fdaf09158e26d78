# merch_inventory/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path
from dotenv import load_dotenv

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./inventory.db"

    # Extra origin allowed by CORS (operator UI served elsewhere)
    FRONTEND_URL: Optional[str] = None

    HOST: str = "0.0.0.0"
    PORT: int = 4000
    LOG_LEVEL: str = "INFO"

    # Ledger view size and the marker printed in front of the SKU in QR codes
    MOVEMENTS_LIMIT: int = 200
    QR_PREFIX: str = "SKU:"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"


def get_settings() -> Settings:
    return Settings()
