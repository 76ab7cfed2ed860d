"""
Flour Mill Inventory Configuration
Core settings for the warehouse inventory service
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from pathlib import Path


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    # Application Info
    APP_NAME: str = "Flour Mill Inventory API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database Configuration
    DATABASE_URL: str = "postgresql+psycopg://flourmill@localhost:5432/flourmill_db"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    AUTO_CREATE_TABLES: bool = True

    # Data source: "database" reads through SQLAlchemy, "fixture" reads a JSON
    # document (offline development mode)
    DATA_SOURCE: str = "database"
    FIXTURE_FILE: Optional[Path] = None

    # Status filters applied to each historical source (empty = no filter)
    GENERIC_PURCHASE_STATUSES: List[str] = ["Received"]
    BAG_PURCHASE_STATUSES: List[str] = ["Received", "Completed"]
    FOOD_PURCHASE_STATUSES: List[str] = ["Approved", "Completed"]
    PRODUCTION_STATUSES: List[str] = ["Completed", "Approved"]

    # Worker threads used for the independent source reads (1 = serial)
    SOURCE_READ_WORKERS: int = 5

    # CORS
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Path = Path("logs")
    LOG_FILE: str = "app.log"
    ERROR_LOG_FILE: str = "error.log"
    LOG_TO_FILE: bool = False

    # API Configuration
    API_V1_STR: str = "/api/v1"
    DOCS_URL: str = "/docs"
    REDOC_URL: str = "/redoc"
    OPENAPI_URL: str = "/openapi.json"

    @field_validator("DATA_SOURCE", mode="before")
    @classmethod
    def validate_data_source(cls, v: str) -> str:
        """Normalize and check the data source name"""
        value = str(v or "").strip().lower()
        if value not in ("database", "fixture"):
            raise ValueError("DATA_SOURCE must be 'database' or 'fixture'")
        return value

    @field_validator("SOURCE_READ_WORKERS")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("SOURCE_READ_WORKERS must be at least 1")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()

    def status_filters(self) -> dict:
        """Status filters keyed by source name"""
        return {
            "generic_purchases": list(self.GENERIC_PURCHASE_STATUSES),
            "bag_purchases": list(self.BAG_PURCHASE_STATUSES),
            "food_purchases": list(self.FOOD_PURCHASE_STATUSES),
            "production_outputs": list(self.PRODUCTION_STATUSES),
        }


# Global settings instance
settings = Settings()
