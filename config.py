"""Configuration and environment settings"""

from pydantic_settings import BaseSettings
from typing import Optional
from pathlib import Path


PACKAGED_CATALOG_DIR = Path(__file__).resolve().parent / "catalogs" / "data"


class Settings(BaseSettings):
    """Application configuration"""

    # Catalogs
    BONUS_GRID_CATALOG_DIR: Optional[str] = None  # Packaged layout when unset

    # Engine
    BONUS_GRID_STRICT_MODE: bool = False  # Raise on unknown addresses instead of resolving to 0
    BONUS_GRID_CACHE_SIZE: int = 128  # Memoized snapshots per engine, 0 disables

    # Logging
    LOG_LEVEL: str = "WARNING"

    # Export
    EXPORT_CURRENCY_SYMBOL: str = "$"
    EXPORT_DEFAULT_FORMAT: str = "text"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def get_catalog_path(self) -> Path:
        """Get the directory holding the schema, row and output catalogs"""
        if self.BONUS_GRID_CATALOG_DIR:
            return Path(self.BONUS_GRID_CATALOG_DIR)
        return PACKAGED_CATALOG_DIR


settings = Settings()
