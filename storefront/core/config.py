"""Storefront Configuration"""

import os
from typing import Literal, Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "VintageFind Storefront"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8001

    # Display currency (single currency only)
    currency: str = "USD"
    currency_symbol: str = "$"

    # Cart persistence
    cart_storage: Literal["memory", "file"] = "memory"
    cart_storage_dir: str = "var/carts"
    session_max_age_hours: int = 24

    # Catalog supplied as a JSON file; falls back to the demo catalog
    catalog_path: Optional[str] = None

    class Config:
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        env_prefix = "STOREFRONT_"
        case_sensitive = False

    def get_catalog_path(self) -> Optional[str]:
        """Get catalog file path if it exists"""
        if self.catalog_path and os.path.exists(self.catalog_path):
            return self.catalog_path
        return None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
