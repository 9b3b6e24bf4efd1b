"""
Configuration settings for the NASA Data Explorer API.
"""
from typing import Optional
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

DEMO_API_KEY = "DEMO_KEY"


class Settings(BaseSettings):
    """
    Application settings, loaded from environment variables or a .env file.
    """
    APP_NAME: str = "NASA Data Explorer API"
    APP_VERSION: str = "1.0.0"

    # Server
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 5000

    # NASA API
    nasa_api_key: str = DEMO_API_KEY
    nasa_api_base_url: str = "https://api.nasa.gov"
    nasa_images_api_base_url: str = "https://images-api.nasa.gov"
    request_timeout: float = 10
    search_timeout: float = 15

    # CORS
    cors_origin: str = "http://localhost:3000"

    # Rate limiting (window in seconds)
    rate_limit_window: int = 900
    rate_limit_max_requests: int = 100

    # Caching (TTLs in seconds)
    cache_enabled: bool = True
    cache_default_ttl: int = 300
    cache_sweep_interval: int = 600
    cache_ttl_apod: int = 3600          # daily data
    cache_ttl_mars_rover: int = 1800
    cache_ttl_epic: int = 900
    cache_ttl_neo: int = 600
    cache_ttl_image_search: int = 300

    # Logging
    log_level: str = "INFO"
    log_requests: bool = True
    log_json: Optional[bool] = None

    class Config:
        """
        Configuration for loading settings from environment variables or a .env file.
        """
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def debug(self) -> bool:
        return self.environment == "development"

    @property
    def using_demo_key(self) -> bool:
        return self.nasa_api_key == DEMO_API_KEY

    @property
    def cors_origins(self) -> list:
        return [origin.strip() for origin in self.cors_origin.split(",") if origin.strip()]

    def cache_ttls(self) -> dict:
        """TTL per resource family, keyed the way routes look them up."""
        return {
            "apod": self.cache_ttl_apod,
            "mars_rover": self.cache_ttl_mars_rover,
            "epic": self.cache_ttl_epic,
            "neo": self.cache_ttl_neo,
            "image_search": self.cache_ttl_image_search,
            "default": self.cache_default_ttl,
        }


# Global settings instance
settings = Settings()
