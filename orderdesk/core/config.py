"""
Centralized application configuration
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings, loaded from environment and .env"""

    # API Settings
    API_TITLE: str = "OrderDesk API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Customers, products, orders and revenue rollups"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = ""
    DB_CONNECT_TIMEOUT: int = 10
    DB_CONNECT_RETRIES: int = 3

    # Reports: "today" for weekly rollups is taken in this zone
    REPORT_TIMEZONE: str = "Asia/Tokyo"

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
