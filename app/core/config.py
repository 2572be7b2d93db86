from pydantic_settings import BaseSettings
from typing import List
import os

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "MediCare Booking API"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    TESTING: bool = os.getenv("TESTING", "0").lower() in ("1", "true", "t", "yes", "y")
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"

    # Storage backend: "memory" keeps everything in process, "database" uses SQLAlchemy
    STORAGE_BACKEND: str = "memory"
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./medicare.db")
    TEST_DATABASE_URL: str = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")
    SEED_DEMO_DATA: bool = True

    # Appointment lifecycle
    ENFORCE_STATUS_TRANSITIONS: bool = False

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5000", "http://localhost:5173", "http://testserver"]

    @property
    def get_database_url(self):
        """Return the appropriate database URL based on if we're testing"""
        if self.TESTING:
            return self.TEST_DATABASE_URL
        return self.DATABASE_URL

    @property
    def use_database(self) -> bool:
        return self.STORAGE_BACKEND.lower() == "database"

    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()
