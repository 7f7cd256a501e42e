from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class Settings(BaseSettings):
    PROJECT_NAME: str = "Upload Relay"

    # Provider credentials
    CLOUD_NAME: str = ""
    API_KEY: str = ""
    API_SECRET: str = ""
    PROVIDER_RESOURCE_TYPE: str = "auto"

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int
    CORS_ORIGINS: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    # Storage settings
    UPLOAD_DIR: Path = Path("uploads")
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024  # 0 disables the limit

    # Cleanup settings
    CLEANUP_INTERVAL_SECONDS: int = 0  # 0 leaves temp files in place
    STALE_UPLOAD_TIMEOUT_SECONDS: int = 86400  # 24 hours

    # Create the upload directory if it doesn't exist
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.UPLOAD_DIR.mkdir(exist_ok=True, parents=True)

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

# Global settings instance
settings = Settings()
