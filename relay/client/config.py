from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class ClientSettings(BaseSettings):
    """
    Settings for the upload client. Kept apart from the server settings so the
    client runs without a listening port configured.
    """
    CLOUD_NAME: str = ""
    UPLOAD_PRESET: str = ""
    PROVIDER_API_BASE: str = "https://api.cloudinary.com"
    RELAY_URL: str = "http://localhost:8000"
    CLIENT_TIMEOUT_SECONDS: float = 300.0
