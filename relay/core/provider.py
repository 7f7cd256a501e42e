import logging
from dataclasses import dataclass
from typing import Any, Dict
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from relay.core.errors import ProviderError

logger = logging.getLogger("provider")


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials for the media provider, built once at process start."""
    cloud_name: str
    api_key: str
    api_secret: str

    @classmethod
    def from_settings(cls, settings) -> "ProviderConfig":
        return cls(
            cloud_name=settings.CLOUD_NAME,
            api_key=settings.API_KEY,
            api_secret=settings.API_SECRET,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


def upload_file(config: ProviderConfig, path: str, resource_type: str = "auto") -> Dict[str, Any]:
    """
    Upload a local file through the provider SDK and return its raw result.

    Credentials are passed per call so no global SDK state is touched.
    """
    if not config.is_configured:
        raise ProviderError("provider credentials not configured")

    try:
        result = cloudinary.uploader.upload(
            path,
            cloud_name=config.cloud_name,
            api_key=config.api_key,
            api_secret=config.api_secret,
            resource_type=resource_type,
        )
    # The SDK raises ValueError for missing or malformed options
    except (CloudinaryError, ValueError) as e:
        raise ProviderError(str(e)) from e

    logger.info(f"Provider stored {path} as {result.get('public_id')}")
    return result


def upload_url(cloud_name: str, api_base: str = "https://api.cloudinary.com") -> str:
    """
    Direct unsigned upload endpoint for an account.
    """
    return f"{api_base.rstrip('/')}/v1_1/{cloud_name}/auto/upload"
