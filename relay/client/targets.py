from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from relay.core.provider import upload_url


class UploadTarget(ABC):
    """Where the widget sends each file."""
    file_field: str = "file"

    @property
    @abstractmethod
    def url(self) -> str:
        pass

    def build_fields(self) -> Dict[str, str]:
        return {}

    @abstractmethod
    def remote_url(self, payload: Dict[str, Any]) -> Optional[str]:
        pass


class DirectTarget(UploadTarget):
    """Unsigned upload straight to the provider."""
    file_field = "file"

    def __init__(self, cloud_name: str, upload_preset: str, api_base: str = "https://api.cloudinary.com"):
        self.cloud_name = cloud_name
        self.upload_preset = upload_preset
        self.api_base = api_base

    @property
    def url(self) -> str:
        return upload_url(self.cloud_name, self.api_base)

    def build_fields(self) -> Dict[str, str]:
        return {"upload_preset": self.upload_preset}

    def remote_url(self, payload: Dict[str, Any]) -> Optional[str]:
        return payload.get("secure_url")


class RelayTarget(UploadTarget):
    """Upload through the relay server, which re-uploads to the provider."""
    file_field = "files"

    def __init__(self, base_url: str):
        self.base_url = base_url

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/upload"

    def remote_url(self, payload: Dict[str, Any]) -> Optional[str]:
        return (payload.get("result") or {}).get("secure_url")
