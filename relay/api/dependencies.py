from functools import lru_cache
from fastapi import Depends
from relay.core.config import settings
from relay.core.provider import ProviderConfig
from relay.services.relay_service import RelayService

@lru_cache
def get_provider_config() -> ProviderConfig:
    """
    Provider credentials, read once per process.
    """
    return ProviderConfig.from_settings(settings)

# Dependency to get the RelayService instance
def get_relay_service(provider_config: ProviderConfig = Depends(get_provider_config)) -> RelayService:
    return RelayService(
        provider_config,
        upload_dir=settings.UPLOAD_DIR,
        max_upload_bytes=settings.MAX_UPLOAD_BYTES,
        resource_type=settings.PROVIDER_RESOURCE_TYPE,
    )
