import logging
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
import aiofiles
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool
from relay.core import provider
from relay.core.errors import FileTooLargeError, NoFilesError
from relay.core.provider import ProviderConfig

logger = logging.getLogger("relay_service")

CHUNK_SIZE = 1024 * 1024  # 1MB pieces when spooling to disk


@dataclass
class StoredFile:
    original_name: str
    path: Path
    size: int
    content_type: Optional[str] = None


class RelayService:
    """
    Receives multipart files, keeps them on local disk for the lifetime of the
    request and forwards the first one to the provider.
    """

    def __init__(
        self,
        provider_config: ProviderConfig,
        upload_dir: Path,
        max_upload_bytes: int = 0,
        resource_type: str = "auto",
    ):
        self.provider_config = provider_config
        self.upload_dir = Path(upload_dir)
        self.max_upload_bytes = max_upload_bytes
        self.resource_type = resource_type

        self.upload_dir.mkdir(exist_ok=True, parents=True)

    async def relay(self, files: List[UploadFile]) -> Dict[str, Any]:
        """
        Store every received file and forward the first to the provider.
        Returns the provider's raw result.
        """
        logger.info(f"Received files: {[f.filename for f in files]}")
        if not files:
            raise NoFilesError()

        stored = await self.save_uploads(files)
        if len(stored) > 1:
            logger.info(f"Forwarding {stored[0].original_name}, {len(stored) - 1} other file(s) stay local")

        first = stored[0]
        # The SDK is blocking
        return await run_in_threadpool(
            provider.upload_file, self.provider_config, str(first.path), self.resource_type
        )

    async def save_uploads(self, files: List[UploadFile]) -> List[StoredFile]:
        """
        Write the received files under the upload directory.

        If any file is over the size limit the request is rejected and the
        files already written for it are removed.
        """
        stored: List[StoredFile] = []
        try:
            for upload in files:
                stored.append(await self._save_one(upload))
        except FileTooLargeError:
            for item in stored:
                item.path.unlink(missing_ok=True)
            raise
        return stored

    async def _save_one(self, upload: UploadFile) -> StoredFile:
        name = upload.filename or "upload"
        path = self.upload_dir / secrets.token_hex(16)
        size = 0

        try:
            async with aiofiles.open(path, "wb") as out_file:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if self.max_upload_bytes and size > self.max_upload_bytes:
                        raise FileTooLargeError(name)
                    await out_file.write(chunk)
        except FileTooLargeError:
            path.unlink(missing_ok=True)
            logger.info(f"Rejected {name}: larger than {self.max_upload_bytes} bytes")
            raise

        logger.info(f"Stored {name} ({size} bytes) at {path}")
        return StoredFile(
            original_name=name,
            path=path,
            size=size,
            content_type=upload.content_type,
        )
