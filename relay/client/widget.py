import asyncio
import logging
import mimetypes
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union
import httpx
from relay.client.models import BatchResult, UploadItem, UploadStatus
from relay.client.previews import PreviewRegistry
from relay.client.progress import attach_progress, compute_progress
from relay.client.targets import UploadTarget

logger = logging.getLogger("upload_widget")

BATCH_FAILED_MESSAGE = "One or more uploads failed."


class WidgetBusyError(RuntimeError):
    """Files cannot be added while a batch is uploading."""


def _log_notify(message: str) -> None:
    logger.error(message)


class UploadWidget:
    """
    Tracks selected files and uploads them concurrently, one request per file.

    Each item moves pending -> uploading -> success/error independently; a
    failed item never affects the others. Use as an async context manager so
    previews and the HTTP client are released.
    """

    def __init__(
        self,
        target: UploadTarget,
        client: Optional[httpx.AsyncClient] = None,
        notify: Callable[[str], None] = _log_notify,
        on_update: Optional[Callable[[UploadItem], None]] = None,
        timeout: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.target = target
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None
        self._notify = notify
        self._on_update = on_update
        self._clock = clock

        self.previews = PreviewRegistry()
        self.uploading = False
        self._items: List[UploadItem] = []

    @property
    def items(self) -> List[UploadItem]:
        return list(self._items)

    def get(self, item_id: str) -> Optional[UploadItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def add_files(self, paths: Iterable[Union[str, Path]]) -> List[UploadItem]:
        """
        Track new files as pending items, keeping those already selected.
        """
        if self.uploading:
            raise WidgetBusyError("Cannot add files while uploading")

        new_items = []
        for path in paths:
            path = Path(path)
            new_items.append(UploadItem(path=path, preview_url=self.previews.create(path)))
        self._items.extend(new_items)
        return new_items

    def remove_file(self, item_id: str) -> bool:
        if self.uploading:
            return False
        item = self.get(item_id)
        if item is None:
            return False
        self._items.remove(item)
        self.previews.revoke(item.preview_url)
        return True

    def clear(self) -> None:
        """
        Discard every item and release all previews.
        """
        self._items = []
        self.previews.revoke_all()
        self.uploading = False

    async def upload_all(self) -> BatchResult:
        """
        Upload every pending or failed item in parallel and wait for all of
        them to finish.
        """
        batch = [item for item in self._items if item.needs_upload]
        if not batch:
            return BatchResult()

        self.uploading = True
        try:
            outcomes = await asyncio.gather(
                *(self._upload_item(item) for item in batch),
                return_exceptions=True,
            )
        finally:
            self.uploading = False

        result = BatchResult()
        for item, outcome in zip(batch, outcomes):
            if isinstance(outcome, BaseException):
                # Not a network failure; keep the item consistent anyway
                logger.error(f"Unexpected error uploading {item.name}", exc_info=outcome)
                self._mark_failed(item, repr(outcome))
            if item.status is UploadStatus.SUCCESS:
                result.succeeded.append(item)
            else:
                result.failed.append(item)

        if result.failed:
            self._notify(BATCH_FAILED_MESSAGE)
        else:
            logger.info("All uploads complete")
        return result

    async def _upload_item(self, item: UploadItem) -> None:
        item.status = UploadStatus.UPLOADING
        item.error = None
        self._changed(item)

        try:
            payload = await self._send(item)
        except (httpx.HTTPError, OSError, ValueError) as e:
            logger.warning(f"Upload failed for {item.name}: {e}")
            self._mark_failed(item, str(e))
            return

        item.status = UploadStatus.SUCCESS
        item.progress = 100
        item.est = ""
        item.remote_url = self.target.remote_url(payload)
        self._changed(item)

    async def _send(self, item: UploadItem) -> Dict[str, Any]:
        start = self._clock()

        def on_progress(loaded: int, total: int) -> None:
            elapsed = self._clock() - start
            item.progress, item.est = compute_progress(loaded, total, elapsed)
            item.status = UploadStatus.UPLOADING
            self._changed(item)

        content_type = mimetypes.guess_type(item.name)[0] or "application/octet-stream"
        with item.path.open("rb") as fh:
            request = self._client.build_request(
                "POST",
                self.target.url,
                data=self.target.build_fields(),
                files={self.target.file_field: (item.name, fh, content_type)},
            )
            attach_progress(request, on_progress)
            response = await self._client.send(request)

        response.raise_for_status()
        return response.json()

    def _mark_failed(self, item: UploadItem, error: str) -> None:
        item.status = UploadStatus.ERROR
        item.progress = 0
        item.est = ""
        item.error = error
        self._changed(item)

    def _changed(self, item: UploadItem) -> None:
        if self._on_update is not None:
            self._on_update(item)

    async def close(self) -> None:
        self.clear()
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "UploadWidget":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
