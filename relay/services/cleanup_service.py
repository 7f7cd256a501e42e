import asyncio
import logging
import time
from pathlib import Path
from fastapi import FastAPI
from relay.core.config import settings

logger = logging.getLogger("cleanup_service")

def cleanup_stale_uploads(upload_dir: Path, timeout_seconds: int) -> int:
    """
    Remove relayed temp files older than the timeout.
    Returns the number of files removed.
    """
    if not upload_dir.exists():
        return 0

    stale_threshold = time.time() - timeout_seconds
    removed = 0
    for temp_file in upload_dir.iterdir():
        if not temp_file.is_file():
            continue
        try:
            if temp_file.stat().st_mtime < stale_threshold:
                logger.info(f"Removing stale temp file: {temp_file}")
                temp_file.unlink()
                removed += 1
        except OSError as e:
            logger.error(f"Error removing temp file {temp_file}: {str(e)}")
    return removed

async def run_cleanup_loop(upload_dir: Path, interval_seconds: int, timeout_seconds: int):
    """
    Periodically sweep the upload directory.
    """
    while True:
        logger.info("Running cleanup task for stale temp files")
        removed = cleanup_stale_uploads(upload_dir, timeout_seconds)
        if removed:
            logger.info(f"Removed {removed} stale temp file(s)")

        # Wait for next run
        await asyncio.sleep(interval_seconds)

def setup_cleanup_tasks(app: FastAPI):
    """
    Start the sweep on startup when an interval is configured.
    """
    if settings.CLEANUP_INTERVAL_SECONDS <= 0:
        return

    @app.on_event("startup")
    async def start_cleanup_task():
        app.state.cleanup_task = asyncio.create_task(
            run_cleanup_loop(
                settings.UPLOAD_DIR,
                settings.CLEANUP_INTERVAL_SECONDS,
                settings.STALE_UPLOAD_TIMEOUT_SECONDS,
            )
        )
