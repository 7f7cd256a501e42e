import io
import os
import time
import pytest
from fastapi import UploadFile
from relay.core.errors import FileTooLargeError, NoFilesError, ProviderError
from relay.core.provider import ProviderConfig, upload_file, upload_url
from relay.services.cleanup_service import cleanup_stale_uploads
from relay.services.relay_service import RelayService

CONFIG = ProviderConfig(cloud_name="demo-cloud", api_key="key", api_secret="secret")

def make_upload(name: str, content: bytes) -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=name)

@pytest.mark.asyncio
async def test_save_uploads_writes_files(tmp_path):
    """Test that received files are spooled to the upload directory."""
    service = RelayService(CONFIG, upload_dir=tmp_path)

    stored = await service.save_uploads([make_upload("a.txt", b"alpha"), make_upload("b.txt", b"beta")])

    assert [s.original_name for s in stored] == ["a.txt", "b.txt"]
    assert [s.size for s in stored] == [5, 4]
    assert stored[0].path.read_bytes() == b"alpha"
    assert stored[0].path.parent == tmp_path

@pytest.mark.asyncio
async def test_size_limit_removes_partial_request(tmp_path):
    """Test that files from a rejected request are not left behind."""
    service = RelayService(CONFIG, upload_dir=tmp_path, max_upload_bytes=8)

    with pytest.raises(FileTooLargeError) as exc_info:
        await service.save_uploads([make_upload("ok.txt", b"small"), make_upload("big.txt", b"y" * 9)])

    assert exc_info.value.filename == "big.txt"
    assert list(tmp_path.iterdir()) == []

@pytest.mark.asyncio
async def test_size_limit_disabled(tmp_path):
    """Test that a zero limit accepts any size."""
    service = RelayService(CONFIG, upload_dir=tmp_path, max_upload_bytes=0)

    stored = await service.save_uploads([make_upload("big.bin", b"z" * 4096)])

    assert stored[0].size == 4096

@pytest.mark.asyncio
async def test_relay_rejects_empty_list(tmp_path):
    service = RelayService(CONFIG, upload_dir=tmp_path)

    with pytest.raises(NoFilesError):
        await service.relay([])

@pytest.mark.asyncio
async def test_relay_returns_provider_result(tmp_path, mock_provider):
    service = RelayService(CONFIG, upload_dir=tmp_path, resource_type="image")

    result = await service.relay([make_upload("pic.png", b"png")])

    assert result["public_id"] == "sample"
    assert mock_provider.call_args.kwargs["resource_type"] == "image"

def test_provider_config():
    """Test the provider configuration object."""
    assert CONFIG.is_configured
    assert not ProviderConfig(cloud_name="demo", api_key="", api_secret="").is_configured
    assert upload_url("demo-cloud") == "https://api.cloudinary.com/v1_1/demo-cloud/auto/upload"
    assert upload_url("demo-cloud", "http://localhost:9000/") == "http://localhost:9000/v1_1/demo-cloud/auto/upload"

def test_cleanup_removes_only_stale_files(tmp_path):
    """Test that the sweep removes old temp files and keeps fresh ones."""
    stale = tmp_path / "stale"
    fresh = tmp_path / "fresh"
    stale.write_bytes(b"old")
    fresh.write_bytes(b"new")
    old_time = time.time() - 7200
    os.utime(stale, (old_time, old_time))

    removed = cleanup_stale_uploads(tmp_path, timeout_seconds=3600)

    assert removed == 1
    assert not stale.exists()
    assert fresh.exists()

def test_cleanup_missing_directory(tmp_path):
    assert cleanup_stale_uploads(tmp_path / "missing", timeout_seconds=1) == 0

def test_upload_file_requires_credentials(tmp_path, mock_provider):
    """Test that an unconfigured provider fails before the SDK is called."""
    path = tmp_path / "pic.png"
    path.write_bytes(b"png")

    with pytest.raises(ProviderError) as exc_info:
        upload_file(ProviderConfig(cloud_name="", api_key="", api_secret=""), str(path))

    assert exc_info.value.detail == "provider credentials not configured"
    assert exc_info.value.status_code == 502
    mock_provider.assert_not_called()
