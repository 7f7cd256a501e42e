import os
import shutil
import tempfile
from pathlib import Path

# Set test environment before any imports
TEST_UPLOAD_DIR = Path(tempfile.mkdtemp(prefix="relay-test-"))
os.environ["PORT"] = "8000"
os.environ["UPLOAD_DIR"] = str(TEST_UPLOAD_DIR)
os.environ["CLOUD_NAME"] = "demo-cloud"
os.environ["API_KEY"] = "test-key"
os.environ["API_SECRET"] = "test-secret"
os.environ["CLEANUP_INTERVAL_SECONDS"] = "0"

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from main import app
from relay.core.config import settings

FAKE_RESULT = {
    "public_id": "sample",
    "secure_url": "https://res.cloudinary.com/demo-cloud/image/upload/v1/sample.png",
    "bytes": 12,
}

@pytest.fixture
def test_client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)

@pytest.fixture
def mock_provider():
    """Patch the provider SDK so nothing leaves the process."""
    with patch("cloudinary.uploader.upload", return_value=dict(FAKE_RESULT)) as upload:
        yield upload

@pytest.fixture(autouse=True)
def clean_upload_dir():
    """Empty the upload directory before and after each test."""
    settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)

    yield

    app.dependency_overrides.clear()
    for path in settings.UPLOAD_DIR.iterdir():
        if path.is_dir():
            shutil.rmtree(path, ignore_errors=True)
        else:
            path.unlink(missing_ok=True)

@pytest.fixture
def sample_files(tmp_path):
    """Two small files on disk, as a user would pick them."""
    first = tmp_path / "first.png"
    second = tmp_path / "second.jpg"
    first.write_bytes(b"\x89PNG" + b"a" * 2048)
    second.write_bytes(b"\xff\xd8" + b"b" * 4096)
    return [first, second]
