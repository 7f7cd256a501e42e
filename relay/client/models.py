import secrets
import string
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

_ALPHABET = string.ascii_lowercase + string.digits


class UploadStatus(str, Enum):
    PENDING = "pending"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


def new_item_id(length: int = 6) -> str:
    """Short random token; collisions are possible and not checked."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


@dataclass
class UploadItem:
    """
    Client-side state of one file through its upload.
    """
    path: Path
    preview_url: str
    id: str = field(default_factory=new_item_id)
    progress: int = 0
    est: str = ""
    status: UploadStatus = UploadStatus.PENDING
    remote_url: Optional[str] = None
    error: Optional[str] = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    @property
    def size_mb(self) -> str:
        return f"{self.size / (1024 * 1024):.2f} MB"

    @property
    def needs_upload(self) -> bool:
        return self.status in (UploadStatus.PENDING, UploadStatus.ERROR)


@dataclass
class BatchResult:
    succeeded: List[UploadItem] = field(default_factory=list)
    failed: List[UploadItem] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed
