import logging
import uuid
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger("previews")


class PreviewRegistry:
    """
    Hands out local preview handles ("blob:" URLs) for selected files.
    Every handle must be revoked once its item goes away.
    """

    def __init__(self):
        self._previews: Dict[str, Path] = {}

    def create(self, path: Path) -> str:
        url = f"blob:{uuid.uuid4()}"
        self._previews[url] = Path(path)
        return url

    def resolve(self, url: str) -> Optional[Path]:
        return self._previews.get(url)

    def revoke(self, url: str) -> None:
        self._previews.pop(url, None)

    def revoke_all(self) -> None:
        if self._previews:
            logger.debug(f"Revoking {len(self._previews)} preview(s)")
        self._previews.clear()

    def __len__(self) -> int:
        return len(self._previews)

    def __contains__(self, url: str) -> bool:
        return url in self._previews
