import math
from typing import AsyncIterator, Callable, Iterable, Optional, Tuple, Union
import httpx

ProgressCallback = Callable[[int, int], None]


def compute_progress(loaded: int, total: int, elapsed: float) -> Tuple[int, str]:
    """
    Percent complete and a human ETA from byte counters.

    The percentage stops at 99 while the request is in flight; only a
    successful response moves an item to 100.
    """
    if total <= 0:
        return 0, ""

    percent = math.floor(loaded * 100 / total)
    percent = max(0, min(percent, 99))

    if elapsed <= 0 or loaded <= 0:
        return percent, ""

    bps = loaded / elapsed
    seconds_remaining = (total - loaded) / bps
    if seconds_remaining > 0:
        return percent, f"{math.ceil(seconds_remaining)}s remaining"
    return percent, "Finishing..."


class ProgressStream(httpx.AsyncByteStream):
    """
    Wraps a request body and reports how many bytes the transport has read.
    """

    def __init__(
        self,
        stream: Union[httpx.AsyncByteStream, Iterable[bytes]],
        total: int,
        callback: ProgressCallback,
    ):
        self._stream = stream
        self.total = total
        self.loaded = 0
        self._callback = callback

    async def __aiter__(self) -> AsyncIterator[bytes]:
        async for chunk in self._iter_source():
            self.loaded += len(chunk)
            self._callback(self.loaded, self.total)
            yield chunk

    async def _iter_source(self) -> AsyncIterator[bytes]:
        if hasattr(self._stream, "__aiter__"):
            async for chunk in self._stream:
                yield chunk
        else:
            for chunk in self._stream:
                yield chunk

    async def aclose(self) -> None:
        close = getattr(self._stream, "aclose", None)
        if close is not None:
            await close()


def request_length(request: httpx.Request) -> Optional[int]:
    value = request.headers.get("Content-Length")
    return int(value) if value else None


def attach_progress(request: httpx.Request, callback: ProgressCallback) -> bool:
    """
    Swap the request body for a counting one. Bodies with no known length are
    left alone and report nothing.
    """
    total = request_length(request)
    if not total:
        return False
    request.stream = ProgressStream(request.stream, total, callback)
    return True
