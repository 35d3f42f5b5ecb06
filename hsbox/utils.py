import time
from typing import Iterable, Iterator, List, TypeVar

T = TypeVar('T')


def current_timestamp() -> int:
    """Seconds since the epoch, as stored in the timestamp columns."""
    return int(time.time())


def chunked(items: Iterable[T], size: int) -> Iterator[List[T]]:
    """Yield successive lists of at most `size` items."""
    chunk: List[T] = []
    for item in items:
        chunk.append(item)
        if len(chunk) == size:
            yield chunk
            chunk = []
    if chunk:
        yield chunk
