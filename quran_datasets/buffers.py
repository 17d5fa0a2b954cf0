# quran_datasets/buffers.py
from typing import Callable, Generic, Iterable, List, TypeVar

T = TypeVar("T")


class FlushBuffer(Generic[T]):
    """
    Accumulates items and hands them to `sink` in batches.

    `sink(items, final)` is called by `flush()`, after which the buffer is
    empty again. `full` is true once more than `threshold` items are held.
    """

    def __init__(self, threshold: int, sink: Callable[[List[T], bool], object]):
        self.threshold = threshold
        self.sink = sink
        self.flushes = 0
        self.total = 0
        self._items: List[T] = []

    def __len__(self) -> int:
        return len(self._items)

    def add(self, item: T):
        self._items.append(item)

    def extend(self, items: Iterable[T]):
        self._items.extend(items)

    @property
    def full(self) -> bool:
        return len(self._items) > self.threshold

    def flush(self, final: bool = False) -> int:
        """Send everything buffered to the sink and clear the buffer."""
        items, self._items = self._items, []
        self.sink(items, final)
        self.flushes += 1
        self.total += len(items)
        return len(items)

