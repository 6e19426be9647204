from __future__ import annotations

import time
from typing import Callable, Iterable, Iterator, TypeVar

T = TypeVar("T")


class Throttle:
    """Hands out items one at a time with a fixed pause between consecutive items."""

    def __init__(self, delay: float, sleep: Callable[[float], None] = time.sleep) -> None:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self.delay = delay
        self.sleep = sleep
        self.delays = 0

    def pace(self, items: Iterable[T]) -> Iterator[T]:
        first = True
        for item in items:
            if not first and self.delay:
                self.sleep(self.delay)
                self.delays += 1
            first = False
            yield item
