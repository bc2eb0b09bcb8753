from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class ItemFailure(Generic[T]):
    item: T
    error: str


@dataclass
class BatchOutcome(Generic[T, R]):
    """Per-item results of a batch run; failures never abort the run."""

    succeeded: list[tuple[T, R]] = field(default_factory=list)
    failed: list[ItemFailure[T]] = field(default_factory=list)


def run_isolated(
    items: Iterable[T],
    work: Callable[[T], R],
    *,
    max_workers: int = 1,
    label: str = "batch",
) -> BatchOutcome[T, R]:
    """Apply ``work`` to every item, catching and recording each item's failure.

    Items are independent writes. With ``max_workers > 1`` they run on a
    bounded thread pool; results keep the input order either way.
    """

    items = list(items)
    outcome: BatchOutcome[T, R] = BatchOutcome()

    def _guarded(item: T):
        try:
            return True, work(item)
        except Exception as e:
            logger.warning("%s: item %r failed: %s", label, item, e)
            return False, str(e)

    if max_workers <= 1 or len(items) <= 1:
        results = [_guarded(item) for item in items]
    else:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=label) as pool:
            results = list(pool.map(_guarded, items))

    for item, (ok, value) in zip(items, results):
        if ok:
            outcome.succeeded.append((item, value))
        else:
            outcome.failed.append(ItemFailure(item=item, error=value))
    return outcome
