"""Bounded, all-or-nothing fan-out for remote calls."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import TypeVar


T = TypeVar("T")
R = TypeVar("R")


def map_all_or_nothing(
    func: Callable[[T], R], items: Sequence[T], max_workers: int = 1
) -> list[R]:
    """Apply ``func`` to every item and return results in input order.

    With ``max_workers <= 1`` items are processed sequentially and the first
    exception propagates immediately. Otherwise a thread pool runs at most
    ``max_workers`` calls at once; on the first failure every pending call is
    cancelled, running calls are awaited, and the failure is re-raised. No
    partial result is ever returned.
    """
    if max_workers <= 1 or len(items) <= 1:
        return [func(item) for item in items]

    results: dict[int, R] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(func, item): idx for idx, item in enumerate(items)}
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)

        failed = next((f for f in done if f.exception() is not None), None)
        if failed is not None:
            for future in pending:
                future.cancel()
            wait(pending)
            raise failed.exception()  # type: ignore[misc]

        for future in done:
            results[futures[future]] = future.result()

    return [results[i] for i in range(len(items))]
