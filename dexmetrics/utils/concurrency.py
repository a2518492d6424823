# dexmetrics/utils/concurrency.py

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Tuple


def fan_out(*calls: Callable[[], Any], max_workers: int = 4) -> Tuple[Any, ...]:
    """Run independent reads concurrently and wait for all of them.

    Results come back in call order. The first exception raised by any call
    is re-raised once every call has finished.
    """
    if not calls:
        return ()

    workers = max(1, min(max_workers, len(calls)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dexmetrics-read") as executor:
        futures = [executor.submit(call) for call in calls]
        return tuple(future.result() for future in futures)
