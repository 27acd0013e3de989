import asyncio
import time
import threading
import logging
from functools import wraps

from tableannotator.errors import KnowledgeBaseError


class RateLimiter:
    """
    A simple thread-safe rate limiter for blocking HTTP calls.

    HTTP 429 responses are turned into a KnowledgeBaseError so that the
    retrying client above backs off and tries again.
    """
    def __init__(self, max_calls, period, name="RateLimiter"):
        self.max_calls = max_calls
        self.period = period
        self.name = name
        self.lock = threading.Lock()
        self.calls = []

    def __call__(self, func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            with self.lock:
                now = time.time()
                # retain only calls within period
                self.calls = [t for t in self.calls if t > now - self.period]
                if len(self.calls) >= self.max_calls:
                    sleep_t = self.calls[0] + self.period - now
                    logging.info(f"[{self.name}] Rate limit reached, sleeping {sleep_t:.2f}s")
                    time.sleep(sleep_t)
                self.calls.append(time.time())
            try:
                return func(*args, **kwargs)
            except Exception as e:
                resp = getattr(e, 'response', None)
                status = getattr(resp, 'status_code', None) if resp is not None else getattr(e, 'code', None)
                if status == 429:
                    logging.warning(f"[{self.name}] 429 received, backing off")
                    raise KnowledgeBaseError("Rate limited by remote service", source=self.name, status_code=429) from e
                raise
        return wrapper


async def run_in_batches(items, worker, batch_size, delay=0.0, label="batch"):
    """
    Run a coroutine function over items in fixed-size batches.

    Items within a batch run concurrently; batches run one after another with
    `delay` seconds between them. Results keep the order of the input items.

    Args:
        items: Sequence of work items
        worker: Coroutine function called with one item
        batch_size: Number of items per batch
        delay: Pause in seconds between two batches (0 disables the pause)
        label: Name used in log messages

    Returns:
        List of worker results, one per item
    """
    items = list(items)
    results = []
    for start in range(0, len(items), batch_size):
        if start and delay > 0:
            await asyncio.sleep(delay)
        batch = items[start:start + batch_size]
        logging.debug(f"[{label}] Processing items {start + 1}-{start + len(batch)} of {len(items)}")
        results.extend(await asyncio.gather(*(worker(item) for item in batch)))
    return results
