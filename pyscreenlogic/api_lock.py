import logging
import random
import threading
import time
from contextlib import contextmanager
from typing import Optional

log = logging.getLogger(__name__)


def acquire_with_exponential_backoff(
    lock: threading.Lock,
    timeout: float,
    initial_delay: float = 0.05,
    factor: int = 2,
    max_delay: float = 1.0,
    jitter: float = 0.05
) -> bool:
    """
    Try to take the lock without blocking, sleeping between attempts with an
    exponentially growing delay plus random jitter.

    Args:
        lock (threading.Lock): The lock to acquire.
        timeout (float): Seconds to keep trying.
        initial_delay (float, optional): First delay between attempts. Defaults to 0.05.
        factor (int, optional): Delay multiplier per failed attempt. Defaults to 2.
        max_delay (float, optional): Upper bound of the delay. Defaults to 1.0.
        jitter (float, optional): Maximum random extra delay. Defaults to 0.05.

    Returns:
        bool: True if the lock was acquired before the timeout ran out.
    """
    deadline = time.perf_counter() + timeout
    delay = initial_delay
    while True:
        if lock.acquire(blocking=False):
            return True
        remaining = deadline - time.perf_counter()
        if remaining <= 0:
            return False
        time.sleep(min(delay, remaining) + random.uniform(0, jitter))
        delay = min(delay * factor, max_delay)
        log.debug(f"Waiting for gateway lock {lock}")


@contextmanager
def acquire_lock_with_backoff(lock: threading.Lock, timeout: Optional[float], **backoff_kwargs):
    """
    Hold the lock for the duration of the block.

    A timeout of None waits as long as it takes. Otherwise TimeoutError is
    raised if the lock could not be taken in time.
    """
    if timeout is None:
        lock.acquire()
    elif not acquire_with_exponential_backoff(lock, timeout, **backoff_kwargs):
        raise TimeoutError("Unable to acquire gateway lock within the specified timeout.")
    try:
        yield
    finally:
        lock.release()
