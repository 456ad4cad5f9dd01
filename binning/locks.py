# binning/locks.py

import threading
from contextlib import contextmanager

import constants


class StripedLocks:
    """
    A fixed pool of locks shared out over the cells of a grid.

    Cell k is guarded by lock k % n_stripes, so two threads only contend
    when they touch cells that share a stripe.
    """
    def __init__(self, n_stripes: int = None):
        n_stripes = constants.LOCK_STRIPES if n_stripes is None else n_stripes
        if n_stripes < 1:
            raise ValueError(f"Need at least one lock stripe, got {n_stripes}")
        self.locks = [threading.Lock() for _ in range(n_stripes)]

    def __len__(self):
        return len(self.locks)

    def for_cell(self, linear_index: int) -> threading.Lock:
        return self.locks[linear_index % len(self.locks)]

    @contextmanager
    def all(self):
        # Always acquired in ascending order
        acquired = []
        try:
            for lock in self.locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
