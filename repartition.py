# Author      : LoadBalance contributors
# Date        : 2026-10-19
# File Name   : repartition.py
import numpy as np


def compute_chunks(total_count: int, worker_count: int) -> list:
    """
    Split `total_count` items into `worker_count` contiguous chunks.

    Every worker gets `total_count // worker_count` items; the last worker
    also absorbs the whole remainder, even when the base length is zero.

    Parameters:
    -----------
    total_count : int
        Number of items in the combined collection (>= 0).
    worker_count : int
        Number of workers to split across (>= 1).

    Returns:
    --------
    list of (start, length) tuples, one per worker, in worker order.
    """
    for name, value in (("total_count", total_count), ("worker_count", worker_count)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if total_count < 0:
        raise ValueError(f"total_count must be non-negative, got {total_count}")
    if worker_count < 1:
        raise ValueError(f"worker_count must be at least 1, got {worker_count}")

    # quotient for everyone, remainder piled onto the last worker
    base, rem = divmod(int(total_count), int(worker_count))
    chunks = []
    start = 0
    for w in range(worker_count):
        length = base + (rem if w == worker_count - 1 else 0)
        chunks.append((start, length))
        start += length
    return chunks


def split_chunks(values: np.ndarray, chunks: list) -> list:
    """
    Slice `values` along the boundaries produced by `compute_chunks`.

    The slices are read-only views, so the combined collection is never
    copied or modified while it is being scattered.
    """
    covered = sum(length for _, length in chunks)
    if covered != len(values):
        raise ValueError(f"chunks cover {covered} items but values hold {len(values)}")

    view = np.asarray(values).view()
    view.flags.writeable = False
    return [view[start:start + length] for start, length in chunks]
