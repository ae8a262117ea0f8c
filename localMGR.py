# Author      : LoadBalance contributors
# Date        : 2026-10-19
# File Name   : localMGR.py
import queue
import threading
import time

import numpy as np

from errors import LoadBalanceError, ProtocolViolation, Starvation
from identity import Identity

# how often a blocked receive checks the abort flag and its deadline
POLL_INTERVAL = 0.05


class _Aborted(LoadBalanceError):
    """Raised in ranks still waiting when another rank has failed."""


class LocalFabric:
    """
    In-process stand-in for an MPI communicator.

    Every ordered (source, dest, tag) triple gets its own FIFO queue, so
    delivery order per pair matches MPI's non-overtaking rule. Receives
    block like MPI_Recv; `timeout` (seconds) turns an endless wait into
    a Starvation error.
    """

    def __init__(self, size: int, timeout: float = None):
        if size < 1:
            raise ValueError(f"size must be at least 1, got {size}")
        self.size = size
        self.timeout = timeout
        self._channels = {}
        self._lock = threading.Lock()
        self._aborted = threading.Event()

    def channel(self, source: int, dest: int, tag: int) -> queue.Queue:
        key = (source, dest, tag)
        with self._lock:
            if key not in self._channels:
                self._channels[key] = queue.Queue()
            return self._channels[key]

    def manager(self, rank: int) -> "LocalManager":
        return LocalManager(self, rank)

    def abort(self):
        self._aborted.set()

    @property
    def aborted(self) -> bool:
        return self._aborted.is_set()

    def take(self, source: int, dest: int, tag: int):
        q = self.channel(source, dest, tag)
        deadline = None if self.timeout is None else time.monotonic() + self.timeout
        while True:
            if self.aborted:
                raise _Aborted(f"rank {dest} gave up waiting on rank {source}: run aborted")
            wait = POLL_INTERVAL
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise Starvation(
                        f"rank {dest} waited {self.timeout}s for rank {source} (tag {tag})"
                    )
                wait = min(wait, remaining)
            try:
                return q.get(timeout=wait)
            except queue.Empty:
                continue


class LocalManager:
    """
    Transport endpoint for one simulated rank on a LocalFabric.

    Same interface as MPIManager; messages are tagged with their kind so
    a payload read where a header was expected surfaces as a
    ProtocolViolation rather than garbage.
    """

    def __init__(self, fabric: LocalFabric, rank: int):
        if not 0 <= rank < fabric.size:
            raise ValueError(f"rank {rank} outside [0, {fabric.size})")
        self.fabric = fabric
        self.rank = rank
        self.size = fabric.size

    def identity(self) -> Identity:
        return Identity(self.rank, self.size)

    def _check_rank(self, peer: int):
        if not 0 <= peer < self.size:
            raise ProtocolViolation(
                f"rank {peer} outside communicator of size {self.size}"
            )

    def _put(self, dest: int, tag: int, message):
        self._check_rank(dest)
        self.fabric.channel(self.rank, dest, tag).put(message)

    def _take(self, source: int, tag: int, expected: str):
        self._check_rank(source)
        kind, body = self.fabric.take(source, self.rank, tag)
        if kind != expected:
            raise ProtocolViolation(
                f"expected a {expected} message from rank {source}, got {kind}"
            )
        return body

    def send_count(self, dest: int, value: int, tag: int = 0):
        self._put(dest, tag, ("count", int(value)))

    def recv_count(self, source: int, tag: int = 0) -> int:
        count = self._take(source, tag, "count")
        if count < 0:
            raise ProtocolViolation(f"rank {source} announced a negative count ({count})")
        return count

    def send_values(self, dest: int, values, count: int = None, tag: int = 0):
        # copy: the receiver owns the payload once it is sent
        payload = np.array(values, dtype=np.float64)
        if count is not None and count != len(payload):
            raise ProtocolViolation(
                f"count {count} does not match payload of {len(payload)} values"
            )
        self._put(dest, tag, ("values", payload))

    def recv_values(self, source: int, count: int, tag: int = 0) -> np.ndarray:
        if count < 0:
            raise ProtocolViolation(f"cannot receive a negative count ({count})")
        payload = self._take(source, tag, "values")
        if len(payload) != count:
            raise ProtocolViolation(
                f"rank {source} announced {count} values but sent {len(payload)}"
            )
        return payload

    def abort(self, code: int = 1):
        self.fabric.abort()


def run_local(size: int, target, timeout: float = None) -> list:
    """
    Run `target(manager)` once per rank, each rank on its own thread.

    Parameters:
    -----------
    size : int
        Number of simulated ranks, coordinator included.
    target : callable
        Called with the rank's LocalManager; its return value is collected.
    timeout : float
        Optional receive timeout handed to the LocalFabric.

    Returns:
    --------
    list
        The value returned by `target` on each rank, indexed by rank.

    The first failing rank aborts the fabric so every other rank unblocks,
    then its exception is re-raised here.
    """
    fabric = LocalFabric(size, timeout=timeout)
    results = [None] * size
    errors = {}

    def _run_rank(rank):
        try:
            results[rank] = target(fabric.manager(rank))
        except Exception as exc:
            errors[rank] = exc
            fabric.abort()

    threads = [
        threading.Thread(target=_run_rank, args=(rank,), name=f"rank-{rank}")
        for rank in range(size)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    if errors:
        # report the root cause, not the ranks that were aborted because of it
        causes = [errors[r] for r in sorted(errors) if not isinstance(errors[r], _Aborted)]
        raise (causes or [errors[min(errors)]])[0]
    return results
