# Author      : LoadBalance contributors
# Date        : 2026-10-19
# File Name   : worker.py
import numpy as np

from identity import CHUNK_TAG, CONTRIBUTION_TAG, COORDINATOR, RESULT_TAG, Identity
from reporting import Reporter


def sine(x: float) -> float:
    """Default transform: sine of an angle in radians."""
    return float(np.sin(x))


class WorkerAgent:
    """
    Worker side of the balancing protocol. Single pass, no retries.

    1) generate a contribution and send it to the coordinator
    2) receive the balanced chunk assigned by the coordinator
    3) apply `transform` to every element of the chunk
    4) send the transformed chunk back

    Parameters:
    -----------
    identity : Identity
        A worker identity (rank >= 1).
    transport : MPIManager or LocalManager
        Point-to-point channel to the coordinator.
    generator : object
        Anything with a `generate(rank) -> np.ndarray` method.
    transform : callable
        float -> float, applied element-wise (default: sine).
    reporter : Reporter
        Console trace; defaults to a verbose Reporter.
    """

    def __init__(self, identity: Identity, transport, generator, transform=sine,
                 reporter: Reporter = None):
        if identity.is_coordinator:
            raise ValueError(f"{identity} cannot run a worker")
        self.identity = identity
        self.transport = transport
        self.generator = generator
        self.transform = transform
        self.reporter = reporter if reporter is not None else Reporter()

        self.contribution = None
        self.chunk = None

    @property
    def rank(self) -> int:
        return self.identity.rank

    def apply_transform(self, chunk: np.ndarray) -> np.ndarray:
        """New array of the same length and order with `transform` applied."""
        return np.fromiter(
            (self.transform(v) for v in chunk), dtype=np.float64, count=len(chunk)
        )

    def send_contribution(self):
        self.contribution = np.asarray(self.generator.generate(self.rank), dtype=np.float64)
        count = len(self.contribution)
        self.transport.send_count(COORDINATOR, count, tag=CONTRIBUTION_TAG)
        self.transport.send_values(COORDINATOR, self.contribution, count, tag=CONTRIBUTION_TAG)

    def receive_chunk(self) -> np.ndarray:
        count = self.transport.recv_count(COORDINATOR, tag=CHUNK_TAG)
        self.chunk = self.transport.recv_values(COORDINATOR, count, tag=CHUNK_TAG)
        return self.chunk

    def send_results(self, results: np.ndarray):
        self.transport.send_count(COORDINATOR, len(results), tag=RESULT_TAG)
        self.transport.send_values(COORDINATOR, results, len(results), tag=RESULT_TAG)

    def run(self) -> np.ndarray:
        self.send_contribution()
        chunk = self.receive_chunk()
        results = self.apply_transform(chunk)
        self.reporter.transformed(self.rank, chunk, results)
        self.send_results(results)
        return results
