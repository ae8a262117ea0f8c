# Author      : LoadBalance contributors
# Date        : 2026-10-19
# File Name   : coordinator.py
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from errors import ProtocolViolation
from identity import CHUNK_TAG, CONTRIBUTION_TAG, RESULT_TAG, Identity
from repartition import compute_chunks, split_chunks
from reporting import Reporter


class Coordinator:
    """
    Rank 0 side of the balancing protocol.

    A run is three strictly sequential phases:

    1. gather_contributions   -- receive a count then that many angles from
                                 every worker, in ascending rank order.
    2. repartition_and_scatter -- split the combined angles into equal chunks
                                 (remainder on the last worker) and send one
                                 chunk to every worker, again by ascending rank.
    3. gather_results         -- receive the transformed chunks back in the
                                 same order.

    Receiving from rank 1, then rank 2, ... instead of from whichever rank
    is ready first is what makes the combined collection deterministic.

    Parameters:
    -----------
    identity : Identity
        Must be the coordinator's identity.
    transport : MPIManager or LocalManager
        Point-to-point channel to the workers.
    reporter : Reporter
        Console trace; defaults to a verbose Reporter.

    Attributes:
    -----------
    combined : np.ndarray
        Concatenated contributions, only populated between phases G and S.
    results : np.ndarray
        Concatenated transformed chunks after phase R.
    contribution_sizes : dict
        Worker rank -> number of angles it contributed.
    chunk_sizes : dict
        Worker rank -> number of angles it was assigned.
    """

    def __init__(self, identity: Identity, transport, reporter: Reporter = None):
        if not identity.is_coordinator:
            raise ValueError(f"{identity} cannot run the coordinator")
        self.identity = identity
        self.transport = transport
        self.reporter = reporter if reporter is not None else Reporter()

        self.combined = np.empty(0, dtype=np.float64)
        self.results = np.empty(0, dtype=np.float64)
        self.contribution_sizes = {}
        self.chunk_sizes = {}

    @property
    def rank(self) -> int:
        return self.identity.rank

    def _gather(self, tag: int, sizes: dict) -> np.ndarray:
        # Only assigned to the caller's collection once every rank delivered
        parts = []
        for source in self.identity.worker_ranks():
            count = self.transport.recv_count(source, tag=tag)
            values = self.transport.recv_values(source, count, tag=tag)
            sizes[source] = count
            parts.append(values)
            if tag == CONTRIBUTION_TAG:
                self.reporter.contribution_count(self.rank, source, count)
                self.reporter.contribution(self.rank, values)
        if not parts:
            return np.empty(0, dtype=np.float64)
        return np.concatenate(parts)

    def gather_contributions(self) -> np.ndarray:
        """Phase G: build the combined collection from every worker."""
        sizes = {}
        combined = self._gather(CONTRIBUTION_TAG, sizes)
        self.contribution_sizes = sizes
        self.combined = combined
        self.reporter.combined(self.rank, self.combined)
        return self.combined

    def repartition_and_scatter(self) -> list:
        """
        Phase S: split the combined collection and send one chunk per worker.

        Returns:
        --------
        list of (start, length) tuples, as computed by `compute_chunks`.
        """
        chunks = compute_chunks(len(self.combined), self.identity.worker_count)
        views = split_chunks(self.combined, chunks)

        sizes = {}
        for dest, (start, length), view in zip(self.identity.worker_ranks(), chunks, views):
            self.transport.send_count(dest, length, tag=CHUNK_TAG)
            self.transport.send_values(dest, view, length, tag=CHUNK_TAG)
            sizes[dest] = length
            self.reporter.scattered(self.rank, dest, start, length)

        self.chunk_sizes = sizes
        # Prep for the sine values
        self.combined = np.empty(0, dtype=np.float64)
        return chunks

    def gather_results(self) -> np.ndarray:
        """Phase R: collect the transformed chunks in ascending rank order."""
        returned = {}
        results = self._gather(RESULT_TAG, returned)

        for rank, length in self.chunk_sizes.items():
            if returned.get(rank) != length:
                raise ProtocolViolation(
                    f"rank {rank} was assigned {length} angles but returned {returned.get(rank)}"
                )
        self.results = results
        self.reporter.final(self.rank, self.results)
        return self.results

    def run(self) -> np.ndarray:
        """Run all three phases and return the reassembled results."""
        self.reporter.ranks(self.rank, self.identity.size)
        self.results = np.empty(0, dtype=np.float64)
        self.contribution_sizes = {}
        self.chunk_sizes = {}

        if self.identity.worker_count == 0:
            self.reporter.no_workers(self.rank)
            return self.results

        contributed = len(self.gather_contributions())
        self.repartition_and_scatter()
        self.gather_results()

        if len(self.results) != contributed:
            raise ProtocolViolation(
                f"{contributed} angles were contributed but {len(self.results)} came back"
            )
        return self.results

    def summary(self) -> pd.DataFrame:
        """Per-worker table of contributed vs assigned angle counts."""
        frame = pd.DataFrame({
            "contributed": pd.Series(self.contribution_sizes, dtype="int64"),
            "assigned": pd.Series(self.chunk_sizes, dtype="int64"),
        })
        frame.index.name = "rank"
        return frame.sort_index()

    def plot_balance_stats(self, filename: str = "balance_stats.png"):
        """
        Uses matplotlib to plot how many angles each worker contributed
        next to how many it was assigned, and saves to `filename`.
        """
        frame = self.summary()
        ranks = np.arange(len(frame))
        width = 0.4

        fig, ax = plt.subplots(figsize=(8, 5))
        ax.bar(ranks - width / 2, frame["contributed"], width, label="Contributed")
        ax.bar(ranks + width / 2, frame["assigned"], width, label="Assigned")
        ax.set_xticks(ranks)
        ax.set_xticklabels([str(r) for r in frame.index])
        ax.set_xlabel("Worker rank")
        ax.set_ylabel("Angles")
        ax.legend(loc="upper right", fontsize="small")

        plt.title("Angles per Worker Before and After Balancing")
        fig.tight_layout()
        fig.savefig(filename)
        plt.close(fig)
