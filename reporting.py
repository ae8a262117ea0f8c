# Author      : LoadBalance contributors
# Date        : 2026-10-19
# File Name   : reporting.py


def _fmt(values) -> str:
    return " ".join(f"{v:g}" for v in values)


class Reporter:
    """
    Console trace of a balancing run.

    Purely observational: nothing in the protocol reads back what is
    reported here. Every line carries the rank that printed it because
    MPI interleaves the output of all processes.
    """

    def __init__(self, verbose: bool = True):
        self.verbose = verbose

    def emit(self, rank: int, text: str):
        if self.verbose:
            print(f"[Rank {rank}] {text}", flush=True)

    # ------------------ Coordinator side ------------------
    def ranks(self, rank, size):
        self.emit(rank, f"Number of ranks = {size}")

    def contribution_count(self, rank, source, count):
        self.emit(rank, f"Received no. of angles = {count} from rank {source}")

    def contribution(self, rank, values):
        self.emit(rank, f"Received vector by master: {_fmt(values)}")

    def combined(self, rank, values):
        self.emit(rank, f"Master vector ({len(values)}): {_fmt(values)}")

    def scattered(self, rank, dest, start, length):
        self.emit(rank, f"Sent chunk [{start}, {start + length}) ({length}) to rank {dest}")

    def final(self, rank, values):
        self.emit(rank, f"Final Master vector ({len(values)}): {_fmt(values)}")

    def no_workers(self, rank):
        self.emit(rank, "No worker ranks, nothing to balance")

    # ------------------ Worker side ------------------
    def transformed(self, rank, before, after):
        pairs = " ".join(f"{a:g}->({b:g})" for a, b in zip(before, after))
        self.emit(rank, f"Received vector by slave {rank} ({len(before)}): {pairs}")
