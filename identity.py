# Author      : LoadBalance contributors
# Date        : 2026-10-19
# File Name   : identity.py
from dataclasses import dataclass
from enum import Enum

COORDINATOR = 0

# One message tag per protocol phase
CONTRIBUTION_TAG = 0
CHUNK_TAG = 1
RESULT_TAG = 2


class Role(Enum):
    COORDINATOR = "coordinator"
    WORKER = "worker"


@dataclass(frozen=True)
class Identity:
    """
    Immutable rank tag assigned when the process group is formed.

    Parameters:
    -----------
    rank : int
        This process's rank in [0, size).
    size : int
        Total number of ranks, coordinator included.
    """
    rank: int
    size: int

    def __post_init__(self):
        if self.size < 1:
            raise ValueError(f"size must be at least 1, got {self.size}")
        if not 0 <= self.rank < self.size:
            raise ValueError(f"rank {self.rank} outside [0, {self.size})")

    @property
    def role(self) -> Role:
        return Role.COORDINATOR if self.rank == COORDINATOR else Role.WORKER

    @property
    def is_coordinator(self) -> bool:
        return self.role is Role.COORDINATOR

    @property
    def worker_count(self) -> int:
        return self.size - 1

    def worker_ranks(self):
        """Worker ranks in the order the coordinator serves them."""
        return range(COORDINATOR + 1, self.size)

    def __str__(self):
        if self.is_coordinator:
            return "Coordinator"
        return f"Worker({self.rank})"
