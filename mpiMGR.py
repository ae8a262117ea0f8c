# Author      : LoadBalance contributors
# Date        : 2026-10-19
# File Name   : mpiMGR.py
from mpi4py import MPI
import numpy as np

from errors import ProtocolViolation
from identity import Identity


class MPIManager:
    """
    Point-to-point transport for the load balancer built on `mpi4py`.

    Every message is either a count header (a single MPI.INT) or a flat
    payload of MPI.DOUBLE values. Both are sent with the buffer-based
    `Send`/`Recv` calls so nothing is pickled on the way.

    Methods:
    --------
    send_count(dest, value, tag)
        Send a single count header to `dest`.

    recv_count(source, tag)
        Receive a count header from `source` and check it is non-negative.

    send_values(dest, values, count, tag)
        Send a float64 payload to `dest`.

    recv_values(source, count, tag)
        Receive exactly `count` float64 values from `source`.
    """

    def __init__(self, comm=None):
        # Initialize the MPI communicator
        self.comm = comm if comm is not None else MPI.COMM_WORLD
        # Get the rank (ID) of the current process
        self.rank = self.comm.Get_rank()
        # Get the total number of processes
        self.size = self.comm.Get_size()

    def identity(self) -> Identity:
        return Identity(self.rank, self.size)

    def _check_rank(self, peer: int):
        if not 0 <= peer < self.size:
            raise ProtocolViolation(
                f"rank {peer} outside communicator of size {self.size}"
            )

    def send_count(self, dest: int, value: int, tag: int = 0):
        self._check_rank(dest)
        header = np.array([value], dtype=np.int32)
        self.comm.Send([header, MPI.INT], dest=dest, tag=tag)

    def recv_count(self, source: int, tag: int = 0) -> int:
        """
        Receive a count header.

        Counts are validated here so a corrupt header can never turn into
        a negative buffer size further down the protocol.
        """
        self._check_rank(source)
        header = np.empty(1, dtype=np.int32)
        self.comm.Recv([header, MPI.INT], source=source, tag=tag)
        count = int(header[0])
        if count < 0:
            raise ProtocolViolation(f"rank {source} announced a negative count ({count})")
        return count

    def send_values(self, dest: int, values, count: int = None, tag: int = 0):
        self._check_rank(dest)
        payload = np.ascontiguousarray(values, dtype=np.float64)
        if count is not None and count != len(payload):
            raise ProtocolViolation(
                f"count {count} does not match payload of {len(payload)} values"
            )
        self.comm.Send([payload, MPI.DOUBLE], dest=dest, tag=tag)

    def recv_values(self, source: int, count: int, tag: int = 0) -> np.ndarray:
        """
        Receive exactly `count` values from `source`.

        A longer payload truncates inside MPI and a shorter one leaves the
        buffer partly filled; both are reported as ProtocolViolation.
        """
        self._check_rank(source)
        if count < 0:
            raise ProtocolViolation(f"cannot receive a negative count ({count})")

        buf = np.empty(count, dtype=np.float64)
        status = MPI.Status()
        try:
            self.comm.Recv([buf, MPI.DOUBLE], source=source, tag=tag, status=status)
        except MPI.Exception as exc:
            raise ProtocolViolation(
                f"payload from rank {source} did not fit the announced count {count}"
            ) from exc

        received = status.Get_count(MPI.DOUBLE)
        if received != count:
            raise ProtocolViolation(
                f"rank {source} announced {count} values but sent {received}"
            )
        return buf

    def abort(self, code: int = 1):
        """Tear down every rank; the others are blocked in Recv otherwise."""
        self.comm.Abort(code)
