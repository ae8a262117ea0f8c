import threading

import numpy as np
import pytest

from errors import ProtocolViolation, Starvation
from identity import Identity, Role
from localMGR import LocalFabric, run_local


def test_identity_roles():
    assert Identity(0, 4).role is Role.COORDINATOR
    assert Identity(3, 4).role is Role.WORKER
    assert list(Identity(0, 4).worker_ranks()) == [1, 2, 3]
    assert str(Identity(2, 4)) == "Worker(2)"


@pytest.mark.parametrize("rank, size", [(4, 4), (-1, 4), (0, 0)])
def test_identity_rejects_bad_ranks(rank, size):
    with pytest.raises(ValueError):
        Identity(rank, size)


def test_count_and_values_round_trip():
    fabric = LocalFabric(2, timeout=1.0)
    a, b = fabric.manager(0), fabric.manager(1)

    a.send_count(1, 3)
    a.send_values(1, [1.0, 2.0, 3.0], 3)

    count = b.recv_count(0)
    np.testing.assert_array_equal(b.recv_values(0, count), [1.0, 2.0, 3.0])


def test_sent_payload_is_copied():
    fabric = LocalFabric(2, timeout=1.0)
    values = np.array([1.0, 2.0])
    fabric.manager(0).send_values(1, values)
    values[0] = 99.0
    assert fabric.manager(1).recv_values(0, 2)[0] == 1.0


def test_fifo_per_pair():
    fabric = LocalFabric(2, timeout=1.0)
    sender, receiver = fabric.manager(1), fabric.manager(0)
    for i in range(5):
        sender.send_count(0, i)
    assert [receiver.recv_count(1) for _ in range(5)] == [0, 1, 2, 3, 4]


def test_tags_are_separate_channels():
    fabric = LocalFabric(2, timeout=1.0)
    sender, receiver = fabric.manager(1), fabric.manager(0)
    sender.send_count(0, 7, tag=1)
    sender.send_count(0, 3, tag=0)
    assert receiver.recv_count(1, tag=0) == 3
    assert receiver.recv_count(1, tag=1) == 7


def test_out_of_range_rank_is_a_protocol_violation():
    manager = LocalFabric(3).manager(0)
    with pytest.raises(ProtocolViolation):
        manager.send_count(3, 1)
    with pytest.raises(ProtocolViolation):
        manager.recv_count(-1)


def test_negative_count_is_a_protocol_violation():
    fabric = LocalFabric(2, timeout=1.0)
    fabric.manager(1).send_count(0, -4)
    with pytest.raises(ProtocolViolation):
        fabric.manager(0).recv_count(1)


def test_payload_length_mismatch_is_a_protocol_violation():
    fabric = LocalFabric(2, timeout=1.0)
    fabric.manager(1).send_values(0, [1.0, 2.0])
    with pytest.raises(ProtocolViolation):
        fabric.manager(0).recv_values(1, 5)


def test_declared_count_must_match_payload():
    with pytest.raises(ProtocolViolation):
        LocalFabric(2).manager(1).send_values(0, [1.0, 2.0], 3)


def test_header_where_payload_expected_is_a_protocol_violation():
    fabric = LocalFabric(2, timeout=1.0)
    fabric.manager(1).send_count(0, 2)
    with pytest.raises(ProtocolViolation):
        fabric.manager(0).recv_values(1, 2)


def test_receive_timeout_raises_starvation():
    fabric = LocalFabric(2, timeout=0.1)
    with pytest.raises(Starvation):
        fabric.manager(0).recv_count(1)


def test_receive_blocks_until_the_message_arrives():
    fabric = LocalFabric(2, timeout=2.0)
    timer = threading.Timer(0.1, fabric.manager(1).send_count, args=(0, 11))
    timer.start()
    try:
        assert fabric.manager(0).recv_count(1) == 11
    finally:
        timer.join()


def test_run_local_collects_results_by_rank():
    assert run_local(3, lambda t: t.rank * 10, timeout=1.0) == [0, 10, 20]


def test_run_local_reraises_the_failing_rank():
    def target(transport):
        if transport.rank == 2:
            raise RuntimeError("rank 2 died")
        # everyone else would wait forever without the abort
        return transport.recv_count(2)

    with pytest.raises(RuntimeError, match="rank 2 died"):
        run_local(3, target)
