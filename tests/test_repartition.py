import numpy as np
import pytest

from repartition import compute_chunks, split_chunks


def lengths(chunks):
    return [length for _, length in chunks]


def test_remainder_goes_to_last_chunk():
    assert lengths(compute_chunks(17, 4)) == [4, 4, 4, 5]


def test_even_split():
    assert compute_chunks(45, 3) == [(0, 15), (15, 15), (30, 15)]


def test_zero_total_gives_empty_chunks():
    for workers in (1, 2, 7):
        assert lengths(compute_chunks(0, workers)) == [0] * workers


def test_single_worker_takes_everything():
    assert compute_chunks(5, 1) == [(0, 5)]


def test_fewer_items_than_workers():
    # base length is zero, the last worker absorbs all of it
    assert lengths(compute_chunks(3, 5)) == [0, 0, 0, 0, 3]


@pytest.mark.parametrize("total", [0, 1, 2, 9, 17, 45, 100, 101])
@pytest.mark.parametrize("workers", [1, 2, 3, 4, 8, 13])
def test_chunks_partition_the_index_range(total, workers):
    chunks = compute_chunks(total, workers)
    assert len(chunks) == workers

    covered = [i for start, length in chunks for i in range(start, start + length)]
    assert covered == list(range(total))

    sizes = lengths(chunks)
    assert all(s == total // workers for s in sizes[:-1])
    assert sizes[-1] == total // workers + total % workers


def test_is_deterministic():
    assert compute_chunks(101, 6) == compute_chunks(101, 6)


@pytest.mark.parametrize("total, workers", [(10, 0), (10, -2), (-1, 3)])
def test_rejects_out_of_contract_input(total, workers):
    with pytest.raises(ValueError):
        compute_chunks(total, workers)


def test_rejects_non_integers():
    with pytest.raises(TypeError):
        compute_chunks(10.0, 3)
    with pytest.raises(TypeError):
        compute_chunks(10, True)


def test_split_chunks_returns_read_only_views():
    values = np.arange(17, dtype=np.float64)
    parts = split_chunks(values, compute_chunks(17, 4))

    assert [len(p) for p in parts] == [4, 4, 4, 5]
    np.testing.assert_array_equal(np.concatenate(parts), values)
    with pytest.raises(ValueError):
        parts[0][0] = 42.0
    # the source array itself stays writable
    values[0] = 1.0


def test_split_chunks_rejects_mismatched_boundaries():
    with pytest.raises(ValueError):
        split_chunks(np.zeros(5), compute_chunks(6, 2))
