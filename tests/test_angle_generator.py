import numpy as np
import pytest

from angle_generator import AngleGenerator
from balance_helpers import FixedContributions


def test_counts_and_values_stay_in_bounds():
    gen = AngleGenerator(min_angles=1, max_angles=50, max_angle=360.0, seed=42)
    for rank in range(1, 40):
        angles = gen.generate(rank)
        assert 1 <= len(angles) <= 50
        assert angles.dtype == np.float64
        assert np.all((angles >= 0.0) & (angles < 360.0))


def test_same_seed_same_rank_is_reproducible():
    a = AngleGenerator(seed=7).generate(3)
    b = AngleGenerator(seed=7).generate(3)
    np.testing.assert_array_equal(a, b)


def test_ranks_draw_different_streams():
    gen = AngleGenerator(min_angles=20, max_angles=20, seed=7)
    assert not np.array_equal(gen.generate(1), gen.generate(2))


def test_fixed_count():
    assert len(AngleGenerator(min_angles=8, max_angles=8, seed=0).generate(1)) == 8


@pytest.mark.parametrize("kwargs", [
    {"min_angles": -1},
    {"min_angles": 10, "max_angles": 5},
    {"max_angle": 0.0},
])
def test_rejects_bad_bounds(kwargs):
    with pytest.raises(ValueError):
        AngleGenerator(**kwargs)


def test_fixed_contributions_hand_out_copies():
    fixed = FixedContributions({1: [1.0, 2.0]})
    first = fixed.generate(1)
    first[0] = 99.0
    np.testing.assert_array_equal(fixed.generate(1), [1.0, 2.0])
