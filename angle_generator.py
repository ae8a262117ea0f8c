# Author      : LoadBalance contributors
# Date        : 2026-10-19
# File Name   : angle_generator.py
import time

import numpy as np


class AngleGenerator:
    """
    Generate the angles each worker contributes before balancing.

    Every rank draws its own count and values from a generator seeded
    with `seed + rank`, so two workers never produce the same stream and
    a fixed seed reproduces the whole run.

    Parameters:
    -----------
    min_angles : int
        Smallest number of angles a worker may contribute.
    max_angles : int
        Largest number of angles a worker may contribute (inclusive).
    max_angle : float
        Exclusive upper bound of the generated values; the lower bound is 0.
    seed : int
        Base seed. Defaults to the current time in seconds.
    """

    def __init__(self, min_angles=1, max_angles=50, max_angle=360.0, seed=None):
        if min_angles < 0:
            raise ValueError(f"min_angles must be non-negative, got {min_angles}")
        if max_angles < min_angles:
            raise ValueError(
                f"max_angles ({max_angles}) is smaller than min_angles ({min_angles})"
            )
        if max_angle <= 0:
            raise ValueError(f"max_angle must be positive, got {max_angle}")
        self.min_angles = min_angles
        self.max_angles = max_angles
        self.max_angle = max_angle
        self.seed = int(time.time()) if seed is None else seed

    def rng(self, rank: int) -> np.random.Generator:
        return np.random.default_rng(self.seed + rank)

    def generate(self, rank: int) -> np.ndarray:
        rng = self.rng(rank)
        # integers() excludes the high end, hence the + 1
        count = int(rng.integers(self.min_angles, self.max_angles + 1))
        return rng.uniform(0.0, self.max_angle, count)
