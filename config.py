# Author      : LoadBalance contributors
# Date        : 2026-10-19
# File Name   : config.py
import argparse
from dataclasses import dataclass

from angle_generator import AngleGenerator


@dataclass
class RunConfig:
    """Every knob of a balancing run, with the defaults used by main.py."""
    local: int = None
    min_angles: int = 1
    max_angles: int = 50
    max_angle: float = 360.0
    seed: int = None
    quiet: bool = False
    summary_csv: str = None
    plot: str = None
    timeout: float = None

    def generator(self) -> AngleGenerator:
        return AngleGenerator(
            min_angles=self.min_angles,
            max_angles=self.max_angles,
            max_angle=self.max_angle,
            seed=self.seed,
        )

    @staticmethod
    def parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Balance randomly sized angle vectors across worker ranks "
                        "and compute their sines.",
            epilog="Run under MPI with: mpiexec -n 4 python main.py",
        )
        parser.add_argument('--local', type=int, metavar='N',
                            help="simulate N ranks with threads instead of MPI")
        parser.add_argument('--min-angles', type=int, default=1)
        parser.add_argument('--max-angles', type=int, default=50)
        parser.add_argument('--max-angle', type=float, default=360.0)
        parser.add_argument('--seed', type=int,
                            help="base seed, worker r uses seed + r")
        parser.add_argument('--quiet', action='store_true')
        parser.add_argument('--summary-csv', metavar='FILE',
                            help="write contributed vs assigned counts per rank")
        parser.add_argument('--plot', metavar='FILE',
                            help="save a bar chart of contributed vs assigned counts")
        parser.add_argument('--timeout', type=float,
                            help="receive timeout in seconds (--local only)")
        return parser

    @classmethod
    def from_args(cls, argv=None) -> "RunConfig":
        parser = cls.parser()
        args = parser.parse_args(argv)
        if args.local is not None and args.local < 1:
            parser.error("--local needs at least one rank")
        if args.timeout is not None and args.local is None:
            parser.error("--timeout only applies with --local")
        return cls(**vars(args))
