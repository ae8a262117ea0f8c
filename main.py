# Author      : LoadBalance contributors
# Date        : 2026-10-19
# File Name   : main.py
#
# Usage:
#   mpiexec -n 4 python main.py [--seed 7] [--plot balance_stats.png]
#   python main.py --local 4 [--seed 7] [--summary-csv balance.csv]
import sys

from config import RunConfig
from coordinator import Coordinator
from localMGR import run_local
from reporting import Reporter
from worker import WorkerAgent


def run_rank(transport, config: RunConfig):
    """Run whichever side of the protocol this rank's identity calls for."""
    identity = transport.identity()
    reporter = Reporter(verbose=not config.quiet)

    if not identity.is_coordinator:
        return WorkerAgent(identity, transport, config.generator(), reporter=reporter).run()

    coordinator = Coordinator(identity, transport, reporter=reporter)
    results = coordinator.run()
    if config.summary_csv:
        coordinator.summary().to_csv(config.summary_csv)
    if config.plot:
        coordinator.plot_balance_stats(config.plot)
    return results


def main(argv=None) -> int:
    config = RunConfig.from_args(argv)

    if config.local is not None:
        run_local(config.local, lambda transport: run_rank(transport, config),
                  timeout=config.timeout)
        return 0

    from mpiMGR import MPIManager

    mpi_mgr = MPIManager()
    try:
        run_rank(mpi_mgr, config)
    except Exception as exc:
        print(f"[Rank {mpi_mgr.rank}] {type(exc).__name__}: {exc}", file=sys.stderr, flush=True)
        mpi_mgr.abort(1)
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
