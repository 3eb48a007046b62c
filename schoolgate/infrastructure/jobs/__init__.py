"""Background jobs."""

from schoolgate.infrastructure.jobs.sweeper import PeriodicSweeper, SweepJob

__all__ = ["PeriodicSweeper", "SweepJob"]
