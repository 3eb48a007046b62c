"""Periodic cleanup of in-memory stores.

A daemon thread wakes every ``interval_seconds`` and runs its cleanup
jobs (expired cache entries, idle rate limit entries). Stores expire
lazily on read, so the sweeper only reclaims memory; correctness never
depends on it running.

Usage:
    sweeper = PeriodicSweeper(
        name="cache-sweeper",
        interval_seconds=120.0,
        jobs={"cache": lambda: cache.cleanup_expired(batch_size=500)},
        logger=logger,
    )
    sweeper.start()
    ...
    sweeper.close()
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from schoolgate.domain.protocols import LoggerProtocol

SweepJob = Callable[[], int]


class PeriodicSweeper:
    """Runs cleanup jobs on a fixed interval in a daemon thread.

    Args:
        name: Thread name (shows up in logs and thread dumps).
        interval_seconds: Time between sweeps.
        jobs: Job name -> callable returning the number of removed entries.
        logger: Structured logger.

    Raises:
        ValueError: If interval_seconds is not positive.
    """

    def __init__(
        self,
        *,
        name: str,
        interval_seconds: float,
        jobs: Mapping[str, SweepJob],
        logger: LoggerProtocol,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(
                f"interval_seconds must be positive, got {interval_seconds}"
            )
        self._name = name
        self._interval = interval_seconds
        self._jobs = dict(jobs)
        self._logger = logger
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread (no-op if already running)."""
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._sweep_loop, name=self._name, daemon=True
        )
        self._thread.start()

    def run_once(self) -> dict[str, int]:
        """Run every job once.

        A failing job is logged and reported as 0 removals; the others
        still run.

        Returns:
            dict[str, int]: Entries removed per job.
        """
        removed: dict[str, int] = {}
        for job_name, job in self._jobs.items():
            try:
                removed[job_name] = job()
            except Exception as e:  # noqa: BLE001 - one job must not stop the rest
                self._logger.error("sweep_job_failed", error=e, job=job_name)
                removed[job_name] = 0
                continue
            if removed[job_name] > 0:
                self._logger.info(
                    "sweep_completed", job=job_name, removed=removed[job_name]
                )
        return removed

    def close(self, timeout: float | None = 5.0) -> None:
        """Stop the background thread and wait for it to exit."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def _sweep_loop(self) -> None:
        while not self._stop.wait(timeout=self._interval):
            self.run_once()
