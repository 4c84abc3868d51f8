"""
Exercise runner: guarded submission of exercisers to a worker pool
"""
import asyncio
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, Optional

from monitoring_demo.core.config import Settings
from monitoring_demo.core.errors import ExerciseError
from monitoring_demo.core.logger import get_logger
from monitoring_demo.exercisers.base import Exerciser, RunResult
from monitoring_demo.services.budget import KeepGoing, make_budget
from monitoring_demo.services.guard import RunGuard

logger = get_logger(__name__)


class ExerciseRunner:
    """
    Runs exercisers on a thread pool, one run per backend at a time.

    Modes:
        sync: `run()` waits for the exercise and returns its result
        background: `run()` returns as soon as the exercise is submitted;
            the outcome is only logged

    Either way the guard entry is released by the worker itself, before the
    returned future resolves.
    """

    def __init__(
        self,
        exercisers: Dict[str, Exerciser],
        budget_factory: Callable[[str], KeepGoing],
        guard: Optional[RunGuard] = None,
        mode: str = "sync",
        max_workers: int = 7,
    ):
        if mode not in ("sync", "background"):
            raise ValueError(f"Unknown run mode: {mode}")

        self.exercisers = exercisers
        self.budget_factory = budget_factory
        self.guard = guard or RunGuard()
        self.mode = mode
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="exerciser",
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        exercisers: Dict[str, Exerciser],
        guard: Optional[RunGuard] = None,
    ) -> "ExerciseRunner":
        def budget_factory(name: str) -> KeepGoing:
            return make_budget(
                settings.LOAD_MODE,
                settings.backend(name).iterations,
                settings.LOAD_SEC,
            )

        return cls(
            exercisers,
            budget_factory,
            guard=guard,
            mode=settings.RUN_MODE,
            max_workers=settings.WORKER_POOL_SIZE,
        )

    def submit(self, name: str) -> Future:
        """
        Acquire the guard for `name` and hand the exercise to the pool

        Raises:
            KeyError: unknown backend
            BackendBusyError: a run for `name` is already in progress
        """
        exerciser = self.exercisers[name]
        self.guard.acquire(name)

        try:
            return self._executor.submit(self._execute, exerciser)
        except Exception:
            self.guard.release(name)
            raise

    async def run(self, name: str) -> Optional[RunResult]:
        """Submit and, in sync mode, wait for the result"""
        future = self.submit(name)

        if self.mode == "background":
            logger.info("Run submitted in background", backend=name)
            return None

        return await asyncio.wrap_future(future)

    def _execute(self, exerciser: Exerciser) -> RunResult:
        name = exerciser.name

        try:
            keep_going = self.budget_factory(name)
            logger.info("Run started", backend=name, mode=self.mode)

            try:
                result = exerciser.run(keep_going)
            except Exception as e:
                logger.error(
                    "Run failed",
                    backend=name,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise ExerciseError(name, str(e) or type(e).__name__) from e

            logger.info("Run finished", **result.model_dump())
            return result
        finally:
            self.guard.release(name)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
