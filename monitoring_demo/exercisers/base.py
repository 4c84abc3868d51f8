"""Base class shared by all backend exercisers."""
import time
from abc import ABC, abstractmethod

from pydantic import BaseModel

from monitoring_demo.services.budget import KeepGoing

# Name of the ephemeral table/queue/key prefix created in every backend
RESOURCE_NAME = "cf_monitoring"


class RunResult(BaseModel):
    """Outcome of one exercise run"""
    backend: str
    iterations: int
    duration_seconds: float
    torn_down: bool = False


class Exerciser(ABC):
    """Abstract base class for backend exercisers.

    An exerciser connects to one external system, ensures its ephemeral
    schema exists, writes (and possibly deletes) while the budget allows,
    tears the schema down and disconnects. Any client error propagates to
    the caller unchanged.

    Attributes:
        name: Route path and guard key, e.g. ``"mysql"``
        label: Text shown on the index page button
        style: Bootstrap button class for the index page
        has_schema: Whether the run creates something teardown can drop
    """

    name: str = ""
    label: str = ""
    style: str = "btn-default"
    has_schema: bool = False

    def __init__(self, url: str, teardown: bool = True):
        self.url = url
        self.teardown = teardown

    def run(self, keep_going: KeepGoing) -> RunResult:
        """Run the exercise loop until `keep_going` returns False.

        Args:
            keep_going: Budget predicate polled before every iteration

        Returns:
            RunResult with iteration count and duration
        """
        start_time = time.monotonic()
        iterations = self.exercise(keep_going)

        return RunResult(
            backend=self.name,
            iterations=iterations,
            duration_seconds=round(time.monotonic() - start_time, 3),
            torn_down=self.has_schema and self.teardown,
        )

    @abstractmethod
    def exercise(self, keep_going: KeepGoing) -> int:
        """Perform the backend-specific loop and return the iteration count."""
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
