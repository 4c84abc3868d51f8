"""Loop budgets: predicates an exerciser polls before every iteration.

Two flavours exist. A counter allows a fixed number of iterations; a timer
allows iterations until a wall-clock duration has elapsed since it was first
polled.
"""
import time
from typing import Callable

KeepGoing = Callable[[], bool]


def make_timer(seconds: float, clock: Callable[[], float] = time.monotonic) -> KeepGoing:
    """Create a time-budget predicate.

    The deadline is anchored on the first call, not at creation, so a timer
    that is never polled never starts its clock. Once the deadline passes the
    predicate stays False.

    Args:
        seconds: Length of the budget
        clock: Time source in seconds (injectable for tests)

    Returns:
        Predicate returning True until `seconds` have elapsed

    Example:
        >>> keep_going = make_timer(900)
        >>> while keep_going():
        ...     insert_row()
    """
    deadline = None

    def keep_going() -> bool:
        nonlocal deadline
        if deadline is None:
            deadline = clock() + seconds
        return clock() < deadline

    return keep_going


def make_counter(iterations: int) -> KeepGoing:
    """Create a predicate that returns True exactly `iterations` times."""
    remaining = iterations

    def keep_going() -> bool:
        nonlocal remaining
        if remaining <= 0:
            return False
        remaining -= 1
        return True

    return keep_going


def make_budget(mode: str, iterations: int, seconds: float) -> KeepGoing:
    """Pick the budget for a run according to LOAD_MODE."""
    if mode == "timer":
        return make_timer(seconds)
    if mode == "count":
        return make_counter(iterations)
    raise ValueError(f"Unknown load mode: {mode}")
