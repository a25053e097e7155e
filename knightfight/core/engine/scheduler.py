"""Deferred task scheduling keyed to action generations.

Some combat effects happen a fixed time after the action that caused them
(a delayed hit after the striking frame, the end of a capped block hold).
Each deferred task remembers the generation of the action that issued it.
Owners bump their generation on every action transition, so a task whose
action was cancelled or superseded no longer matches and is dropped when
it comes due instead of applying its effect to an unrelated state.

Core Concepts:
- Time is simulation milliseconds, advanced only by the tick callback
- Tasks are processed in chronological order, ties by scheduling order
- Nothing is cancelled explicitly; a generation change is the cancellation
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Any, Callable, Optional


@dataclass
class DeferredTask:
    """A callback scheduled to run at a point in simulation time."""

    # When this task should fire (simulation ms)
    fire_at_ms: float

    # Unique ID for stable ordering when times are equal
    sequence_id: int

    owner_id: str
    generation: int
    callback: Callable[[], None] = field(compare=False)
    description: str = ""

    def __lt__(self, other: "DeferredTask") -> bool:
        """Order by fire time, then by sequence id."""
        if self.fire_at_ms != other.fire_at_ms:
            return self.fire_at_ms < other.fire_at_ms
        return self.sequence_id < other.sequence_id


class DeferredScheduler:
    """Min-heap of deferred tasks with generation-based staleness checks.

    Args:
        generation_of: Returns the current action generation of an owner,
            or None when the owner no longer exists.
        on_stale: Called with each task dropped for a generation mismatch
    """

    def __init__(self, generation_of: Callable[[str], Optional[int]],
                 on_stale: Optional[Callable[[DeferredTask], None]] = None):
        self._generation_of = generation_of
        self._on_stale = on_stale
        self._queue: list[DeferredTask] = []
        self._current_time: float = 0.0
        self._sequence_counter: int = 0
        self._fired_count = 0
        self._stale_count = 0

    @property
    def current_time(self) -> float:
        """Current scheduler time in milliseconds."""
        return self._current_time

    @property
    def pending_count(self) -> int:
        """Number of tasks still waiting to fire."""
        return len(self._queue)

    def schedule(self,
                 delay_ms: float,
                 owner_id: str,
                 generation: int,
                 callback: Callable[[], None],
                 description: str = "") -> DeferredTask:
        """Schedule a callback to run delay_ms from now.

        Args:
            delay_ms: Delay relative to the current scheduler time
            owner_id: Fighter that issued the task
            generation: Owner's action generation at scheduling time
            callback: Effect to apply when the task fires
            description: Human readable description for debugging

        Returns:
            The created task
        """
        if delay_ms < 0:
            raise ValueError(f"delay_ms cannot be negative, got {delay_ms}")

        self._sequence_counter += 1
        task = DeferredTask(
            fire_at_ms=self._current_time + delay_ms,
            sequence_id=self._sequence_counter,
            owner_id=owner_id,
            generation=generation,
            callback=callback,
            description=description,
        )
        heapq.heappush(self._queue, task)
        return task

    def advance(self, delta_ms: float) -> list[DeferredTask]:
        """Advance time and fire every task that has come due.

        Tasks whose generation no longer matches their owner are dropped
        without running.

        Returns:
            Tasks that actually fired, in firing order
        """
        self._current_time += delta_ms
        fired: list[DeferredTask] = []

        while self._queue and self._queue[0].fire_at_ms <= self._current_time:
            task = heapq.heappop(self._queue)
            if self._generation_of(task.owner_id) != task.generation:
                self._stale_count += 1
                if self._on_stale is not None:
                    self._on_stale(task)
                continue

            task.callback()
            self._fired_count += 1
            fired.append(task)

        return fired

    def clear(self) -> None:
        """Drop every pending task. Time keeps running."""
        self._queue.clear()

    def get_stats(self) -> dict[str, Any]:
        """Get scheduler statistics for debugging/monitoring."""
        return {
            "current_time": self._current_time,
            "pending": self.pending_count,
            "fired": self._fired_count,
            "stale_dropped": self._stale_count,
        }
