"""Cooperative virtual-clock scheduler.

Timed behaviour (walking one tile, the enemy think delay, effect expiry,
screen-shake decay) is modelled as cancellable callbacks on a virtual
clock. The owner advances the clock explicitly, so every callback runs to
completion before the next one starts and tests are deterministic.

A task may carry a generation token; when the token no longer matches
the value returned by the scheduler's ``generation`` provider, the task
is discarded instead of run.
"""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field

from wasteland_tactics.core.exceptions import SchedulerError
from wasteland_tactics.core.logging import get_logger


logger = get_logger(__name__)


@dataclass(order=True)
class ScheduledTask:
    """A deferred callback.

    Tasks order by due time, then by insertion sequence.
    """

    due: float
    seq: int
    task_id: str = field(compare=False)
    name: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)
    token: int | None = field(default=None, compare=False)
    cancelled: bool = field(default=False, compare=False)


class Scheduler:
    """Queue of deferred callbacks driven by ``advance``.

    Example:
        >>> scheduler = Scheduler()
        >>> fired = []
        >>> _ = scheduler.schedule(0.5, lambda: fired.append("tick"), name="tick")
        >>> scheduler.advance(1.0)
        1
        >>> fired
        ['tick']
    """

    def __init__(self, generation: Callable[[], int] | None = None) -> None:
        """Initialize the scheduler.

        Args:
            generation: Provider of the current generation token; tasks
                scheduled with a stale token are skipped.
        """
        self._queue: list[ScheduledTask] = []
        self._tasks: dict[str, ScheduledTask] = {}
        self._counter = itertools.count(1)
        self._now = 0.0
        self._generation = generation

    @property
    def now(self) -> float:
        """Current virtual time in seconds."""
        return self._now

    def schedule(
        self,
        delay: float,
        callback: Callable[[], None],
        *,
        name: str,
        token: int | None = None,
    ) -> str:
        """Run ``callback`` after ``delay`` seconds of virtual time.

        Returns:
            The task id, usable with ``cancel``.

        Raises:
            SchedulerError: If ``delay`` is negative.
        """
        if delay < 0:
            raise SchedulerError("Delay cannot be negative", details={"delay": delay, "name": name})
        seq = next(self._counter)
        task = ScheduledTask(
            due=self._now + delay,
            seq=seq,
            task_id=f"task-{seq:08d}",
            name=name,
            callback=callback,
            token=token,
        )
        heapq.heappush(self._queue, task)
        self._tasks[task.task_id] = task
        return task.task_id

    def cancel(self, task_id: str) -> bool:
        """Cancel a pending task.

        Returns:
            True if the task was pending.
        """
        task = self._tasks.pop(task_id, None)
        if task is None:
            return False
        task.cancelled = True
        return True

    def cancel_named(self, name: str) -> int:
        """Cancel every pending task with the given name."""
        matching = [task_id for task_id, task in self._tasks.items() if task.name == name]
        for task_id in matching:
            self.cancel(task_id)
        return len(matching)

    def cancel_all(self) -> int:
        """Cancel every pending task."""
        count = len(self._tasks)
        for task in self._tasks.values():
            task.cancelled = True
        self._tasks.clear()
        self._queue.clear()
        return count

    def pending(self, name: str | None = None) -> list[ScheduledTask]:
        """Pending tasks in run order, optionally filtered by name."""
        tasks = sorted(self._tasks.values())
        if name is not None:
            tasks = [task for task in tasks if task.name == name]
        return tasks

    def has_pending(self, name: str) -> bool:
        return any(task.name == name for task in self._tasks.values())

    def advance(self, seconds: float) -> int:
        """Advance the clock, running every task that falls due.

        Tasks scheduled by callbacks also run if they fall due inside
        the window.

        Returns:
            Number of callbacks executed.

        Raises:
            SchedulerError: If ``seconds`` is negative.
        """
        if seconds < 0:
            raise SchedulerError("Cannot advance by a negative duration", details={"seconds": seconds})
        return self._run_until(self._now + seconds)

    def _run_until(self, deadline: float) -> int:
        executed = 0

        while self._queue and self._queue[0].due <= deadline:
            task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self._tasks.pop(task.task_id, None)
            self._now = max(self._now, task.due)
            if task.token is not None and self._generation is not None:
                current = self._generation()
                if task.token != current:
                    logger.debug("Stale task skipped", task=task.name, token=task.token, generation=current)
                    continue
            task.callback()
            executed += 1

        self._now = deadline
        return executed

    def run_until_idle(self, max_seconds: float = 3600.0) -> int:
        """Advance until no task is pending or ``max_seconds`` elapse."""
        executed = 0
        limit = self._now + max_seconds
        while self._tasks:
            next_due = min(task.due for task in self._tasks.values())
            if next_due > limit:
                break
            executed += self._run_until(max(self._now, next_due))
        return executed


__all__ = ["ScheduledTask", "Scheduler"]
