import time
from datetime import timedelta
from typing import Optional


class PerformanceTimer:
    """Context manager measuring wall time of a code block with
    time.perf_counter() function.

    Example:
    >>> with PerformanceTimer() as timer:
    ...     time.sleep(0.5)
    >>> print(timer.timedelta)
    """

    def __init__(self) -> None:
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args, **kwargs):
        self.end_time = time.perf_counter()

    def __str__(self) -> str:
        return str(self.timedelta)

    @property
    def time(self) -> float:
        """
        Returns:
            float: measured time in seconds, time elapsed so far if the block is
                still running
        """
        end_time: float = (
            time.perf_counter() if self.end_time is None else self.end_time
        )
        return end_time - self.start_time

    @property
    def timedelta(self) -> timedelta:
        return timedelta(seconds=self.time)
