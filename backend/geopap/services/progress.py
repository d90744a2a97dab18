# backend/geopap/services/progress.py
from typing import Callable, Optional

# progress(task, done, total); total is None when the amount of work is unknown
ProgressCallback = Callable[[str, int, Optional[int]], None]


def no_progress(task: str, done: int, total: Optional[int]) -> None:
    return None
