import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

import structlog

log = structlog.get_logger()

_stage_depth = 0


@contextmanager
def timed_stage(
    name: str, timings: Optional[Dict[str, float]] = None
) -> Iterator[None]:
    """
    Logs the start and end of a pipeline stage with its duration.

    Nested stages are logged with their depth. When ``timings`` is given,
    the duration in milliseconds is stored under ``name``.
    """
    global _stage_depth
    depth = _stage_depth
    _stage_depth += 1
    log.info("Stage started", stage=name, depth=depth)
    start_time = time.perf_counter()
    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        _stage_depth -= 1
        if timings is not None:
            timings[name] = duration_ms
        log.info("Stage finished", stage=name, depth=depth, duration_ms=duration_ms)
